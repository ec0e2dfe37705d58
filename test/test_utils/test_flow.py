"""Test the event plane helpers."""

import numpy as np
import pytest

from hiana.utils.flow import (
    event_plane_angle,
    event_plane_for_candidate,
    phi_0_pi,
    q_vector,
)


def test_q_vector():
    """Q vector of particles aligned with a plane."""
    qx, qy = q_vector([0.0, np.pi])
    assert qx == pytest.approx(2.0)
    assert qy == pytest.approx(0.0, abs=1e-12)

    qx, qy = q_vector([np.pi / 4], weights=[2.0])
    assert qx == pytest.approx(0.0, abs=1e-12)
    assert qy == pytest.approx(2.0)


def test_event_plane_angle():
    """Second harmonic event plane angles."""
    assert event_plane_angle(1.0, 0.0) == 0.0
    assert event_plane_angle(0.0, 1.0) == pytest.approx(np.pi / 4)
    assert event_plane_angle(-1.0, 0.0) == pytest.approx(np.pi / 2)
    assert event_plane_angle(0.0, -1.0) == pytest.approx(-np.pi / 4)


@pytest.mark.parametrize(
    "phi, expected",
    [(0.5, 0.5), (-0.5, np.pi - 0.5), (4.0, 4.0 - np.pi), (7.0, 7.0 - 2 * np.pi)],
)
def test_phi_0_pi(phi, expected):
    """Angles are wrapped in [0, pi]."""
    assert phi_0_pi(phi) == pytest.approx(expected)


def test_candidate_event_plane():
    """The candidate contribution is removed from the Q vector."""
    qx_contrib = np.array([0.0, 1.0])
    qy_contrib = np.array([0.0, 1.0])

    # Removing the contribution of track 1 leaves Q = (1, 0)
    assert event_plane_for_candidate(1, (2.0, 1.0), qx_contrib, qy_contrib) == 0.0

    # Tracks which did not contribute leave the Q vector untouched
    angle = event_plane_for_candidate(5, (0.0, -1.0), qx_contrib, qy_contrib)
    assert angle == pytest.approx(3 * np.pi / 4)
