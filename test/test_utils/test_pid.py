"""Test the particle identification helpers."""

import numpy as np
import pytest

from hiana.utils.globals import DEUT_PID, HE3_PID, PID_MASSES, SPEED_OF_LIGHT, TRIT_PID
from hiana.utils.pid import (
    bethe_bloch_aleph,
    expected_beta,
    expected_tpc_signal,
    tof_beta,
    tof_mass,
    tof_pull,
    tpc_pull,
)


def test_bethe_bloch_decreasing():
    """The energy loss decreases with beta * gamma below the minimum."""
    bg = np.array([0.3, 0.5, 1.0, 2.0])
    signal = bethe_bloch_aleph(bg, 1.45802, 27.4992, 4.00313e-15, 2.48485, 8.31768)

    assert np.all(np.diff(signal) < 0)


def test_expected_tpc_signal():
    """Heavier nuclei lose more energy at the same momentum."""
    deuteron = expected_tpc_signal(1.5, DEUT_PID)
    triton = expected_tpc_signal(1.5, TRIT_PID)
    helium3 = expected_tpc_signal(1.5, HE3_PID)

    assert 10.0 < deuteron < triton
    assert helium3 > deuteron

    with pytest.raises(AssertionError):
        expected_tpc_signal(1.5, 0)


def test_tpc_pull():
    """Pulls are expressed in units of the relative resolution."""
    assert tpc_pull(100.0, 100.0) == 0.0
    assert tpc_pull(107.0, 100.0) == pytest.approx(1.0)
    assert tpc_pull(79.0, 100.0) == pytest.approx(-3.0)


def test_tof_mass():
    """The TOF mass of a track with the expected velocity is the nucleus mass."""
    p, length = 1.5, 370.0
    beta = expected_beta(p, DEUT_PID)
    tof = length / (SPEED_OF_LIGHT * beta)

    assert tof_beta(length, tof) == pytest.approx(beta)
    assert tof_mass(p, beta) == pytest.approx(PID_MASSES[DEUT_PID])
    assert tof_pull(beta, beta) == 0.0


def test_unphysical_velocity():
    """Unphysical velocities do not yield a mass."""
    assert np.isnan(tof_mass(1.0, 1.0))
    assert np.isnan(tof_mass(1.0, 1.2))
    assert np.isnan(tof_mass(1.0, 0.0))
    assert tof_beta(370.0, 0.0) == 0.0
    assert tof_beta(370.0, -10.0) == 0.0
