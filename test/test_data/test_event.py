"""Test the event data structures."""

import numpy as np
import pytest

from hiana.data import CaloCells, CaloCluster, Event, Track


def test_track_kinematics(make_track):
    """Derived kinematic properties of tracks."""
    track = make_track(pt=2.0, eta=0.5, phi=-0.5)

    assert track.pt == pytest.approx(2.0)
    assert track.eta == pytest.approx(0.5)
    assert track.phi == pytest.approx(2 * np.pi - 0.5)
    assert track.p == pytest.approx(2.0 * np.cosh(0.5))
    assert track.its_refit and track.tpc_refit
    assert not track.has_tof_out
    assert not track.has_inner_param

    track.status |= Track.TOF_OUT_BIT
    assert track.has_tof_out


def test_track_defaults():
    """Array attributes get their own default values."""
    first, second = Track(), Track()

    assert first.momentum.shape == (3,)
    assert first.momentum is not second.momentum
    assert first == second


def test_cells():
    """Cell content access."""
    cells = CaloCells(cell_ids=[3, 7], amplitudes=[0.5, 1.0], times=[0.0, 1e-8])

    assert len(cells) == 2
    assert cells.get_cell(1) == (7, 1.0, 1e-8)
    assert cells.get_cell(2) is None
    assert cells.get_cell(-1) is None

    with pytest.raises(AssertionError):
        CaloCells(cell_ids=[1, 2], amplitudes=[0.5], times=[0.0])


def test_cluster():
    """Cluster position and track matching."""
    cluster = CaloCluster(energy=1.0, position=[0.0, 100.0, 100.0], cell_ids=[1, 2])

    assert cluster.is_emcal
    assert cluster.n_cells == 2
    assert cluster.phi == pytest.approx(np.pi / 2)
    assert cluster.eta == pytest.approx(np.arcsinh(1.0))

    cluster.add_track_matched(4)
    assert np.array_equal(cluster.track_ids, [4])

    row = cluster.scalar_dict(["energy", "position"])
    assert row == {
        "energy": 1.0,
        "position_x": 0.0,
        "position_y": 100.0,
        "position_z": 100.0,
    }


def test_event(make_event, make_track):
    """Event properties."""
    event = make_event([make_track(id=0), make_track(id=1)])

    assert event.is_esd
    assert event.n_tracks == 2
    assert event.get_track(1).id == 1
    assert event.get_track(2) is None
    assert event.vertex_tracks.z == 1.0
    assert len(event.cells) == 0

    assert not make_event(input_type="aod").is_esd
    with pytest.raises(AssertionError):
        Event(input_type="raw")
