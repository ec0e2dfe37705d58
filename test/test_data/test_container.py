"""Test the object containers and their acceptance cuts."""

import numpy as np
import pytest

from hiana.data import (
    CaloCluster,
    ClusterContainer,
    ObjectContainer,
    RejectionReason,
    Track,
    TrackContainer,
)
from hiana.utils.cuts import TrackCuts
from hiana.utils.globals import PHOS_CLUSTER


@pytest.fixture(name="tracks")
def fixture_tracks(make_track):
    """Tracks with increasing transverse momentum and pseudorapidity."""
    return [
        make_track(pt=0.1, eta=0.0, id=0),
        make_track(pt=1.0, eta=0.5, id=1),
        make_track(pt=2.0, eta=1.2, id=2),
        make_track(pt=3.0, eta=-0.3, id=3),
        make_track(pt=4.0, eta=0.1, id=4, status=0),
    ]


def test_kinematic_cuts(tracks):
    """Objects outside of the kinematic windows are rejected."""
    container = TrackContainer(tracks, min_pt=0.15, eta_range=(-0.9, 0.9))

    assert container.get_n_entries() == 5
    assert container.get_n_accept_entries() == 5
    assert len(container.accepted()) == 3

    accepted, reason = container.accept_object(0)
    assert not accepted and reason == RejectionReason.PT_CUT

    # Several reasons are combined
    _, reason = container.accept(Track(momentum=[0.1, 0.0, 2.0]))
    assert reason == RejectionReason.PT_CUT | RejectionReason.ETA_CUT

    accepted, reason = container.accept_object(2)
    assert not accepted and reason == RejectionReason.ETA_CUT

    accepted, reason = container.accept_object(1)
    assert accepted and reason == RejectionReason.NONE

    view = container.accepted()
    assert [t.id for t in view] == [1, 3, 4]
    assert np.array_equal(view.accept_indices, [1, 3, 4])
    assert [t.id for t in container.all()] == [0, 1, 2, 3, 4]


def test_track_cuts(tracks):
    """Track quality cuts are applied on top of the kinematic cuts."""
    cuts = TrackCuts(require_its_refit=True, require_tpc_refit=True)
    container = TrackContainer(tracks, track_cuts=cuts, min_pt=0.15)

    accepted, reason = container.accept_object(4)
    assert not accepted
    assert reason == RejectionReason.TRACK_CUTS

    accepted, reason = container.accept(None)
    assert reason == RejectionReason.NULL_OBJECT
    assert [t.id for t in container.accepted()] == [1, 2, 3]


def test_phi_cut(make_track):
    """Azimuthal window."""
    container = TrackContainer(
        [make_track(phi=0.5), make_track(phi=2.0)], phi_range=(1.0, 3.0)
    )
    accepted, reason = container.accept_object(0)

    assert not accepted and reason & RejectionReason.PHI_CUT
    assert len(container.accepted()) == 1


def test_refill_marks_views_stale(tracks):
    """Refilling a container invalidates the views built before."""
    container = ObjectContainer(tracks)
    view = container.accepted()
    assert not view.is_stale

    container.set_objects(tracks[:2])
    assert view.is_stale
    assert not container.accepted().is_stale
    assert len(container) == 2


def test_cluster_container():
    """Clusters are selected on type, energy and time."""
    position = [0.0, 428.0, 0.0]
    clusters = [
        CaloCluster(energy=1.0, position=position),
        CaloCluster(energy=0.2, position=position),
        CaloCluster(energy=2.0, position=position, type=PHOS_CLUSTER),
        CaloCluster(energy=3.0, position=position, tof=5e-7),
    ]
    container = ClusterContainer(clusters, min_e=0.3, max_time=1e-7)

    assert [c.energy for c in container.accepted()] == [1.0]
    assert container.accept_object(1)[1] & RejectionReason.ENERGY_CUT
    assert container.accept_object(2)[1] == RejectionReason.CLUSTER_TYPE
    assert container.accept_object(3)[1] == RejectionReason.TIME_CUT

    # No type selection
    container = ClusterContainer(clusters, cluster_type=None)
    assert len(container.accepted()) == 4


def test_invalid_windows():
    """Windows must be ordered."""
    with pytest.raises(AssertionError):
        ObjectContainer(min_pt=2.0, max_pt=1.0)
    with pytest.raises(AssertionError):
        ObjectContainer(eta_range=(1.0, -1.0))


def test_single_scan(tracks, monkeypatch):
    """Building a view evaluates the cuts once per object."""
    container = TrackContainer(tracks, min_pt=0.15)
    calls = []
    accept = container.accept

    def counting_accept(obj):
        calls.append(obj)
        return accept(obj)

    monkeypatch.setattr(container, "accept", counting_accept)
    view = container.accepted()

    assert len(calls) == len(tracks)
    assert len(view) == 4
