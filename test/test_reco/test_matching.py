"""Test the track to cluster matching."""

import numpy as np
import pytest

from hiana.data import CaloCluster
from hiana.reco import RecoUtils


@pytest.fixture(name="clusters")
def fixture_clusters(geometry):
    """Two clusters in different super modules."""
    first = geometry.get_abs_id(0, 10, 10)
    second = geometry.get_abs_id(3, 5, 20)

    return [
        CaloCluster(energy=1.0, position=geometry.get_global_position(first)),
        CaloCluster(energy=1.0, position=geometry.get_global_position(second)),
    ]


def test_find_matches(clusters, make_event, make_track):
    """Clusters are matched to the closest track within the cuts."""
    target = clusters[0]
    tracks = [
        make_track(eta=target.eta + 0.5, phi=target.phi, id=0),
        make_track(eta=target.eta + 0.01, phi=target.phi, id=1),
        make_track(eta=target.eta, phi=target.phi + 0.005, id=2),
    ]
    matcher = RecoUtils()
    matcher.find_matches(make_event(tracks), clusters)

    assert matcher.get_matched_track_index(0) == 2
    assert matcher.get_matched_residuals(0) == pytest.approx((0.0, -0.005), abs=1e-9)
    assert matcher.get_matched_track_index(1) == -1
    assert matcher.get_matched_residuals(1) is None
    assert matcher.get_matched_track_index(5) == -1


def test_min_track_pt(clusters, make_event, make_track):
    """Tracks below the minimum transverse momentum are not matched."""
    target = clusters[0]
    tracks = [
        make_track(pt=0.1, eta=target.eta, phi=target.phi),
        make_track(pt=2.0, eta=target.eta + 0.02, phi=target.phi),
    ]
    matcher = RecoUtils(min_track_pt=0.5)
    matcher.find_matches(make_event(tracks), clusters)

    # Indexes refer to the position of the track in the event
    assert matcher.get_matched_track_index(0) == 1


def test_no_tracks(clusters, make_event):
    """Nothing is matched without tracks."""
    matcher = RecoUtils()
    matcher.find_matches(make_event([]), clusters)

    assert np.all(matcher.matched_track_index == -1)
