"""Test the track quality selections."""

import pytest

from hiana.data import Track
from hiana.utils.cuts import TrackCuts


@pytest.fixture(name="cuts")
def fixture_cuts():
    """Standard global track selection, without primary selection."""
    return TrackCuts.standard_its_tpc_2011(False, max_dca_xy=3.0)


def test_good_track(cuts, make_track):
    """A good global track passes the standard selections."""
    track = make_track()

    assert cuts.accept(track)
    assert cuts(track)
    assert TrackCuts.standard_tpc_only()(track)
    assert not cuts.accept(None)


@pytest.mark.parametrize(
    "update",
    [
        {"status": Track.TPC_REFIT_BIT},
        {"status": Track.ITS_REFIT_BIT},
        {"has_spd_hit": False},
        {"is_kink": True},
        {"tpc_crossed_rows": 60},
        {"tpc_findable": 200},
        {"tpc_chi2": 500.0},
        {"its_chi2": 200.0},
        {"dca_xy": 3.5},
        {"dca_z": 2.5},
    ],
)
def test_rejected_track(cuts, make_track, update):
    """Tracks failing any of the cuts are rejected."""
    assert not cuts.accept(make_track(**update))


def test_primary_selection(make_track):
    """The pT-dependent impact parameter cut tightens the selection."""
    cuts = TrackCuts.standard_its_tpc_2011(True)
    assert cuts.dca_xy_pt_dep == (0.0105, 0.0350, 1.1)

    # At 1 GeV/c, the maximum transverse impact parameter is 0.0455 cm
    assert cuts.accept(make_track(pt=1.0, dca_xy=0.04))
    assert not cuts.accept(make_track(pt=1.0, dca_xy=0.05))


def test_elliptic_dca(make_track):
    """TPC-only cuts apply the impact parameters cuts as an ellipse."""
    cuts = TrackCuts.standard_tpc_only()

    assert cuts.accept(make_track(dca_xy=2.0, dca_z=0.5))
    assert not cuts.accept(make_track(dca_xy=2.0, dca_z=2.0))


def test_kinematic_windows(make_track):
    """Optional kinematic windows."""
    cuts = TrackCuts(eta_range=(-0.8, 0.8), pt_range=(0.2, 20.0))

    assert cuts.accept(make_track(pt=1.0, eta=0.5))
    assert not cuts.accept(make_track(pt=1.0, eta=0.9))
    assert not cuts.accept(make_track(pt=0.1))
