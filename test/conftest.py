"""Sets up fixtures general to the entire test suite of this package.

This file is read during the collection phase of pytest when running anything
inside this directory.
"""

import numpy as np
import pytest

from hiana.data import CaloCells, Event, EventPlane, Track, Vertex
from hiana.geo import GeoManager
from hiana.utils.globals import TRIGGER_CENTRAL


@pytest.fixture(autouse=True)
def reset_geometry():
    """Drop the shared geometry instances between tests."""
    GeoManager.reset()
    yield
    GeoManager.reset()


@pytest.fixture(name="rng")
def fixture_rng():
    """Random number generator with a fixed seed, so there are no surprises."""
    return np.random.default_rng(seed=0)


@pytest.fixture(name="geometry")
def fixture_geometry():
    """Shared 4 super module EMCAL geometry."""
    return GeoManager.get_instance("EMCAL_FIRSTYEARV1")


@pytest.fixture(name="make_track")
def fixture_make_track():
    """Factory of good quality global tracks.

    The track is defined by its transverse momentum, pseudorapidity and
    azimuthal angle. Any other attribute can be overridden.
    """

    def make_track(pt=1.0, eta=0.0, phi=0.0, **kwargs):
        momentum = pt * np.array([np.cos(phi), np.sin(phi), np.sinh(eta)])
        cfg = dict(
            id=0,
            momentum=momentum,
            charge=1,
            status=Track.ITS_REFIT_BIT | Track.TPC_REFIT_BIT,
            tpc_ncls=100,
            tpc_crossed_rows=100,
            tpc_findable=110,
            tpc_chi2=100.0,
            its_ncls=4,
            its_chi2=4.0,
            has_spd_hit=True,
            dca_xy=0.01,
            dca_z=0.01,
        )
        cfg.update(kwargs)

        return Track(**cfg)

    return make_track


@pytest.fixture(name="make_event")
def fixture_make_event():
    """Factory of central events with a good vertex and an event plane."""

    def make_event(tracks=(), **kwargs):
        cfg = dict(
            run=1000,
            index=0,
            tracks=list(tracks),
            vertex_tracks=Vertex(position=[0.0, 0.0, 1.0], n_contributors=10),
            centrality=5.0,
            trigger_mask=TRIGGER_CENTRAL,
            event_plane=EventPlane(
                q_v0a=[1.0, 0.0],
                q_v0c=[0.0, 1.0],
                q_v0m=[1.0, 1.0],
                q_tpc=[2.0, 0.0],
                qx_contrib=[0.5],
                qy_contrib=[0.0],
            ),
        )
        cfg.update(kwargs)

        return Event(**cfg)

    return make_event


@pytest.fixture(name="make_cells")
def fixture_make_cells():
    """Factory of EMCAL cell lists from {abs_id: amplitude} dictionaries."""

    def make_cells(amplitudes, time=0.0):
        ids = list(amplitudes.keys())
        return CaloCells(
            cell_ids=ids,
            amplitudes=[amplitudes[i] for i in ids],
            times=[time] * len(ids),
        )

    return make_cells


@pytest.fixture(name="calib_entries")
def fixture_calib_entries():
    """Minimal calibration database content (unit gains, no bad cells)."""
    return {
        "EMCAL/Calib/Data": {"gains": {}},
        "EMCAL/Calib/Pedestals": {"bad_cells": []},
    }
