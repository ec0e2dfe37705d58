"""Test the EMCAL geometry and its manager."""

import numpy as np
import pytest

from hiana.geo import EMCALGeometry, GeoManager, geo_factory


def test_geo_factory():
    """Geometries are built from their configuration file."""
    geo = geo_factory("emcal_completev1")

    assert geo.name == "EMCAL_COMPLETEV1"
    assert geo.num_super_modules == 10
    assert geo.num_cells == 10 * 24 * 48

    with pytest.raises(ValueError):
        geo_factory("EMCAL_UNKNOWN")


def test_geo_manager():
    """The manager shares one instance per geometry name."""
    assert not GeoManager.is_initialized("EMCAL_FIRSTYEARV1")
    assert GeoManager.get_instance_if_initialized("EMCAL_FIRSTYEARV1") is None

    geo = GeoManager.get_instance("EMCAL_FIRSTYEARV1")
    assert GeoManager.get_instance("emcal_firstyearv1") is geo
    assert GeoManager.is_initialized("EMCAL_FIRSTYEARV1")
    assert geo.num_super_modules == 4

    GeoManager.reset()
    assert not GeoManager.is_initialized("EMCAL_FIRSTYEARV1")


def test_cell_index(geometry):
    """Absolute IDs map onto (super module, row, column)."""
    abs_id = geometry.get_abs_id(2, 5, 17)

    assert abs_id == 2 * 1152 + 5 * 48 + 17
    assert geometry.get_cell_index(abs_id) == (2, 5, 17)
    assert geometry.get_super_module(abs_id) == 2

    sm, row, col = geometry.get_cell_index(np.array([0, 49, 1152]))
    assert np.array_equal(sm, [0, 0, 1])
    assert np.array_equal(row, [0, 1, 0])
    assert np.array_equal(col, [0, 1, 0])

    assert geometry.check_abs_id(0)
    assert not geometry.check_abs_id(geometry.num_cells)
    assert not geometry.check_abs_id(-1)
    with pytest.raises(ValueError):
        geometry.get_cell_index(geometry.num_cells)


def test_cell_eta_phi(geometry):
    """Cell centers of even (odd) super modules are at positive (negative) eta."""
    eta, phi = geometry.get_cell_eta_phi(0)
    assert eta == pytest.approx(0.5 * 0.7 / 48)
    assert phi == pytest.approx(np.radians(80.0 + 0.5 * 20.0 / 24))

    eta, phi = geometry.get_cell_eta_phi(geometry.get_abs_id(1, 0, 47))
    assert eta == pytest.approx(-0.5 * 0.7 / 48)
    assert phi == pytest.approx(np.radians(80.0 + 0.5 * 20.0 / 24))

    _, phi = geometry.get_cell_eta_phi(geometry.get_abs_id(2, 23, 0))
    assert phi == pytest.approx(np.radians(80.0 + 20.0 + 23.5 * 20.0 / 24))


def test_global_position(geometry):
    """Global positions are at the calorimeter radius, and can be misaligned."""
    abs_id = geometry.get_abs_id(0, 10, 10)
    eta, phi = geometry.get_cell_eta_phi(abs_id)
    pos = geometry.get_global_position(abs_id)

    assert np.hypot(pos[0], pos[1]) == pytest.approx(geometry.radius)
    assert np.arctan2(pos[1], pos[0]) == pytest.approx(phi)
    assert np.arcsinh(pos[2] / geometry.radius) == pytest.approx(eta)

    shift = np.eye(4)
    shift[:3, 3] = [1.0, 2.0, 3.0]
    geometry.set_misal_matrix(shift, 0)
    assert np.allclose(geometry.get_global_position(abs_id), pos + [1.0, 2.0, 3.0])
    assert geometry.get_misal_matrix(0) is not None
    assert geometry.get_misal_matrix(1) is None

    geometry.reset_misalignment()
    assert np.allclose(geometry.get_global_position(abs_id), pos)

    with pytest.raises(AssertionError):
        geometry.set_misal_matrix(np.eye(3), 0)
    with pytest.raises(AssertionError):
        geometry.set_misal_matrix(np.eye(4), 4)


def test_neighbours(geometry):
    """Cells sharing a side or a corner are neighbours."""
    center = geometry.get_abs_id(0, 10, 10)

    assert geometry.are_neighbours(center, geometry.get_abs_id(0, 11, 11))
    assert geometry.are_neighbours(center, geometry.get_abs_id(0, 10, 9))
    assert not geometry.are_neighbours(center, center)
    assert not geometry.are_neighbours(center, geometry.get_abs_id(0, 10, 12))
    assert not geometry.are_neighbours(center, geometry.get_abs_id(2, 10, 10))

    assert geometry.cell_distance(center, geometry.get_abs_id(0, 13, 14)) == 5.0
    assert geometry.cell_distance(center, geometry.get_abs_id(1, 10, 10)) == np.inf


def test_invalid_geometry():
    """Geometries need cells."""
    with pytest.raises(AssertionError):
        EMCALGeometry(name="empty", num_super_modules=0)
