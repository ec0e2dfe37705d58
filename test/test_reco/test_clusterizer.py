"""Test the EMCAL clusterization algorithms."""

import numpy as np
import pytest

from hiana.data import Digit
from hiana.reco import (
    CalibData,
    ClusterizerNxN,
    ClusterizerV1,
    PedestalData,
    RecParam,
    clusterizer_factory,
)


def make_digits(amplitudes, times=None):
    """Builds a digit list from {abs_id: amplitude} dictionaries."""
    digits = []
    for i, (abs_id, amp) in enumerate(amplitudes.items()):
        time = 0.0 if times is None else times[abs_id]
        digits.append(Digit(id=abs_id, amplitude=amp, time=time, index_in_list=i))

    return digits


@pytest.fixture(name="blob")
def fixture_blob(geometry):
    """3x3 shower around (row 10, col 10) of super module 0."""
    amplitudes = {}
    for row in range(9, 12):
        for col in range(9, 12):
            amplitudes[geometry.get_abs_id(0, row, col)] = 0.2
    amplitudes[geometry.get_abs_id(0, 10, 10)] = 1.0

    return amplitudes


def build(geometry, bad_cells=(), **kwargs):
    """Builds a configured clusterizer."""
    rec_param = RecParam(**kwargs)
    return clusterizer_factory(
        rec_param, geometry, CalibData(), PedestalData(bad_cells=list(bad_cells))
    )


@pytest.mark.parametrize(
    "flag, cls, size",
    [(0, ClusterizerV1, None), (1, ClusterizerNxN, 1), (2, ClusterizerNxN, 2)],
)
def test_factory(geometry, flag, cls, size):
    """The clusterizer flag selects the algorithm."""
    clusterizer = build(geometry, clusterizer=flag)

    assert isinstance(clusterizer, cls)
    if size is not None:
        assert clusterizer.n_row_diff == size and clusterizer.n_col_diff == size


def test_factory_by_name(geometry):
    """Clusterizers can be requested by name."""
    assert isinstance(build(geometry, clusterizer="nxn"), ClusterizerNxN)


def test_factory_invalid(geometry):
    """Negative flags are not valid."""
    with pytest.raises(ValueError, match="not available"):
        build(geometry, clusterizer=-1)


def test_v1(geometry, blob):
    """Contiguous cells are grouped, isolated seeds make their own cluster."""
    isolated = geometry.get_abs_id(0, 20, 40)
    blob[isolated] = 0.5
    digits = make_digits(blob)

    clusterizer = build(geometry)
    rec_points = clusterizer.digits_to_clusters(digits)

    assert len(rec_points) == 2
    assert rec_points[0].multiplicity == 9
    assert rec_points[0].energy == pytest.approx(2.6)
    assert rec_points[0].n_ex_max == 1
    assert rec_points[1].cell_ids(digits).tolist() == [isolated]
    assert rec_points[1].energy == pytest.approx(0.5)

    # The symmetric shower is centered on its most energetic cell
    center = geometry.get_global_position(geometry.get_abs_id(0, 10, 10))
    assert np.allclose(rec_points[0].global_position, center, atol=0.1)
    assert rec_points[0].elips_axis[0] == pytest.approx(rec_points[0].elips_axis[1])
    assert rec_points[0].dispersion > 0.0


def test_v1_threshold(geometry):
    """Groups without a seed above the clustering threshold are dropped."""
    digits = make_digits(
        {geometry.get_abs_id(0, 5, 5): 0.08, geometry.get_abs_id(0, 5, 6): 0.07}
    )
    assert build(geometry).digits_to_clusters(digits) == []


def test_v1_time_cut(geometry):
    """Cells out of time with their neighbours are not grouped."""
    first, second = geometry.get_abs_id(0, 5, 5), geometry.get_abs_id(0, 5, 6)
    digits = make_digits({first: 0.5, second: 0.4}, times={first: 0.0, second: 0.5})

    rec_points = build(geometry, time_cut=0.1).digits_to_clusters(digits)
    assert len(rec_points) == 2

    rec_points = build(geometry, time_cut=1.0).digits_to_clusters(digits)
    assert len(rec_points) == 1


def test_nxn(geometry, blob):
    """Windows are built around seeds, in decreasing order of energy."""
    extra = geometry.get_abs_id(0, 10, 12)
    blob[extra] = 0.2
    digits = make_digits(blob)

    # The v1 algorithm merges the extra cell with the shower
    rec_points = build(geometry).digits_to_clusters(digits)
    assert len(rec_points) == 1
    assert rec_points[0].multiplicity == 10

    # The 3x3 window leaves it out, it seeds its own cluster
    rec_points = build(geometry, clusterizer="nxn").digits_to_clusters(digits)
    assert len(rec_points) == 2
    assert rec_points[0].multiplicity == 9
    assert rec_points[1].cell_ids(digits).tolist() == [extra]

    # The 5x5 window includes it
    rec_points = build(geometry, clusterizer=2).digits_to_clusters(digits)
    assert len(rec_points) == 1


def test_digit_selection(geometry, blob):
    """Bad, invalid, low energy and out of time digits are not clusterized."""
    bad = geometry.get_abs_id(0, 9, 9)
    low = geometry.get_abs_id(0, 11, 11)
    late = geometry.get_abs_id(0, 9, 11)
    blob[low] = 0.01
    blob[geometry.num_cells + 3] = 1.0
    times = {abs_id: 0.0 for abs_id in blob}
    times[late] = 2.0
    digits = make_digits(blob, times)

    clusterizer = build(geometry, bad_cells=[bad])
    rec_points = clusterizer.digits_to_clusters(digits)

    assert len(rec_points) == 1
    cell_ids = rec_points[0].cell_ids(digits).tolist()
    assert rec_points[0].multiplicity == 6
    assert bad not in cell_ids and low not in cell_ids and late not in cell_ids
    assert rec_points[0].dist_to_bad_tower == pytest.approx(np.sqrt(2.0))


def test_clear(geometry, blob):
    """The output of the last clusterization can be dropped."""
    clusterizer = build(geometry)
    clusterizer.digits_to_clusters(make_digits(blob))
    assert len(clusterizer.rec_points) == 1

    clusterizer.clear()
    assert clusterizer.rec_points == []
    assert clusterizer.digits_to_clusters([]) == []
