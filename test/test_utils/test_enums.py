"""Test the parsing of enumerated configuration options."""

import pytest

from hiana.utils.enums import ClusterizerEnum, PIDEnum, enum_factory


def test_enum_factory():
    """Names are parsed to values, regardless of their case."""
    assert enum_factory("pid", "deuteron") == PIDEnum.DEUTERON
    assert enum_factory("pid", "Helium3") == PIDEnum.HELIUM3
    assert enum_factory("clusterizer", "nxn") == ClusterizerEnum.NXN
    assert enum_factory("cluster_type", ["emcal", "phos"]) == [0, 1]
    assert enum_factory("pid", 2) == 2


def test_enum_factory_errors():
    """Unknown enumerated types and names raise."""
    with pytest.raises(ValueError):
        enum_factory("shape", "track")
    with pytest.raises(ValueError):
        enum_factory("pid", "proton")
