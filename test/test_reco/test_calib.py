"""Test the local calibration database."""

import numpy as np
import pytest
import yaml

from hiana.reco import CalibData, CalibrationDatabase, PedestalData
from hiana.reco.calib import CALIB_DATA_PATH, PEDESTAL_DATA_PATH


def test_entries(calib_entries):
    """Known paths are built into calibration objects."""
    db = CalibrationDatabase(entries=calib_entries)
    db.set_run(1000)

    calib = db.get(CALIB_DATA_PATH)
    assert isinstance(calib, CalibData)
    assert calib.get_gain(12) == 1.0

    pedestals = db.get(PEDESTAL_DATA_PATH)
    assert isinstance(pedestals, PedestalData)
    assert not pedestals.is_bad(12)


def test_file(tmp_path):
    """The database content can be read from a YAML file."""
    file_name = tmp_path / "calib.yaml"
    file_name.write_text(
        yaml.dump(
            {
                CALIB_DATA_PATH: {"gains": {12: 1.5}},
                PEDESTAL_DATA_PATH: {"bad_cells": [3, 4]},
                "EMCAL/Other": [1, 2],
            }
        )
    )
    db = CalibrationDatabase(file_name=str(file_name))

    assert db.get(CALIB_DATA_PATH).get_gain(12) == 1.5
    assert np.array_equal(db.get(PEDESTAL_DATA_PATH).is_bad([2, 3]), [False, True])
    assert db.get("EMCAL/Other") == [1, 2]


def test_missing():
    """Missing objects are not found."""
    db = CalibrationDatabase()
    assert db.get(CALIB_DATA_PATH) is None

    with pytest.raises(AssertionError):
        CalibrationDatabase(entries={}, file_name="calib.yaml")


def test_storages():
    """Objects are read from their specific storage, or the default one."""
    db = CalibrationDatabase(default_storage="local://ocdb")
    db.set_specific_storage(CALIB_DATA_PATH, "alien://Folder=/ocdb")

    assert db.get_storage(CALIB_DATA_PATH) == "alien://Folder=/ocdb"
    assert db.get_storage(PEDESTAL_DATA_PATH) == "local://ocdb"

    db.set_default_storage("raw://")
    assert db.get_storage(PEDESTAL_DATA_PATH) == "raw://"
