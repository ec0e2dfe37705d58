"""Local stand-in of the conditions (calibration) database.

The calibration objects are stored under a path (e.g. `EMCAL/Calib/Data`)
and loaded either from a YAML file or from an in-memory dictionary:

.. code-block:: yaml

    EMCAL/Calib/Data:
      gains: {12: 1.02, 345: 0.98}
    EMCAL/Calib/Pedestals:
      bad_cells: [17, 1203]
"""

from dataclasses import dataclass, field
from typing import Dict

import numpy as np
import yaml

from hiana.utils.logger import logger

__all__ = [
    "CalibrationError",
    "CalibData",
    "PedestalData",
    "CalibrationDatabase",
]

# Path of the EMCAL calibration objects in the database
CALIB_DATA_PATH = "EMCAL/Calib/Data"
PEDESTAL_DATA_PATH = "EMCAL/Calib/Pedestals"

# Storage of the EMCAL calibration objects when reading from the grid
GRID_CALIB_STORAGE = "alien://Folder=/alice/data/2010/OCDB"


class CalibrationError(RuntimeError):
    """Raised when a required calibration object is not available."""


@dataclass
class CalibData:
    """Per-cell gain calibration of the EMCAL.

    Attributes
    ----------
    gains : Dict[int, float]
        Gain correction of each cell, cells not listed have a unit gain
    """

    gains: Dict[int, float] = field(default_factory=dict)

    def get_gain(self, abs_id):
        return self.gains.get(int(abs_id), 1.0)


@dataclass
class PedestalData:
    """Dead channel map of the EMCAL.

    Attributes
    ----------
    bad_cells : np.ndarray
        (B) Absolute IDs of the dead or noisy cells
    """

    bad_cells: np.ndarray = None

    def __post_init__(self):
        if self.bad_cells is None:
            self.bad_cells = np.empty(0, dtype=np.int64)
        self.bad_cells = np.asarray(self.bad_cells, dtype=np.int64)

    def is_bad(self, abs_id):
        """Whether cell(s) are flagged as bad."""
        return np.isin(abs_id, self.bad_cells)


class CalibrationDatabase:
    """Minimal conditions database.

    Attributes
    ----------
    default_storage : str
        Default storage path (e.g. 'raw://', 'local://...', 'alien://...')
    specific_storages : Dict[str, str]
        Storage used for specific object paths
    run : int
        Current run number
    """

    # Known calibration object types
    _object_types = (
        (CALIB_DATA_PATH, CalibData),
        (PEDESTAL_DATA_PATH, PedestalData),
    )

    def __init__(self, entries=None, file_name=None, default_storage="raw://"):
        """Initialize the database.

        Parameters
        ----------
        entries : dict, optional
            Dictionary which maps object paths onto their content
        file_name : str, optional
            Path to a YAML file which maps object paths onto their content
        default_storage : str, default 'raw://'
            Default storage path
        """
        assert (
            entries is None or file_name is None
        ), "Provide the calibration entries or a file name, not both."

        self._entries = {}
        if file_name is not None:
            with open(file_name, "r", encoding="utf-8") as f:
                entries = yaml.safe_load(f)
        if entries is not None:
            self._entries = dict(entries)

        self.default_storage = default_storage
        self.specific_storages = {}
        self.run = -1

    def set_default_storage(self, storage):
        """Set the default storage path."""
        self.default_storage = storage
        logger.info("Default storage %s", storage)

    def set_specific_storage(self, path, storage):
        """Set the storage used for a given object path."""
        self.specific_storages[path] = storage

    def get_storage(self, path):
        """Storage from which an object path is read."""
        return self.specific_storages.get(path, self.default_storage)

    def set_run(self, run):
        """Set the current run number."""
        self.run = run

    def get(self, path):
        """Fetch the object stored under a given path.

        Parameters
        ----------
        path : str
            Path of the object in the database

        Returns
        -------
        object
            Calibration object, `None` if the path is not found
        """
        if path not in self._entries or self._entries[path] is None:
            logger.warning(
                "No object found under %s in %s (run %d).",
                path,
                self.get_storage(path),
                self.run,
            )
            return None

        content = self._entries[path]
        object_types = dict(self._object_types)
        if path in object_types and isinstance(content, dict):
            return object_types[path](**content)

        return content
