"""Base class of all analysis tasks."""

import os
from abc import ABC, abstractmethod

from hiana.io.write import CSVWriter

__all__ = ["AnaBase"]


class AnaBase(ABC):
    """Parent class of all analysis tasks.

    This base class performs the following functions:
    - Ensures that the necessary methods exist
    - Checks that the task is provided the necessary data products
    - Writes the tabular output of the task to CSV

    Attributes
    ----------
    name : str
        Name of the analysis task (to call it from a configuration file)
    keys : Dict[str, bool]
        Data products used by the task and whether they are required
    writers : Dict[str, CSVWriter]
        CSV writers of the task
    """

    # Name of the analysis task (as specified in the configuration)
    name = None

    # Alternative allowed names of the analysis task
    aliases = ()

    # Set of data keys needed for this analysis task to operate
    _keys = ()

    def __init__(self, append=False, overwrite=False, log_dir=None, prefix=None):
        """Initialize default analysis task properties.

        Parameters
        ----------
        append : bool, default False
            If `True`, appends existing CSV files instead of creating new ones
        overwrite : bool, default False
            If `True` and an output CSV file exists, overwrite it
        log_dir : str, optional
            Output CSV file directory (shared with driver log)
        prefix : str, optional
            Name to prefix every output CSV file with
        """
        # Every entry is identified by its index and run number
        self.update_keys({"index": True, "run": False})

        self.append_file = append
        self.overwrite_file = overwrite
        self.log_dir = log_dir
        self.output_prefix = prefix
        self.writers = {}
        self.base_dict = {}

    def initialize_writer(self, name):
        """Adds a CSV writer to the list of writers for this task.

        Parameters
        ----------
        name : str
            Name of the writer
        """
        assert len(name) > 0, "Must provide a non-empty name."
        file_name = f"{self.name}_{name}.csv"
        if self.output_prefix:
            file_name = f"{self.output_prefix}_{file_name}"
        if self.log_dir:
            file_name = os.path.join(self.log_dir, file_name)

        self.writers[name] = CSVWriter(
            file_name, append=self.append_file, overwrite=self.overwrite_file
        )

    @property
    def keys(self):
        """Dictionary of (key, necessity) pairs which determine which data keys
        are needed/optional for the task to run.

        Returns
        -------
        Dict[str, bool]
            Dictionary of (key, necessity) pairs to be used
        """
        return dict(self._keys)

    @keys.setter
    def keys(self, keys):
        self._keys = tuple(keys.items())

    def update_keys(self, update_dict):
        """Update the underlying set of keys and their necessity in place.

        Parameters
        ----------
        update_dict : Dict[str, bool]
            Dictionary of (key, necessity) pairs to update the keys with
        """
        if len(update_dict) > 0:
            keys = self.keys
            keys.update(update_dict)
            self._keys = tuple(keys.items())

    def get_base_dict(self, data):
        """Builds the entry information dictionary stored in every row.

        Parameters
        ----------
        data : dict
            Dictionary of data products

        Returns
        -------
        dict
            Dictionary of information for this entry
        """
        base_dict = {"index": data["index"]}
        if "run" in data:
            base_dict["run"] = data["run"]

        return base_dict

    def append(self, name, **kwargs):
        """Apppend a CSV log file with a set of values.

        Parameters
        ----------
        name : str
            Name of the writer
        **kwargs : dict
            Dictionary of information to save to the writer
        """
        self.writers[name].append({**self.base_dict, **kwargs})

    def __call__(self, data, entry=None):
        """Runs the analysis task on one entry.

        Parameters
        ----------
        data : dict
            Data dictionary for one entry
        entry : int, optional
            Entry to process, if the data dictionary holds several entries

        Returns
        -------
        dict
            Update to the input dictionary
        """
        data_filter = {}
        for key, req in self.keys.items():
            assert not req or key in data, (
                f"Analysis task `{self.name}` is missing an essential "
                f"input to be used: `{key}`."
            )

            if key in data:
                data_filter[key] = data[key]
                if entry is not None:
                    data_filter[key] = data[key][entry]

        self.base_dict = self.get_base_dict(data_filter)

        return self.process(data_filter)

    @abstractmethod
    def process(self, data):
        """Place-holder method to be defined in each analysis task.

        Parameters
        ----------
        data : dict
            Filtered data dictionary for one entry
        """
        raise NotImplementedError("Must define the `process` function")
