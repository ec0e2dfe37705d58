"""Module to write analysis tables to CSV files."""

import csv
import os

import numpy as np

__all__ = ["CSVWriter"]


class CSVWriter:
    """Writes rows of scalar values to a CSV file.

    The header of the file is defined by the keys of the first row written to
    it. Every subsequent row must provide the same keys (missing keys may be
    tolerated, in which case they are filled with -1).

    Typical usage:

    .. code-block:: python

        writer = CSVWriter("nuclei_flow_candidates.csv", overwrite=True)
        writer.append({"pt": 1.2, "mass": 1.87})
    """

    name = "csv"

    def __init__(
        self, file_name="output.csv", overwrite=False, append=False, accept_missing=False
    ):
        """Initialize the basics of the output file.

        Parameters
        ----------
        file_name : str, default 'output.csv'
            Name of the output CSV file
        overwrite : bool, default False
            If `True`, overwrite the output file if it already exists
        append : bool, default False
            If `True`, add more rows to an existing CSV file
        accept_missing : bool, default False
            Tolerate rows with missing keys
        """
        # Check that output file does not already exist, if requested
        if not overwrite and not append and os.path.isfile(file_name):
            raise FileExistsError(f"File with name {file_name} already exists.")

        self.file_name = file_name
        self.append_file = append
        self.accept_missing = accept_missing
        self.result_keys = None
        self.num_rows = 0
        if self.append_file:
            if not os.path.isfile(file_name):
                raise FileNotFoundError(
                    f"File not found at path: {file_name}. When using "
                    "`append=True` in CSVWriter, the file must exist at "
                    "the prescribed path before data is written to it."
                )

            with open(self.file_name, "r", encoding="utf-8", newline="") as in_file:
                self.result_keys = next(csv.reader(in_file), None)

    def create(self, result_blob):
        """Initialize the header of the CSV file, record the keys to be stored.

        Parameters
        ----------
        result_blob : dict
            Dictionary of values of the first row
        """
        self.result_keys = list(result_blob.keys())
        dir_name = os.path.dirname(self.file_name)
        if dir_name:
            os.makedirs(dir_name, exist_ok=True)

        with open(self.file_name, "w", encoding="utf-8", newline="") as out_file:
            csv.writer(out_file).writerow(self.result_keys)

    def append(self, result_blob):
        """Append one row to the CSV file.

        Parameters
        ----------
        result_blob : dict
            Dictionary of values of the row
        """
        if self.result_keys is None:
            self.create(result_blob)

        elif list(result_blob.keys()) != self.result_keys:
            missing = set(self.result_keys).difference(result_blob.keys())
            excess = set(result_blob.keys()).difference(self.result_keys)
            if len(excess):
                raise KeyError(
                    "There are keys in this row which were not present when "
                    f"the CSV file was initialized. New keys: {sorted(excess)}"
                )
            if len(missing) and not self.accept_missing:
                raise KeyError(
                    "There are keys missing in this row which were present "
                    f"when the CSV file was initialized: {sorted(missing)}"
                )

        row = [self.format(result_blob.get(k, -1)) for k in self.result_keys]
        with open(self.file_name, "a", encoding="utf-8", newline="") as out_file:
            csv.writer(out_file).writerow(row)

        self.num_rows += 1

    @staticmethod
    def format(value):
        """Converts numpy scalars to their python equivalent."""
        if isinstance(value, np.generic):
            return value.item()

        return value
