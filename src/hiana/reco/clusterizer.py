"""EMCAL clusterization algorithms.

Both algorithms take a list of calibrated digits and produce a list of
:class:`RecPoint` objects:

- :class:`ClusterizerV1` groups all contiguous cells above the minimum cell
  energy which contain at least one seed above the clustering threshold;
- :class:`ClusterizerNxN` builds fixed-size windows of cells around seeds,
  taken in decreasing order of energy.
"""

from abc import ABC, abstractmethod

import numpy as np
from scipy.sparse import coo_matrix
from scipy.sparse.csgraph import connected_components

from hiana.utils.globals import CLUSTERIZER_NXN, CLUSTERIZER_V1
from hiana.utils.logger import logger

from .recpoint import RecPoint
from .unfold import ClusterUnfolder

__all__ = ["ClusterizerV1", "ClusterizerNxN", "clusterizer_factory"]


class ClusterizerBase(ABC):
    """Parent class of the EMCAL clusterizers.

    Attributes
    ----------
    name : str
        Name of the clusterizer
    geometry : EMCALGeometry
        Calorimeter geometry
    calib_data : CalibData
        Per-cell gain calibration
    pedestal_data : PedestalData
        Dead channel map
    rec_points : List[RecPoint]
        Output of the last clusterization
    """

    name = None

    def __init__(self, geometry, calib_data, pedestal_data):
        """Initialize the clusterizer.

        Parameters
        ----------
        geometry : EMCALGeometry
            Calorimeter geometry
        calib_data : CalibData
            Per-cell gain calibration
        pedestal_data : PedestalData
            Dead channel map
        """
        self.geometry = geometry
        self.calib_data = calib_data
        self.pedestal_data = pedestal_data

        self.clustering_threshold = 0.1
        self.w0 = 4.5
        self.min_e_cut = 0.05
        self.unfold = False
        self.loc_max_cut = 0.03
        self.time_cut = 1.0
        self.time_min = -1.0
        self.time_max = 1.0
        self.input_calibrated = True
        self.ss_pars = np.zeros(8)
        self.par5 = np.zeros(3)
        self.par6 = np.zeros(3)
        self.unfolder = None

        self.rec_points = []

    def configure(self, rec_param):
        """Sets the clusterization parameters.

        Parameters
        ----------
        rec_param : RecParam
            Reconstruction parameters
        """
        self.clustering_threshold = rec_param.clustering_threshold
        self.w0 = rec_param.w0
        self.min_e_cut = rec_param.min_e_cut
        self.unfold = rec_param.unfold
        self.loc_max_cut = rec_param.loc_max_cut
        self.time_cut = rec_param.time_cut
        self.time_min = rec_param.time_min
        self.time_max = rec_param.time_max
        self.input_calibrated = True

        # Shower shape parameters are only needed for the unfolding
        if self.unfold:
            self.ss_pars = np.array(rec_param.ss_pars, dtype=float)
            self.par5 = np.array(rec_param.par5, dtype=float)
            self.par6 = np.array(rec_param.par6, dtype=float)
            self.init_cluster_unfolding()

    def init_cluster_unfolding(self):
        """Builds the unfolder applied after the clusterization."""
        self.unfolder = ClusterUnfolder(self.w0, self.loc_max_cut, self.geometry)

    def clear(self):
        """Drops the output of the last clusterization."""
        self.rec_points = []

    def calibrate(self, digit):
        """Calibrated amplitude of a digit."""
        if self.input_calibrated:
            return digit.amplitude

        return digit.amplitude * self.calib_data.get_gain(digit.id)

    def select_digits(self, digits):
        """Selects the digits usable by the clusterization.

        Digits must belong to the geometry, must not be flagged as bad, and
        must be above the minimum cell energy and in the time window.

        Parameters
        ----------
        digits : List[Digit]
            Input digits

        Returns
        -------
        List[Digit]
            Usable digits
        np.ndarray
            (N) Calibrated amplitude of each usable digit
        """
        selected, amps = [], []
        for digit in digits:
            if not self.geometry.check_abs_id(digit.id):
                logger.warning("Skipping digit with invalid cell ID %d.", digit.id)
                continue
            if self.pedestal_data is not None and self.pedestal_data.is_bad(digit.id):
                continue

            amp = self.calibrate(digit)
            if amp < self.min_e_cut:
                continue
            if digit.time < self.time_min or digit.time > self.time_max:
                continue

            selected.append(digit)
            amps.append(amp)

        return selected, np.array(amps, dtype=float)

    def digits_to_clusters(self, digits):
        """Runs the clusterization.

        Parameters
        ----------
        digits : List[Digit]
            Input digits, with their `index_in_list` set

        Returns
        -------
        List[RecPoint]
            Reconstructed points
        """
        self.clear()
        selected, amps = self.select_digits(digits)
        if len(selected):
            self.rec_points = self.make_clusters(selected, amps)

        # Evaluate the cluster properties
        bad_cells = ()
        if self.pedestal_data is not None:
            bad_cells = self.pedestal_data.bad_cells
        for rec_point in self.rec_points:
            rec_point.eval_all(self.w0, digits, self.loc_max_cut, bad_cells)

        if self.unfold and self.unfolder is not None:
            self.rec_points = self.unfolder.unfold_rec_points(self.rec_points, digits)

        return self.rec_points

    def build_rec_point(self, digits, amps, members):
        """Builds a rec point from a subset of digits."""
        rec_point = RecPoint(self.geometry)
        for i in members:
            rec_point.add_digit(digits[i], amps[i])

        return rec_point

    @abstractmethod
    def make_clusters(self, digits, amps):
        """Groups the usable digits into rec points.

        Parameters
        ----------
        digits : List[Digit]
            Usable digits
        amps : np.ndarray
            (N) Calibrated amplitude of each digit

        Returns
        -------
        List[RecPoint]
            Reconstructed points
        """
        raise NotImplementedError("Must define the `make_clusters` method.")


class ClusterizerV1(ClusterizerBase):
    """Contiguous-cell clusterizer."""

    name = "v1"

    def make_clusters(self, digits, amps):
        """See :meth:`ClusterizerBase.make_clusters`."""
        # Build the adjacency graph of the digits
        num_digits = len(digits)
        rows, cols = [], []
        for i in range(num_digits):
            for j in range(i + 1, num_digits):
                if not self.geometry.are_neighbours(digits[i].id, digits[j].id):
                    continue
                if abs(digits[i].time - digits[j].time) > self.time_cut:
                    continue
                rows.append(i)
                cols.append(j)

        graph = coo_matrix(
            (np.ones(len(rows)), (rows, cols)), shape=(num_digits, num_digits)
        )
        _, labels = connected_components(graph, directed=False)

        # Only keep groups which contain a seed, highest seeds first
        rec_points = []
        order = np.argsort(-amps, kind="stable")
        done = set()
        for seed in order:
            if amps[seed] <= self.clustering_threshold:
                break
            if labels[seed] in done:
                continue
            done.add(labels[seed])

            members = [i for i in order if labels[i] == labels[seed]]
            rec_points.append(self.build_rec_point(digits, amps, members))

        return rec_points


class ClusterizerNxN(ClusterizerBase):
    """Fixed window clusterizer.

    Attributes
    ----------
    n_row_diff : int
        Half-size of the window along the rows
    n_col_diff : int
        Half-size of the window along the columns
    """

    name = "nxn"

    def __init__(self, geometry, calib_data, pedestal_data, n_row_diff=1, n_col_diff=1):
        """Initialize the clusterizer.

        Parameters
        ----------
        geometry : EMCALGeometry
            Calorimeter geometry
        calib_data : CalibData
            Per-cell gain calibration
        pedestal_data : PedestalData
            Dead channel map
        n_row_diff : int, default 1
            Half-size of the window along the rows
        n_col_diff : int, default 1
            Half-size of the window along the columns
        """
        super().__init__(geometry, calib_data, pedestal_data)
        self.n_row_diff = n_row_diff
        self.n_col_diff = n_col_diff

    def make_clusters(self, digits, amps):
        """See :meth:`ClusterizerBase.make_clusters`."""
        cell_ids = np.array([d.id for d in digits])
        sm, row, col = self.geometry.get_cell_index(cell_ids)

        times = np.array([d.time for d in digits])

        rec_points = []
        used = np.zeros(len(digits), dtype=bool)
        order = np.argsort(-amps, kind="stable")
        for seed in order:
            if amps[seed] <= self.clustering_threshold:
                break
            if used[seed]:
                continue

            window = (
                ~used
                & (sm == sm[seed])
                & (np.abs(row - row[seed]) <= self.n_row_diff)
                & (np.abs(col - col[seed]) <= self.n_col_diff)
            )
            window &= np.abs(times - digits[seed].time) <= self.time_cut

            members = [i for i in order if window[i]]
            used[members] = True
            rec_points.append(self.build_rec_point(digits, amps, members))

        return rec_points


def clusterizer_factory(rec_param, geometry, calib_data, pedestal_data):
    """Instantiates the clusterizer requested by the reconstruction parameters.

    Parameters
    ----------
    rec_param : RecParam
        Reconstruction parameters
    geometry : EMCALGeometry
        Calorimeter geometry
    calib_data : CalibData
        Per-cell gain calibration
    pedestal_data : PedestalData
        Dead channel map

    Returns
    -------
    ClusterizerBase
        Configured clusterizer
    """
    flag = rec_param.clusterizer
    if flag == CLUSTERIZER_V1:
        clusterizer = ClusterizerV1(geometry, calib_data, pedestal_data)
    elif flag == CLUSTERIZER_NXN:
        clusterizer = ClusterizerNxN(geometry, calib_data, pedestal_data)
    elif flag > CLUSTERIZER_NXN:
        clusterizer = ClusterizerNxN(
            geometry, calib_data, pedestal_data, n_row_diff=2, n_col_diff=2
        )
    else:
        raise ValueError(f"Clusterizer < {flag} > not available.")

    clusterizer.configure(rec_param)

    return clusterizer
