"""Module with data class objects which represent calorimeter information.

These copy the content of the calorimeter cell list, of the digits fed to the
clusterizers and of the calorimeter clusters stored in the event.
"""

from dataclasses import dataclass

import numpy as np

from hiana.utils.globals import DIGIT_HIGH_GAIN, EMCAL_CLUSTER

from .base import DataBase

__all__ = ["CaloCells", "Digit", "CaloCluster"]


@dataclass(eq=False)
class CaloCells(DataBase):
    """List of calibrated calorimeter cells of one event.

    Attributes
    ----------
    cell_ids : np.ndarray
        (N) Absolute ID of each cell
    amplitudes : np.ndarray
        (N) Calibrated amplitude of each cell (GeV)
    times : np.ndarray
        (N) Time of each cell (s)
    """

    cell_ids: np.ndarray = None
    amplitudes: np.ndarray = None
    times: np.ndarray = None

    # Variable-length attributes
    _var_length_attrs = (
        ("cell_ids", np.int64),
        ("amplitudes", np.float64),
        ("times", np.float64),
    )

    def __post_init__(self):
        super().__post_init__()
        assert len(self.cell_ids) == len(self.amplitudes) == len(self.times), (
            "The cell IDs, amplitudes and times must be provided for each cell."
        )

    def __len__(self):
        return len(self.cell_ids)

    def get_cell(self, index):
        """Fetch the content of one cell.

        Parameters
        ----------
        index : int
            Position of the cell in the list

        Returns
        -------
        Tuple[int, float, float]
            Absolute ID, amplitude and time of the cell, or `None` if the
            index is out of range
        """
        if index < 0 or index >= len(self):
            return None

        return (
            int(self.cell_ids[index]),
            float(self.amplitudes[index]),
            float(self.times[index]),
        )


@dataclass(eq=False)
class Digit(DataBase):
    """Calorimeter digit, the input unit of the clusterizers.

    Attributes
    ----------
    id : int
        Absolute ID of the cell
    amplitude : float
        Amplitude of the digit (GeV)
    time : float
        Time of the digit (s)
    time_r : float
        Raw time of the digit (s)
    index_in_list : int
        Position of the digit in the digit list
    type : int
        Gain type of the digit
    """

    id: int = -1
    amplitude: float = -1.0
    time: float = -1.0
    time_r: float = -1.0
    index_in_list: int = -1
    type: int = DIGIT_HIGH_GAIN


@dataclass(eq=False)
class CaloCluster(DataBase):
    """Calorimeter cluster.

    Attributes
    ----------
    id : int
        Index of the cluster in its list
    type : int
        Calorimeter which produced the cluster (EMCAL or PHOS)
    energy : float
        Cluster energy (GeV)
    position : np.ndarray
        (3) Global position of the cluster (cm)
    cell_ids : np.ndarray
        (N) Absolute IDs of the cells in the cluster
    cell_fractions : np.ndarray
        (N) Fraction of each cell amplitude attributed to the cluster
    dispersion : float
        Shower dispersion
    chi2 : float
        Chi2 of the shower shape fit (-1 if not computed)
    tof : float
        Time of the cluster (s)
    n_ex_max : int
        Number of local maxima
    m02 : float
        Square of the long axis of the shower ellipse
    m20 : float
        Square of the short axis of the shower ellipse
    dist_to_bad_channel : float
        Distance to the closest bad channel (cells)
    track_ids : np.ndarray
        (M) IDs of the tracks matched to the cluster
    """

    id: int = -1
    type: int = EMCAL_CLUSTER
    energy: float = 0.0
    position: np.ndarray = None
    cell_ids: np.ndarray = None
    cell_fractions: np.ndarray = None
    dispersion: float = -1.0
    chi2: float = -1.0
    tof: float = 0.0
    n_ex_max: int = 0
    m02: float = -1.0
    m20: float = -1.0
    dist_to_bad_channel: float = -1.0
    track_ids: np.ndarray = None

    # Fixed-length attributes
    _fixed_length_attrs = (("position", 3),)

    # Variable-length attributes
    _var_length_attrs = (
        ("cell_ids", np.int64),
        ("cell_fractions", np.float64),
        ("track_ids", np.int64),
    )

    # Attributes specifying coordinates
    _pos_attrs = ("position",)

    @property
    def is_emcal(self):
        return self.type == EMCAL_CLUSTER

    @property
    def n_cells(self):
        return len(self.cell_ids)

    @property
    def eta(self):
        """Pseudorapidity of the cluster position seen from the origin."""
        rho = np.hypot(self.position[0], self.position[1])
        return float(np.arcsinh(self.position[2] / rho))

    @property
    def phi(self):
        """Azimuthal angle of the cluster position in [0, 2pi)."""
        return float(np.arctan2(self.position[1], self.position[0]) % (2 * np.pi))

    def add_track_matched(self, track_id):
        """Append a matched track to the cluster.

        Parameters
        ----------
        track_id : int
            ID of the matched track
        """
        self.track_ids = np.append(self.track_ids, track_id).astype(np.int64)
