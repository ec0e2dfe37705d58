"""Reconstructed calorimeter points and shower shape evaluation."""

from dataclasses import dataclass, field

import numpy as np

__all__ = [
    "RecPoint",
    "log_weights",
    "log_weighted_position",
    "shower_shape",
    "local_maxima",
    "distance_to_bad_cells",
]

# Default distance to the closest bad cell, when there is none
NO_BAD_CELL_DIST = 10000.0


def log_weights(energies, w0):
    """Logarithmic weights of the cells of a cluster.

    Parameters
    ----------
    energies : np.ndarray
        (N) Energy deposited in each cell
    w0 : float
        Logarithmic weight parameter

    Returns
    -------
    np.ndarray
        (N) Weight of each cell
    """
    energies = np.asarray(energies, dtype=float)
    total = np.sum(energies)
    weights = np.zeros(len(energies))
    if total <= 0.0:
        return weights

    valid = energies > 0.0
    weights[valid] = np.maximum(0.0, w0 + np.log(energies[valid] / total))

    return weights


def log_weighted_position(geometry, cell_ids, energies, w0):
    """Global position of a cluster with logarithmic weighting.

    Falls back to the position of the most energetic cell if no cell
    carries a positive weight.

    Parameters
    ----------
    geometry : EMCALGeometry
        Calorimeter geometry
    cell_ids : np.ndarray
        (N) Absolute ID of each cell
    energies : np.ndarray
        (N) Energy deposited in each cell
    w0 : float
        Logarithmic weight parameter

    Returns
    -------
    np.ndarray
        (3) Global position (cm)
    """
    positions = np.vstack([geometry.get_global_position(i) for i in cell_ids])
    weights = log_weights(energies, w0)
    if np.sum(weights) <= 0.0:
        return positions[np.argmax(energies)]

    return np.average(positions, axis=0, weights=weights)


def shower_shape(geometry, cell_ids, energies, w0):
    """Dispersion and ellipse axes of a cluster, in cell units.

    The moments are computed in the (column, row) plane of the super module,
    with logarithmic weights.

    Parameters
    ----------
    geometry : EMCALGeometry
        Calorimeter geometry
    cell_ids : np.ndarray
        (N) Absolute ID of each cell
    energies : np.ndarray
        (N) Energy deposited in each cell
    w0 : float
        Logarithmic weight parameter

    Returns
    -------
    float
        Dispersion
    float
        Long axis of the shower ellipse
    float
        Short axis of the shower ellipse
    """
    weights = log_weights(energies, w0)
    wtot = np.sum(weights)
    if wtot <= 0.0:
        return 0.0, 0.0, 0.0

    _, row, col = geometry.get_cell_index(np.asarray(cell_ids))
    col, row = col.astype(float), row.astype(float)
    mean_col = np.sum(weights * col) / wtot
    mean_row = np.sum(weights * row) / wtot

    d = np.sum(weights * ((col - mean_col) ** 2 + (row - mean_row) ** 2)) / wtot
    dispersion = np.sqrt(max(d, 0.0))

    dxx = np.sum(weights * col * col) / wtot - mean_col**2
    dzz = np.sum(weights * row * row) / wtot - mean_row**2
    dxz = np.sum(weights * col * row) / wtot - mean_col * mean_row
    root = np.sqrt(0.25 * (dxx - dzz) ** 2 + dxz**2)
    lambda0 = np.sqrt(max(0.5 * (dxx + dzz) + root, 0.0))
    lambda1 = np.sqrt(max(0.5 * (dxx + dzz) - root, 0.0))

    return float(dispersion), float(lambda0), float(lambda1)


def local_maxima(geometry, cell_ids, energies, loc_max_cut):
    """Flags the cells of a cluster which are local maxima.

    A cell is not a local maximum if one of its neighbours holds more than
    `loc_max_cut` above its own energy.

    Parameters
    ----------
    geometry : EMCALGeometry
        Calorimeter geometry
    cell_ids : np.ndarray
        (N) Absolute ID of each cell
    energies : np.ndarray
        (N) Energy deposited in each cell
    loc_max_cut : float
        Minimum energy difference between a maximum and its neighbours

    Returns
    -------
    np.ndarray
        (N) Boolean mask of the local maxima
    """
    num_cells = len(cell_ids)
    is_max = np.ones(num_cells, dtype=bool)
    for i in range(num_cells):
        for j in range(i + 1, num_cells):
            if not geometry.are_neighbours(cell_ids[i], cell_ids[j]):
                continue
            if energies[i] - energies[j] > loc_max_cut:
                is_max[j] = False
            if energies[j] - energies[i] > loc_max_cut:
                is_max[i] = False

    return is_max


def distance_to_bad_cells(geometry, abs_id, bad_cells):
    """Distance from a cell to the closest bad cell of its super module.

    Parameters
    ----------
    geometry : EMCALGeometry
        Calorimeter geometry
    abs_id : int
        Absolute ID of the reference cell
    bad_cells : np.ndarray
        (B) Absolute IDs of the bad cells

    Returns
    -------
    float
        Distance in cell units
    """
    dist = NO_BAD_CELL_DIST
    for bad_id in bad_cells:
        dist = min(dist, geometry.cell_distance(abs_id, int(bad_id)))

    return dist


@dataclass
class RecPoint:
    """Cluster of digits produced by a clusterizer.

    Attributes
    ----------
    geometry : EMCALGeometry
        Calorimeter geometry
    digits_list : list
        Index of each digit of the cluster in the digit list
    energies_list : list
        Energy attributed to each digit of the cluster
    time : float
        Time of the most energetic digit (s)
    n_ex_max : int
        Number of local maxima
    global_position : np.ndarray
        (3) Global position (cm)
    dispersion : float
        Shower dispersion
    elips_axis : np.ndarray
        (2) Long and short axes of the shower ellipse
    dist_to_bad_tower : float
        Distance from the most energetic cell to the closest bad cell
    """

    geometry: object
    digits_list: list = field(default_factory=list)
    energies_list: list = field(default_factory=list)
    time: float = 0.0
    n_ex_max: int = 0
    global_position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    dispersion: float = 0.0
    elips_axis: np.ndarray = field(default_factory=lambda: np.zeros(2))
    dist_to_bad_tower: float = NO_BAD_CELL_DIST

    _max_energy: float = field(default=-np.inf, repr=False)

    def add_digit(self, digit, energy):
        """Adds a digit to the cluster.

        Parameters
        ----------
        digit : Digit
            Digit to add
        energy : float
            Energy of the digit attributed to this cluster
        """
        self.digits_list.append(digit.index_in_list)
        self.energies_list.append(energy)
        if energy > self._max_energy:
            self._max_energy = energy
            self.time = digit.time

    @property
    def multiplicity(self):
        return len(self.digits_list)

    @property
    def energy(self):
        return float(np.sum(self.energies_list))

    def cell_ids(self, digits):
        """Absolute IDs of the cells of the cluster."""
        return np.array([digits[i].id for i in self.digits_list], dtype=np.int64)

    def eval_global_position(self, w0, digits):
        """Evaluates the global position of the cluster.

        Parameters
        ----------
        w0 : float
            Logarithmic weight parameter
        digits : List[Digit]
            Digit list the cluster was built from
        """
        self.global_position = log_weighted_position(
            self.geometry, self.cell_ids(digits), self.energies_list, w0
        )

    def eval_all(self, w0, digits, loc_max_cut, bad_cells=()):
        """Evaluates the position, shower shape and local maxima of the cluster.

        Parameters
        ----------
        w0 : float
            Logarithmic weight parameter
        digits : List[Digit]
            Digit list the cluster was built from
        loc_max_cut : float
            Minimum energy difference between a maximum and its neighbours
        bad_cells : np.ndarray, optional
            (B) Absolute IDs of the bad cells
        """
        cell_ids = self.cell_ids(digits)
        energies = np.asarray(self.energies_list)
        self.eval_global_position(w0, digits)
        self.dispersion, *axes = shower_shape(self.geometry, cell_ids, energies, w0)
        self.elips_axis = np.array(axes)
        self.n_ex_max = int(
            np.sum(local_maxima(self.geometry, cell_ids, energies, loc_max_cut))
        )

        max_id = cell_ids[np.argmax(energies)]
        self.dist_to_bad_tower = distance_to_bad_cells(
            self.geometry, max_id, bad_cells
        )
