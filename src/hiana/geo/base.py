"""Module with the EMCAL calorimeter geometry class.

The calorimeter is made of super modules, each covering a fixed azimuthal
sector on one side of the interaction point (even super modules on the
positive pseudorapidity side, odd ones on the negative side). Each super
module holds a grid of towers (cells) organized in rows (along phi) and
columns (along eta).

Cells are identified by an absolute ID:

.. code-block:: text

    abs_id = sm * (num_rows * num_cols) + row * num_cols + col
"""

from dataclasses import dataclass, field
from typing import Dict

import numpy as np

__all__ = ["EMCALGeometry"]


@dataclass
class EMCALGeometry:
    """Ideal EMCAL geometry, with optional super module misalignment.

    Attributes
    ----------
    name : str
        Name of the geometry
    num_super_modules : int
        Number of installed super modules
    num_rows : int
        Number of cell rows per super module (phi direction)
    num_cols : int
        Number of cell columns per super module (eta direction)
    radius : float
        Radial position of the front face of the calorimeter (cm)
    phi_min : float
        Lower azimuthal edge of the first super module pair (degrees)
    phi_span : float
        Azimuthal coverage of one super module (degrees)
    eta_max : float
        Pseudorapidity coverage of one super module
    cell_size : float
        Transverse size of one cell (cm)
    misal_matrices : Dict[int, np.ndarray]
        (4, 4) Alignment transformation of each super module
    """

    name: str
    num_super_modules: int
    num_rows: int = 24
    num_cols: int = 48
    radius: float = 428.0
    phi_min: float = 80.0
    phi_span: float = 20.0
    eta_max: float = 0.7
    cell_size: float = 6.0
    misal_matrices: Dict[int, np.ndarray] = field(default_factory=dict)

    def __post_init__(self):
        assert self.num_super_modules > 0, "Must have at least one super module."
        assert (
            self.num_rows > 0 and self.num_cols > 0
        ), "Super modules must have at least one row and one column."

    @property
    def num_cells_per_sm(self):
        return self.num_rows * self.num_cols

    @property
    def num_cells(self):
        """Total number of cells in the calorimeter."""
        return self.num_super_modules * self.num_cells_per_sm

    def check_abs_id(self, abs_id):
        """Check that absolute cell ID(s) belong to the geometry.

        Parameters
        ----------
        abs_id : Union[int, np.ndarray]
            Absolute cell ID(s)

        Returns
        -------
        Union[bool, np.ndarray]
            Whether the ID(s) are valid
        """
        abs_id = np.asarray(abs_id)
        valid = (abs_id >= 0) & (abs_id < self.num_cells)
        if valid.ndim == 0:
            return bool(valid)

        return valid

    def get_cell_index(self, abs_id):
        """Converts absolute cell ID(s) to (super module, row, column).

        Parameters
        ----------
        abs_id : Union[int, np.ndarray]
            Absolute cell ID(s)

        Returns
        -------
        sm : Union[int, np.ndarray]
            Super module index
        row : Union[int, np.ndarray]
            Row index in the super module
        col : Union[int, np.ndarray]
            Column index in the super module
        """
        if not np.all(self.check_abs_id(abs_id)):
            raise ValueError(
                f"Cell ID(s) out of range for geometry {self.name}: {abs_id}"
            )

        sm, local = np.divmod(abs_id, self.num_cells_per_sm)
        row, col = np.divmod(local, self.num_cols)
        if np.ndim(abs_id) == 0:
            return int(sm), int(row), int(col)

        return sm, row, col

    def get_abs_id(self, sm, row, col):
        """Converts (super module, row, column) to an absolute cell ID.

        Parameters
        ----------
        sm : int
            Super module index
        row : int
            Row index in the super module
        col : int
            Column index in the super module

        Returns
        -------
        int
            Absolute cell ID
        """
        assert 0 <= sm < self.num_super_modules, f"Super module out of range: {sm}"
        assert 0 <= row < self.num_rows, f"Row out of range: {row}"
        assert 0 <= col < self.num_cols, f"Column out of range: {col}"

        return sm * self.num_cells_per_sm + row * self.num_cols + col

    def get_super_module(self, abs_id):
        """Super module which contains a cell."""
        return self.get_cell_index(abs_id)[0]

    def get_cell_eta_phi(self, abs_id):
        """Ideal (eta, phi) of the center of cell(s).

        Parameters
        ----------
        abs_id : Union[int, np.ndarray]
            Absolute cell ID(s)

        Returns
        -------
        eta : Union[float, np.ndarray]
            Pseudorapidity of the cell center(s)
        phi : Union[float, np.ndarray]
            Azimuthal angle of the cell center(s) (radians)
        """
        sm, row, col = self.get_cell_index(abs_id)

        eta_step = self.eta_max / self.num_cols
        eta_low = np.where(sm % 2 == 0, 0.0, -self.eta_max)
        eta = eta_low + (col + 0.5) * eta_step

        phi_step = self.phi_span / self.num_rows
        phi = self.phi_min + (sm // 2) * self.phi_span + (row + 0.5) * phi_step
        phi = np.radians(phi)

        if np.ndim(abs_id) == 0:
            return float(eta), float(phi)

        return eta, phi

    def get_global_position(self, abs_id):
        """Global position of the center of the front face of a cell.

        If a misalignment matrix is set for the super module of the cell, the
        ideal position is transformed by it.

        Parameters
        ----------
        abs_id : int
            Absolute cell ID

        Returns
        -------
        np.ndarray
            (3) Global position (cm)
        """
        eta, phi = self.get_cell_eta_phi(abs_id)
        pos = np.array(
            [
                self.radius * np.cos(phi),
                self.radius * np.sin(phi),
                self.radius * np.sinh(eta),
            ]
        )

        sm = self.get_super_module(abs_id)
        if sm in self.misal_matrices:
            pos = (self.misal_matrices[sm] @ np.append(pos, 1.0))[:3]

        return pos

    def are_neighbours(self, abs_id_1, abs_id_2):
        """Checks whether two cells share a side or a corner.

        Cells in different super modules are never neighbours.

        Parameters
        ----------
        abs_id_1 : int
            First absolute cell ID
        abs_id_2 : int
            Second absolute cell ID

        Returns
        -------
        bool
            `True` if the two cells are adjacent
        """
        sm_1, row_1, col_1 = self.get_cell_index(abs_id_1)
        sm_2, row_2, col_2 = self.get_cell_index(abs_id_2)
        if sm_1 != sm_2:
            return False

        row_diff, col_diff = abs(row_1 - row_2), abs(col_1 - col_2)

        return row_diff <= 1 and col_diff <= 1 and row_diff + col_diff > 0

    def cell_distance(self, abs_id_1, abs_id_2):
        """Distance between two cells of a super module, in cell units.

        Returns `np.inf` for cells in different super modules.
        """
        sm_1, row_1, col_1 = self.get_cell_index(abs_id_1)
        sm_2, row_2, col_2 = self.get_cell_index(abs_id_2)
        if sm_1 != sm_2:
            return np.inf

        return float(np.hypot(row_1 - row_2, col_1 - col_2))

    def set_misal_matrix(self, matrix, sm):
        """Sets the alignment transformation of a super module.

        Parameters
        ----------
        matrix : np.ndarray
            (4, 4) Homogeneous transformation matrix
        sm : int
            Super module index
        """
        matrix = np.asarray(matrix, dtype=float)
        assert matrix.shape == (4, 4), "Misalignment matrices must be of shape (4, 4)."
        assert (
            0 <= sm < self.num_super_modules
        ), f"Super module out of range for geometry {self.name}: {sm}"

        self.misal_matrices[sm] = matrix

    def get_misal_matrix(self, sm):
        """Alignment matrix of a super module, `None` if it is ideal."""
        return self.misal_matrices.get(sm, None)

    def reset_misalignment(self):
        """Restores the ideal geometry."""
        self.misal_matrices = {}
