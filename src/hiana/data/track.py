"""Module with a data class object which represents a reconstructed track."""

from dataclasses import dataclass

import numpy as np

from .base import DataBase

__all__ = ["Track"]


@dataclass(eq=False)
class Track(DataBase):
    """Central barrel reconstructed track.

    Attributes
    ----------
    id : int
        Index of the track in the event track list
    momentum : np.ndarray
        (3) Momentum vector at the primary vertex (GeV/c)
    charge : int
        Electric charge sign
    status : int
        Reconstruction status bits (see the `*_BIT` class attributes)
    tpc_ncls : int
        Number of TPC clusters
    tpc_crossed_rows : int
        Number of crossed TPC pad rows
    tpc_findable : int
        Number of findable TPC clusters
    tpc_chi2 : float
        Chi2 of the TPC fit
    its_ncls : int
        Number of ITS clusters
    its_chi2 : float
        Chi2 of the ITS fit
    has_spd_hit : bool
        Whether the track has a cluster in any of the SPD layers
    is_kink : bool
        Whether the track is the daughter of a kink
    tpc_signal : float
        Truncated mean of the TPC dE/dx
    inner_p : float
        Momentum at the inner wall of the TPC (GeV/c), -1 if unavailable
    tof_signal : float
        Raw TOF time signal (ps)
    length : float
        Integrated track length up to the TOF (cm)
    dca_xy : float
        Transverse impact parameter to the primary vertex (cm)
    dca_z : float
        Longitudinal impact parameter to the primary vertex (cm)
    """

    id: int = -1
    momentum: np.ndarray = None
    charge: int = 0
    status: int = 0
    tpc_ncls: int = 0
    tpc_crossed_rows: int = 0
    tpc_findable: int = 0
    tpc_chi2: float = 0.0
    its_ncls: int = 0
    its_chi2: float = 0.0
    has_spd_hit: bool = False
    is_kink: bool = False
    tpc_signal: float = 0.0
    inner_p: float = -1.0
    tof_signal: float = 0.0
    length: float = 0.0
    dca_xy: float = 0.0
    dca_z: float = 0.0

    # Status bits
    ITS_REFIT_BIT = 0x4
    TPC_REFIT_BIT = 0x40
    TOF_OUT_BIT = 0x2000

    # Fixed-length attributes
    _fixed_length_attrs = (("momentum", 3),)

    # Attributes specifying vector components
    _vec_attrs = ("momentum",)

    # Boolean attributes
    _bool_attrs = ("has_spd_hit", "is_kink")

    @property
    def pt(self):
        """Transverse momentum (GeV/c)."""
        return float(np.hypot(self.momentum[0], self.momentum[1]))

    @property
    def p(self):
        """Total momentum (GeV/c)."""
        return float(np.linalg.norm(self.momentum))

    @property
    def eta(self):
        """Pseudorapidity."""
        pt = self.pt
        if pt == 0.0:
            return float(np.copysign(np.inf, self.momentum[2]))

        return float(np.arcsinh(self.momentum[2] / pt))

    @property
    def phi(self):
        """Azimuthal angle in [0, 2pi)."""
        return float(np.arctan2(self.momentum[1], self.momentum[0]) % (2 * np.pi))

    @property
    def has_inner_param(self):
        """Whether the track parameters at the TPC inner wall are available."""
        return self.inner_p >= 0.0

    @property
    def its_refit(self):
        return bool(self.status & self.ITS_REFIT_BIT)

    @property
    def tpc_refit(self):
        return bool(self.status & self.TPC_REFIT_BIT)

    @property
    def has_tof_out(self):
        return bool(self.status & self.TOF_OUT_BIT)
