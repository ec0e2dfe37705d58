"""EMCAL reconstruction parameters."""

from dataclasses import dataclass, field
from typing import List

from hiana.utils.enums import enum_factory
from hiana.utils.globals import CLUSTERIZER_V1

__all__ = ["RecParam"]


@dataclass
class RecParam:
    """Parameters of the EMCAL clusterization.

    Attributes
    ----------
    clusterizer : int
        Clusterization algorithm flag (0: v1, 1: NxN 3x3, >1: NxN 5x5)
    clustering_threshold : float
        Minimum energy of a cluster seed (GeV)
    w0 : float
        Logarithmic weight parameter of the position and shape evaluation
    min_e_cut : float
        Minimum energy of a cell to be added to a cluster (GeV)
    unfold : bool
        Whether overlapping clusters are unfolded after the clusterization
    loc_max_cut : float
        Minimum energy difference between a local maximum and its neighbours
    time_cut : float
        Maximum time difference between a cell and the cluster seed (s)
    time_min : float
        Minimum time of the cells (s)
    time_max : float
        Maximum time of the cells (s)
    ss_pars : List[float]
        Eight parameters of the shower shape used by the unfolding
    par5 : List[float]
        Three parameters of the unfolding shower width
    par6 : List[float]
        Three parameters of the unfolding shower width
    """

    clusterizer: int = CLUSTERIZER_V1
    clustering_threshold: float = 0.1
    w0: float = 4.5
    min_e_cut: float = 0.05
    unfold: bool = False
    loc_max_cut: float = 0.03
    time_cut: float = 1.0
    time_min: float = -1.0
    time_max: float = 1.0
    ss_pars: List[float] = field(
        default_factory=lambda: [0.9262, 3.365, 1.548, 0.1625, -0.4195, 0.0, 0.0, 2.332]
    )
    par5: List[float] = field(default_factory=lambda: [12.31, -0.007381, -0.06936])
    par6: List[float] = field(default_factory=lambda: [0.05452, 0.0001228, 0.001361])

    def __post_init__(self):
        # The clusterizer may be specified by name in the configuration
        if isinstance(self.clusterizer, str):
            self.clusterizer = enum_factory("clusterizer", self.clusterizer)

        assert (
            len(self.ss_pars) == 8
        ), f"Must provide 8 shower shape parameters, got {len(self.ss_pars)}."
        assert (
            len(self.par5) == 3 and len(self.par6) == 3
        ), "Must provide 3 values for each of `par5` and `par6`."
        assert (
            self.time_min <= self.time_max
        ), "The minimum cell time must be below the maximum cell time."
