"""Track quality selections."""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

__all__ = ["TrackCuts"]


@dataclass
class TrackCuts:
    """Set of track quality cuts.

    Unset (`None`) cuts are not applied.

    Attributes
    ----------
    min_tpc_ncls : int, optional
        Minimum number of TPC clusters
    min_tpc_crossed_rows : int, optional
        Minimum number of crossed TPC pad rows
    min_crossed_rows_over_findable : float, optional
        Minimum ratio of crossed rows over findable clusters
    max_chi2_per_tpc_cls : float, optional
        Maximum TPC chi2 per cluster
    max_chi2_per_its_cls : float, optional
        Maximum ITS chi2 per cluster
    require_tpc_refit : bool
        Require a successful TPC refit
    require_its_refit : bool
        Require a successful ITS refit
    require_spd_any : bool
        Require a cluster in any of the two SPD layers
    accept_kinks : bool
        Accept kink daughters
    max_dca_xy : float, optional
        Maximum transverse impact parameter (cm)
    max_dca_z : float, optional
        Maximum longitudinal impact parameter (cm)
    dca_xy_pt_dep : Tuple[float, float, float], optional
        (a, b, c) of the pT-dependent transverse impact parameter cut
        `a + b / pt^c` (cm)
    dca_2d : bool
        If `True`, the impact parameter cuts are applied as an ellipse
    eta_range : Tuple[float, float], optional
        Accepted pseudorapidity range
    pt_range : Tuple[float, float], optional
        Accepted transverse momentum range (GeV/c)
    """

    min_tpc_ncls: Optional[int] = None
    min_tpc_crossed_rows: Optional[int] = None
    min_crossed_rows_over_findable: Optional[float] = None
    max_chi2_per_tpc_cls: Optional[float] = None
    max_chi2_per_its_cls: Optional[float] = None
    require_tpc_refit: bool = False
    require_its_refit: bool = False
    require_spd_any: bool = False
    accept_kinks: bool = True
    max_dca_xy: Optional[float] = None
    max_dca_z: Optional[float] = None
    dca_xy_pt_dep: Optional[Tuple[float, float, float]] = None
    dca_2d: bool = False
    eta_range: Optional[Tuple[float, float]] = None
    pt_range: Optional[Tuple[float, float]] = None

    @classmethod
    def standard_its_tpc_2011(cls, sel_primaries=True, **kwargs):
        """Standard global (ITS + TPC) track selection of the 2011 data.

        Parameters
        ----------
        sel_primaries : bool, default True
            If `True`, apply the tight pT-dependent transverse impact
            parameter cut which selects primary tracks
        **kwargs : dict, optional
            Cuts to override

        Returns
        -------
        TrackCuts
            Track selection
        """
        cfg = dict(
            min_tpc_crossed_rows=70,
            min_crossed_rows_over_findable=0.8,
            max_chi2_per_tpc_cls=4.0,
            max_chi2_per_its_cls=36.0,
            accept_kinks=False,
            require_tpc_refit=True,
            require_its_refit=True,
            require_spd_any=True,
            max_dca_z=2.0,
        )
        if sel_primaries:
            cfg["dca_xy_pt_dep"] = (0.0105, 0.0350, 1.1)
        cfg.update(kwargs)

        return cls(**cfg)

    @classmethod
    def standard_tpc_only(cls, **kwargs):
        """Standard TPC-only track selection, used to build event planes."""
        cfg = dict(
            min_tpc_ncls=50,
            max_chi2_per_tpc_cls=4.0,
            accept_kinks=False,
            max_dca_xy=2.4,
            max_dca_z=3.2,
            dca_2d=True,
        )
        cfg.update(kwargs)

        return cls(**cfg)

    def __call__(self, track):
        """Alias of :meth:`accept`."""
        return self.accept(track)

    def accept(self, track):
        """Check whether a track passes all the cuts.

        Parameters
        ----------
        track : Track
            Track to check

        Returns
        -------
        bool
            `True` if the track is accepted
        """
        if track is None:
            return False

        # Reconstruction quality
        if self.require_tpc_refit and not track.tpc_refit:
            return False
        if self.require_its_refit and not track.its_refit:
            return False
        if self.require_spd_any and not track.has_spd_hit:
            return False
        if not self.accept_kinks and track.is_kink:
            return False
        if self.min_tpc_ncls is not None and track.tpc_ncls < self.min_tpc_ncls:
            return False
        if (
            self.min_tpc_crossed_rows is not None
            and track.tpc_crossed_rows < self.min_tpc_crossed_rows
        ):
            return False
        if self.min_crossed_rows_over_findable is not None:
            if track.tpc_findable <= 0:
                return False
            ratio = track.tpc_crossed_rows / track.tpc_findable
            if ratio < self.min_crossed_rows_over_findable:
                return False
        if self.max_chi2_per_tpc_cls is not None and track.tpc_ncls > 0:
            if track.tpc_chi2 / track.tpc_ncls > self.max_chi2_per_tpc_cls:
                return False
        if self.max_chi2_per_its_cls is not None and track.its_ncls > 0:
            if track.its_chi2 / track.its_ncls > self.max_chi2_per_its_cls:
                return False

        # Kinematics
        if self.eta_range is not None:
            if not self.eta_range[0] <= track.eta <= self.eta_range[1]:
                return False
        if self.pt_range is not None:
            if not self.pt_range[0] <= track.pt <= self.pt_range[1]:
                return False

        return self.accept_dca(track)

    def accept_dca(self, track):
        """Check the impact parameter cuts of a track.

        Parameters
        ----------
        track : Track
            Track to check

        Returns
        -------
        bool
            `True` if the impact parameters are within the cuts
        """
        max_xy = self.max_dca_xy
        if self.dca_xy_pt_dep is not None and track.pt > 0:
            a, b, c = self.dca_xy_pt_dep
            pt_dep = a + b / track.pt**c
            max_xy = pt_dep if max_xy is None else min(max_xy, pt_dep)

        if self.dca_2d and max_xy is not None and self.max_dca_z is not None:
            dist = (track.dca_xy / max_xy) ** 2 + (track.dca_z / self.max_dca_z) ** 2
            return bool(dist <= 1.0)

        if max_xy is not None and np.abs(track.dca_xy) > max_xy:
            return False
        if self.max_dca_z is not None and np.abs(track.dca_z) > self.max_dca_z:
            return False

        return True
