"""Unfolding of overlapping EMCAL showers.

Clusters with more than one local maximum are split into one cluster per
maximum. The energy of each cell is shared between the maxima in proportion
to the energy of each maximum, attenuated with the distance (in cell units)
between the cell and the maximum.
"""

import numpy as np

from hiana.data import CaloCluster
from hiana.utils.globals import EMCAL_CLUSTER

from .recpoint import (
    RecPoint,
    local_maxima,
    log_weighted_position,
    shower_shape,
)

__all__ = ["ClusterUnfolder"]


class ClusterUnfolder:
    """Splits calorimeter clusters with several local maxima.

    Attributes
    ----------
    w0 : float
        Logarithmic weight parameter of the position evaluation
    loc_max_cut : float
        Minimum energy difference between a maximum and its neighbours
    geometry : EMCALGeometry
        Calorimeter geometry
    min_fraction : float
        Minimum share of a cell energy for it to be kept in a split cluster
    """

    def __init__(self, w0, loc_max_cut, geometry, min_fraction=0.001):
        """Initialize the unfolder.

        Parameters
        ----------
        w0 : float
            Logarithmic weight parameter of the position evaluation
        loc_max_cut : float
            Minimum energy difference between a maximum and its neighbours
        geometry : EMCALGeometry
            Calorimeter geometry
        min_fraction : float, default 0.001
            Minimum share of a cell energy for it to be kept in a split cluster
        """
        self.w0 = w0
        self.loc_max_cut = loc_max_cut
        self.geometry = geometry
        self.min_fraction = min_fraction

        self.num_split = 0

    def clear(self):
        """Resets the per-event bookkeeping."""
        self.num_split = 0

    def split_energies(self, cell_ids, energies):
        """Shares the cell energies of a cluster between its local maxima.

        Parameters
        ----------
        cell_ids : np.ndarray
            (N) Absolute ID of each cell
        energies : np.ndarray
            (N) Energy deposited in each cell

        Returns
        -------
        np.ndarray
            (M, N) Share of each cell energy attributed to each of the M
            maxima, `None` if the cluster has less than two maxima
        """
        is_max = local_maxima(self.geometry, cell_ids, energies, self.loc_max_cut)
        max_index = np.where(is_max)[0]
        if len(max_index) < 2:
            return None

        weights = np.empty((len(max_index), len(cell_ids)))
        for k, m in enumerate(max_index):
            dist = np.array(
                [self.geometry.cell_distance(cell_ids[m], c) for c in cell_ids]
            )
            weights[k] = energies[m] * np.exp(-dist)

        return weights / np.sum(weights, axis=0)

    def unfold_clusters(self, clusters, cells):
        """Unfolds a list of calorimeter clusters.

        Parameters
        ----------
        clusters : List[CaloCluster]
            Input EMCAL clusters
        cells : CaloCells
            EMCAL cells of the event

        Returns
        -------
        List[CaloCluster]
            Clusters, with the clusters with several maxima replaced by their
            components
        """
        amplitudes = dict(zip(cells.cell_ids.tolist(), cells.amplitudes.tolist()))

        output = []
        for cluster in clusters:
            fractions = cluster.cell_fractions
            if len(fractions) != cluster.n_cells:
                fractions = np.ones(cluster.n_cells)
            energies = np.array(
                [amplitudes.get(int(c), 0.0) for c in cluster.cell_ids]
            ) * fractions

            shares = None
            if cluster.n_cells > 1:
                shares = self.split_energies(cluster.cell_ids, energies)
            if shares is None:
                output.append(cluster)
                continue

            self.num_split += 1
            for share in shares:
                keep = share > self.min_fraction
                output.append(
                    self.make_cluster(
                        cluster,
                        cluster.cell_ids[keep],
                        (share * energies)[keep],
                        (share * fractions)[keep],
                    )
                )

        return output

    def make_cluster(self, parent, cell_ids, energies, fractions):
        """Builds one component of a split cluster.

        Parameters
        ----------
        parent : CaloCluster
            Cluster which was split
        cell_ids : np.ndarray
            (N) Absolute ID of each cell of the component
        energies : np.ndarray
            (N) Energy attributed to each cell
        fractions : np.ndarray
            (N) Fraction of each cell amplitude attributed to the component

        Returns
        -------
        CaloCluster
            Component cluster
        """
        dispersion, lambda0, lambda1 = shower_shape(
            self.geometry, cell_ids, energies, self.w0
        )

        return CaloCluster(
            type=EMCAL_CLUSTER,
            energy=float(np.sum(energies)),
            position=log_weighted_position(self.geometry, cell_ids, energies, self.w0),
            cell_ids=cell_ids,
            cell_fractions=fractions,
            dispersion=dispersion,
            chi2=-1.0,
            tof=parent.tof,
            n_ex_max=1,
            m02=lambda0**2,
            m20=lambda1**2,
            dist_to_bad_channel=parent.dist_to_bad_channel,
        )

    def unfold_rec_points(self, rec_points, digits):
        """Unfolds a list of rec points.

        Parameters
        ----------
        rec_points : List[RecPoint]
            Input rec points
        digits : List[Digit]
            Digit list the rec points were built from

        Returns
        -------
        List[RecPoint]
            Rec points, with the ones with several maxima replaced by their
            components
        """
        output = []
        for rec_point in rec_points:
            cell_ids = rec_point.cell_ids(digits)
            energies = np.asarray(rec_point.energies_list, dtype=float)

            shares = None
            if rec_point.multiplicity > 1:
                shares = self.split_energies(cell_ids, energies)
            if shares is None:
                output.append(rec_point)
                continue

            self.num_split += 1
            for share in shares:
                component = RecPoint(self.geometry)
                for i, digit_index in enumerate(rec_point.digits_list):
                    if share[i] > self.min_fraction:
                        component.add_digit(digits[digit_index], share[i] * energies[i])
                component.eval_all(self.w0, digits, self.loc_max_cut)
                component.dist_to_bad_tower = rec_point.dist_to_bad_tower
                output.append(component)

        return output
