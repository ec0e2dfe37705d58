"""Track to calorimeter cluster matching."""

import numpy as np

from hiana.data import TrackContainer

__all__ = ["RecoUtils"]


class RecoUtils:
    """Matches calorimeter clusters to reconstructed tracks.

    Each cluster is matched to the closest track in the (eta, phi) plane,
    provided the residuals are within the matching cuts.

    Attributes
    ----------
    cut_eta : float
        Maximum pseudorapidity residual
    cut_phi : float
        Maximum azimuthal residual (radians)
    min_track_pt : float
        Minimum transverse momentum of the tracks considered (GeV/c)
    """

    def __init__(self, cut_eta=0.025, cut_phi=0.05, min_track_pt=0.0):
        """Initialize the matching parameters.

        Parameters
        ----------
        cut_eta : float, default 0.025
            Maximum pseudorapidity residual
        cut_phi : float, default 0.05
            Maximum azimuthal residual (radians)
        min_track_pt : float, default 0.
            Minimum transverse momentum of the tracks considered (GeV/c)
        """
        self.cut_eta = cut_eta
        self.cut_phi = cut_phi
        self.min_track_pt = min_track_pt

        self.matched_track_index = np.empty(0, dtype=np.int64)
        self.residuals = np.empty((0, 2))

    def find_matches(self, event, clusters):
        """Finds the best track match of each cluster.

        Parameters
        ----------
        event : Event
            Event which provides the tracks
        clusters : List[CaloCluster]
            Clusters to match
        """
        num_clusters = len(clusters)
        self.matched_track_index = np.full(num_clusters, -1, dtype=np.int64)
        self.residuals = np.full((num_clusters, 2), np.inf)

        tracks = TrackContainer(event.tracks, min_pt=self.min_track_pt).accepted()
        if num_clusters == 0 or len(tracks) == 0:
            return

        track_index = tracks.accept_indices
        track_eta = np.array([t.eta for t in tracks])
        track_phi = np.array([t.phi for t in tracks])
        for i, cluster in enumerate(clusters):
            d_eta = cluster.eta - track_eta
            d_phi = cluster.phi - track_phi
            d_phi = (d_phi + np.pi) % (2 * np.pi) - np.pi

            in_cut = (np.abs(d_eta) < self.cut_eta) & (np.abs(d_phi) < self.cut_phi)
            if not np.any(in_cut):
                continue

            dist = np.where(in_cut, np.hypot(d_eta, d_phi), np.inf)
            best = np.argmin(dist)
            self.matched_track_index[i] = track_index[best]
            self.residuals[i] = d_eta[best], d_phi[best]

    def get_matched_track_index(self, cluster_index):
        """Index of the track matched to a cluster, -1 if there is none.

        Parameters
        ----------
        cluster_index : int
            Index of the cluster in the list given to :meth:`find_matches`

        Returns
        -------
        int
            Index of the matched track in the event
        """
        if cluster_index < 0 or cluster_index >= len(self.matched_track_index):
            return -1

        return int(self.matched_track_index[cluster_index])

    def get_matched_residuals(self, cluster_index):
        """(eta, phi) residuals of the matched track, `None` if unmatched."""
        if self.get_matched_track_index(cluster_index) < 0:
            return None

        return tuple(self.residuals[cluster_index])
