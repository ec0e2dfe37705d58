"""Containers of physics objects with acceptance cuts.

The containers own a list of objects (tracks, calorimeter clusters) and
decide which of them are accepted for the analysis. They are the backing
collections of the :class:`~hiana.data.iterable.IterableContainer` views.
"""

from enum import IntFlag

import numpy as np

from hiana.utils.enums import enum_factory

from .iterable import IterableContainer

__all__ = [
    "RejectionReason",
    "ObjectContainer",
    "TrackContainer",
    "ClusterContainer",
]


class RejectionReason(IntFlag):
    """Bits of the reason why an object was rejected."""

    NONE = 0
    NULL_OBJECT = 1 << 0
    PT_CUT = 1 << 1
    ETA_CUT = 1 << 2
    PHI_CUT = 1 << 3
    TRACK_CUTS = 1 << 4
    CLUSTER_TYPE = 1 << 5
    TIME_CUT = 1 << 6
    ENERGY_CUT = 1 << 7


class ObjectContainer:
    """Generic container of physics objects.

    Applies the kinematic cuts shared by all objects: transverse momentum
    (or energy), pseudorapidity and azimuthal angle windows.

    Attributes
    ----------
    name : str
        Name of the container
    min_pt : float
        Minimum transverse momentum (or energy) of accepted objects
    max_pt : float
        Maximum transverse momentum (or energy) of accepted objects
    eta_range : Tuple[float, float]
        Accepted pseudorapidity range
    phi_range : Tuple[float, float]
        Accepted azimuthal angle range (radians)
    generation : int
        Number of times the content of the container was replaced
    """

    name = "objects"

    def __init__(
        self,
        objects=None,
        name=None,
        min_pt=0.0,
        max_pt=np.inf,
        eta_range=(-np.inf, np.inf),
        phi_range=(-10.0, 10.0),
    ):
        """Initialize the container.

        Parameters
        ----------
        objects : List[object], optional
            Initial content of the container
        name : str, optional
            Name of the container (defaults to the class name attribute)
        min_pt : float, default 0.
            Minimum transverse momentum (or energy)
        max_pt : float, default np.inf
            Maximum transverse momentum (or energy)
        eta_range : Tuple[float, float], default (-np.inf, np.inf)
            Accepted pseudorapidity range
        phi_range : Tuple[float, float], default (-10., 10.)
            Accepted azimuthal angle range (radians)
        """
        assert min_pt <= max_pt, "The minimum momentum cut must be below the maximum."
        assert (
            len(eta_range) == 2 and eta_range[0] <= eta_range[1]
        ), "The eta range must be an increasing pair of values."
        assert (
            len(phi_range) == 2 and phi_range[0] <= phi_range[1]
        ), "The phi range must be an increasing pair of values."

        if name is not None:
            self.name = name
        self.min_pt = min_pt
        self.max_pt = max_pt
        self.eta_range = tuple(eta_range)
        self.phi_range = tuple(phi_range)

        self._objects = []
        self.generation = 0
        if objects is not None:
            self.set_objects(objects)

    def set_objects(self, objects):
        """Replace the content of the container.

        Views built before this call are stale afterwards.

        Parameters
        ----------
        objects : List[object]
            New content of the container
        """
        self._objects = list(objects)
        self.generation += 1

    def get_n_entries(self):
        """Total number of objects in the container."""
        return len(self._objects)

    def __len__(self):
        return self.get_n_entries()

    def __getitem__(self, index):
        return self._objects[index]

    def get_n_accept_entries(self):
        """Expected number of accepted objects, used to size the views.

        The acceptance cuts are only evaluated when a view is built, so this
        returns the total number of objects, an upper bound of the count.
        """
        return self.get_n_entries()

    def accept_object(self, index):
        """Check whether the object at a given position is accepted.

        Parameters
        ----------
        index : int
            Position of the object in the container

        Returns
        -------
        bool
            `True` if the object is accepted
        RejectionReason
            Bits of the cuts the object fails
        """
        return self.accept(self._objects[index])

    def accept(self, obj):
        """Check whether an object passes the acceptance cuts.

        Parameters
        ----------
        obj : object
            Object to check

        Returns
        -------
        bool
            `True` if the object is accepted
        RejectionReason
            Bits of the cuts the object fails
        """
        if obj is None:
            return False, RejectionReason.NULL_OBJECT

        reason = self.apply_kinematic_cuts(self.get_pt(obj), obj.eta, obj.phi)

        return reason == RejectionReason.NONE, reason

    def apply_kinematic_cuts(self, pt, eta, phi):
        """Check the kinematic cuts.

        Parameters
        ----------
        pt : float
            Transverse momentum (or energy) of the object
        eta : float
            Pseudorapidity of the object
        phi : float
            Azimuthal angle of the object

        Returns
        -------
        RejectionReason
            Bits of the cuts the object fails
        """
        reason = RejectionReason.NONE
        if pt < self.min_pt or pt > self.max_pt:
            reason |= RejectionReason.PT_CUT
        if eta < self.eta_range[0] or eta > self.eta_range[1]:
            reason |= RejectionReason.ETA_CUT
        if phi < self.phi_range[0] or phi > self.phi_range[1]:
            reason |= RejectionReason.PHI_CUT

        return reason

    def get_pt(self, obj):
        """Quantity the momentum cuts are applied to."""
        return obj.pt

    def all(self):
        """View over all the objects of the container.

        Returns
        -------
        IterableContainer
            View over all objects
        """
        return IterableContainer(self, False)

    def accepted(self):
        """View over the objects which pass the acceptance cuts.

        Returns
        -------
        IterableContainer
            View over accepted objects
        """
        return IterableContainer(self, True)

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(name={self.name}, "
            f"entries={self.get_n_entries()})"
        )


class TrackContainer(ObjectContainer):
    """Container of reconstructed tracks.

    On top of the kinematic cuts, tracks may be required to pass a track
    quality selection.
    """

    name = "tracks"

    def __init__(self, tracks=None, track_cuts=None, **kwargs):
        """Initialize the track container.

        Parameters
        ----------
        tracks : List[Track], optional
            Initial list of tracks
        track_cuts : TrackCuts, optional
            Track quality selection
        **kwargs : dict, optional
            Kinematic cuts, see :class:`ObjectContainer`
        """
        super().__init__(tracks, **kwargs)
        self.track_cuts = track_cuts

    def accept(self, obj):
        """See :meth:`ObjectContainer.accept`."""
        accepted, reason = super().accept(obj)
        if obj is None:
            return accepted, reason

        if self.track_cuts is not None and not self.track_cuts.accept(obj):
            reason |= RejectionReason.TRACK_CUTS

        return reason == RejectionReason.NONE, reason


class ClusterContainer(ObjectContainer):
    """Container of calorimeter clusters.

    The momentum cuts of the base container apply to the cluster energy.
    Clusters can also be selected by calorimeter type, minimum energy and
    time window.
    """

    name = "caloClusters"

    def __init__(
        self,
        clusters=None,
        cluster_type="emcal",
        min_e=0.0,
        min_time=-np.inf,
        max_time=np.inf,
        **kwargs,
    ):
        """Initialize the cluster container.

        Parameters
        ----------
        clusters : List[CaloCluster], optional
            Initial list of clusters
        cluster_type : Union[str, int], default 'emcal'
            Calorimeter of the accepted clusters (`None` accepts all)
        min_e : float, default 0.
            Minimum cluster energy (GeV)
        min_time : float, default -np.inf
            Minimum cluster time (s)
        max_time : float, default np.inf
            Maximum cluster time (s)
        **kwargs : dict, optional
            Kinematic cuts, see :class:`ObjectContainer`
        """
        super().__init__(clusters, **kwargs)
        self.cluster_type = None
        if cluster_type is not None:
            self.cluster_type = enum_factory("cluster_type", cluster_type)
        self.min_e = min_e
        self.min_time = min_time
        self.max_time = max_time

    def get_pt(self, obj):
        """Clusters are selected on their energy."""
        return obj.energy

    def accept(self, obj):
        """See :meth:`ObjectContainer.accept`."""
        accepted, reason = super().accept(obj)
        if obj is None:
            return accepted, reason

        if self.cluster_type is not None and obj.type != self.cluster_type:
            reason |= RejectionReason.CLUSTER_TYPE
        if obj.energy < self.min_e:
            reason |= RejectionReason.ENERGY_CUT
        if obj.tof < self.min_time or obj.tof > self.max_time:
            reason |= RejectionReason.TIME_CUT

        return reason == RejectionReason.NONE, reason
