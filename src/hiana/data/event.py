"""Module with data class objects which represent one collision event."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from .base import DataBase
from .calo import CaloCells, CaloCluster
from .track import Track

__all__ = ["Vertex", "EventPlane", "Event"]


@dataclass(eq=False)
class Vertex(DataBase):
    """Reconstructed primary vertex.

    Attributes
    ----------
    position : np.ndarray
        (3) Position of the vertex (cm)
    n_contributors : int
        Number of tracks (or tracklets) used to build the vertex
    """

    position: np.ndarray = None
    n_contributors: int = 0

    # Fixed-length attributes
    _fixed_length_attrs = (("position", 3),)

    # Attributes specifying coordinates
    _pos_attrs = ("position",)

    @property
    def z(self):
        return float(self.position[2])


@dataclass(eq=False)
class EventPlane(DataBase):
    """Second-harmonic flow vectors provided by the event-plane service.

    Attributes
    ----------
    q_v0a : np.ndarray
        (2) Q vector measured in the V0A scintillator array
    q_v0c : np.ndarray
        (2) Q vector measured in the V0C scintillator array
    q_v0m : np.ndarray
        (2) Q vector measured in the full V0 (V0A + V0C)
    q_tpc : np.ndarray
        (2) Q vector measured with TPC tracks
    qx_contrib : np.ndarray
        (N) X contribution of each track to the TPC Q vector, indexed by ID
    qy_contrib : np.ndarray
        (N) Y contribution of each track to the TPC Q vector, indexed by ID
    """

    q_v0a: np.ndarray = None
    q_v0c: np.ndarray = None
    q_v0m: np.ndarray = None
    q_tpc: np.ndarray = None
    qx_contrib: np.ndarray = None
    qy_contrib: np.ndarray = None

    # Fixed-length attributes
    _fixed_length_attrs = (("q_v0a", 2), ("q_v0c", 2), ("q_v0m", 2), ("q_tpc", 2))

    # Variable-length attributes
    _var_length_attrs = (("qx_contrib", np.float64), ("qy_contrib", np.float64))


@dataclass(eq=False)
class Event(DataBase):
    """Reconstructed collision event, as supplied by the steering framework.

    Attributes
    ----------
    run : int
        Run number
    index : int
        Index of the event in the input
    input_type : str
        Format of the input event, either 'esd' or 'aod'
    tracks : List[Track]
        Reconstructed tracks
    clusters : List[CaloCluster]
        Calorimeter clusters (EMCAL and PHOS)
    cells : CaloCells
        EMCAL cells
    vertex_tracks : Vertex
        Primary vertex reconstructed with tracks
    vertex_spd : Vertex
        Primary vertex reconstructed with SPD tracklets
    centrality : float
        V0M centrality percentile
    trigger_mask : int
        Bit mask of the trigger classes which selected the event
    event_plane : EventPlane, optional
        Flow vectors from the event-plane service
    tof_start_time : float
        Event start time used by the TOF (ps)
    emcal_matrices : Dict[int, np.ndarray]
        Alignment matrices of the EMCAL super modules stored in the event
    """

    run: int = -1
    index: int = -1
    input_type: str = "esd"
    tracks: List[Track] = field(default_factory=list)
    clusters: List[CaloCluster] = field(default_factory=list)
    cells: CaloCells = field(default_factory=CaloCells)
    vertex_tracks: Vertex = field(default_factory=Vertex)
    vertex_spd: Vertex = field(default_factory=Vertex)
    centrality: float = -1.0
    trigger_mask: int = 0
    event_plane: Optional[EventPlane] = None
    tof_start_time: float = 0.0
    emcal_matrices: Dict[int, np.ndarray] = field(default_factory=dict)

    def __post_init__(self):
        super().__post_init__()
        assert self.input_type in ("esd", "aod"), (
            f"Input type not recognized: {self.input_type}. Must be "
            "one of 'esd' or 'aod'."
        )

    @property
    def is_esd(self):
        return self.input_type == "esd"

    @property
    def n_tracks(self):
        return len(self.tracks)

    def get_track(self, index):
        """Returns the track at a given index, `None` if out of range."""
        if index < 0 or index >= len(self.tracks):
            return None

        return self.tracks[index]
