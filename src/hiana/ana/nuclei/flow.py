"""Analysis task which measures the elliptic flow of light nuclei."""

from collections import defaultdict

import numpy as np

from hiana.ana.base import AnaBase
from hiana.data import TrackContainer
from hiana.utils.cuts import TrackCuts
from hiana.utils.enums import enum_factory
from hiana.utils.flow import event_plane_angle, event_plane_for_candidate, phi_0_pi
from hiana.utils.globals import (
    HE3_PID,
    PID_MASS_WINDOWS,
    TRIGGER_CENTRAL,
    TRIGGER_MB,
    TRIGGER_SEMI_CENTRAL,
)
from hiana.utils.logger import logger
from hiana.utils.pid import (
    expected_beta,
    expected_tpc_signal,
    tof_beta,
    tof_mass,
    tof_pull,
    tpc_pull,
)

__all__ = ["NucleiFlowAna"]


class NucleiFlowAna(AnaBase):
    """Scalar product and event plane v2 analysis of light nuclei.

    For each selected event, the task computes the V0 and TPC event planes
    and stores the resolution terms. It then identifies the nuclei candidates
    with the TPC dE/dx and the TOF mass and stores their flow variables.

    Typical configuration:

    .. code-block:: yaml

        ana:
          nuclei_flow:
            particle: deuteron
            prim_cut: false
    """

    # Name of the analysis task (as specified in the configuration)
    name = "nuclei_flow"

    # Set of data keys needed for this analysis task to operate
    _keys = (("event", True),)

    # Event type codes, by trigger class
    CENTRAL, SEMI_CENTRAL, MIN_BIAS = 1, 2, 3

    # Event selection
    max_vertex_z = 10.0
    mb_centrality_range = (0.0, 80.0)

    # Event plane track selection
    ep_eta_max = 0.8
    ep_pt_range = (0.2, 20.0)
    ep_min_tpc_ncls = 70

    # Candidate selection
    tpc_signal_range = (10.0, 1000.0)
    min_inner_p = 0.6
    max_p = 10.0
    max_pt = 10.0
    min_tof_length = 350.0
    max_tpc_pull = 3.0
    max_tpc_pull_p = 2.0
    max_tof_pull = 3.0

    def __init__(
        self, particle="deuteron", prim_cut=False, write_events=True, **kwargs
    ):
        """Initialize the nuclei flow task.

        Parameters
        ----------
        particle : Union[str, int], default 'deuteron'
            Nucleus species to select ('deuteron', 'triton' or 'helium3')
        prim_cut : bool, default False
            If `True`, apply the pT-dependent DCA cut which selects primaries
        write_events : bool, default True
            If `True`, store the event plane information of each event
        **kwargs : dict, optional
            Parameters to pass to :class:`AnaBase`
        """
        super().__init__(**kwargs)

        self.pid = enum_factory("pid", particle)
        assert self.pid in PID_MASS_WINDOWS, f"Particle species not supported: {particle}"
        self.prim_cut = prim_cut

        self.initialize()

        self.counters = defaultdict(int)
        self.write_events = write_events
        if self.write_events:
            self.initialize_writer("events")
        self.initialize_writer("candidates")

    def initialize(self):
        """Builds the track selections (call again when the parameters change)."""
        self.track_cuts = TrackCuts.standard_its_tpc_2011(
            self.prim_cut, max_dca_xy=3.0, max_dca_z=2.0, eta_range=(-0.8, 0.8)
        )
        self.ep_track_cuts = TrackCuts.standard_tpc_only(
            min_tpc_ncls=self.ep_min_tpc_ncls
        )

    def process(self, data):
        """Analyze one event.

        Parameters
        ----------
        data : dict
            Dictionary of data products

        Returns
        -------
        dict
            List of candidate rows stored for this event
        """
        candidates = []
        event = data["event"]
        if event is None:
            logger.error("Could not retrieve event.")
            return {"nuclei_candidates": candidates}
        if not event.is_esd:
            logger.error("Cannot get the ESD event.")
            return {"nuclei_candidates": candidates}

        self.counters["all"] += 1
        event_type = self.select_event(event)
        if event_type is None:
            return {"nuclei_candidates": candidates}

        if event.event_plane is None:
            logger.error("No event plane, the v2 analysis is not possible.")
            self.counters["no_event_plane"] += 1
            return {"nuclei_candidates": candidates}

        self.counters["selected"] += 1
        planes = self.event_planes(event)
        if self.write_events:
            self.append("events", **self.event_dict(event, event_type, planes))

        for track in TrackContainer(event.tracks, track_cuts=self.track_cuts).accepted():
            row = self.process_candidate(event, event_type, planes, track)
            if row is not None:
                candidates.append(row)
                self.append("candidates", **row)

        return {"nuclei_candidates": candidates}

    def select_event(self, event):
        """Applies the event selection.

        Parameters
        ----------
        event : Event
            Event to check

        Returns
        -------
        int
            Event type (1: central, 2: semi-central, 3: minimum bias), `None`
            if the event is rejected
        """
        vertex = event.vertex_tracks
        if vertex.n_contributors < 1:
            vertex = event.vertex_spd
            if vertex.n_contributors < 1:
                logger.info("No good vertex, skip event.")
                return None
        self.counters["with_vertex"] += 1

        if abs(vertex.z) > self.max_vertex_z:
            return None
        self.counters["vertex_z"] += 1

        event_type = None
        if event.trigger_mask & TRIGGER_CENTRAL:
            self.counters["central"] += 1
            event_type = self.CENTRAL

        if event.trigger_mask & TRIGGER_SEMI_CENTRAL:
            self.counters["semi_central"] += 1
            event_type = self.SEMI_CENTRAL

        if event.trigger_mask & TRIGGER_MB:
            low, high = self.mb_centrality_range
            if event.centrality < low or event.centrality >= high:
                return None
            self.counters["min_bias"] += 1
            event_type = self.MIN_BIAS

        return event_type

    def event_planes(self, event):
        """Computes the event planes of an event.

        Parameters
        ----------
        event : Event
            Selected event

        Returns
        -------
        dict
            Event plane angles and Q vectors
        """
        ep = event.event_plane
        planes = {
            "q_v0a": tuple(ep.q_v0a),
            "q_v0c": tuple(ep.q_v0c),
            "q_v0m": tuple(ep.q_v0m),
            "v0a": event_plane_angle(*ep.q_v0a),
            "v0c": event_plane_angle(*ep.q_v0c),
            "v0m": event_plane_angle(*ep.q_v0m),
        }

        # TPC event planes from the tracks which pass the event plane cuts
        q_full, q_pos, q_neg = np.zeros(2), np.zeros(2), np.zeros(2)
        tracks = TrackContainer(
            event.tracks,
            track_cuts=self.ep_track_cuts,
            min_pt=self.ep_pt_range[0],
            eta_range=(-self.ep_eta_max, self.ep_eta_max),
        )
        for track in tracks.accepted():
            if track.pt >= self.ep_pt_range[1]:
                continue

            u = np.array([np.cos(2 * track.phi), np.sin(2 * track.phi)])
            if 0 < track.eta < self.ep_eta_max:
                q_pos += u
                q_full += u
            if -self.ep_eta_max < track.eta < 0:
                q_neg += u

        planes["tpc"] = event_plane_angle(*q_full)
        planes["tpc_p"] = event_plane_angle(*q_pos)
        planes["tpc_n"] = event_plane_angle(*q_neg)

        return planes

    @staticmethod
    def resolution_terms(planes):
        """cos(2 delta psi) terms used to compute the event plane resolutions.

        Parameters
        ----------
        planes : dict
            Event plane angles

        Returns
        -------
        dict
            Resolution terms
        """
        pairs = (
            ("tpc", "v0a"),
            ("tpc", "v0c"),
            ("v0a", "v0c"),
            ("v0m", "v0a"),
            ("v0m", "v0c"),
            ("v0a", "tpc"),
            ("v0c", "tpc"),
            ("v0c", "v0a"),
            ("v0m", "tpc_p"),
            ("v0m", "tpc_n"),
            ("tpc_p", "tpc_n"),
        )

        return {
            f"cos2_{a}_{b}": float(np.cos(2.0 * (planes[a] - planes[b])))
            for a, b in pairs
        }

    def event_dict(self, event, event_type, planes):
        """Row of event-level information.

        Parameters
        ----------
        event : Event
            Selected event
        event_type : int
            Event type
        planes : dict
            Event plane angles and Q vectors

        Returns
        -------
        dict
            Event row
        """
        row = {
            "centrality": event.centrality,
            "event_type": event_type,
            "num_tracks": event.n_tracks,
        }
        for key in ("v0a", "v0c", "v0m", "tpc", "tpc_p", "tpc_n"):
            row[f"ep_{key}"] = planes[key]
        row.update(self.resolution_terms(planes))

        # Scalar product and non-uniform acceptance corrections
        qa, qc = planes["q_v0a"], planes["q_v0c"]
        row["qv0a_qv0c"] = qa[0] * qc[0] + qa[1] * qc[1]
        for key in ("v0a", "v0c", "v0m"):
            row[f"qx_{key}"], row[f"qy_{key}"] = planes[f"q_{key}"]

        return row

    def process_candidate(self, event, event_type, planes, track):
        """Identifies one track and builds its candidate row.

        Parameters
        ----------
        event : Event
            Selected event
        event_type : int
            Event type
        planes : dict
            Event plane angles and Q vectors
        track : Track
            Track which passes the candidate track cuts

        Returns
        -------
        dict
            Candidate row, `None` if the track is rejected
        """
        has_tof = track.has_tof_out and track.length >= self.min_tof_length

        # TPC identification
        if not self.tpc_signal_range[0] <= track.tpc_signal <= self.tpc_signal_range[1]:
            return None
        if not track.has_inner_param:
            return None

        ptot = track.inner_p
        if ptot < self.min_inner_p:
            return None

        pull_tpc = tpc_pull(track.tpc_signal, expected_tpc_signal(ptot, self.pid))

        pt = track.pt
        if self.pid == HE3_PID:
            pt = 2 * pt
        if abs(ptot) >= self.max_p or abs(pt) >= self.max_pt:
            return None

        # TOF identification
        if not has_tof:
            return None

        tof = track.tof_signal - event.tof_start_time
        beta = tof_beta(track.length, tof)
        mass = tof_mass(ptot, beta)
        pull_tof = tof_pull(beta, expected_beta(ptot, self.pid))

        if abs(ptot) < self.max_tpc_pull_p and abs(pull_tpc) > self.max_tpc_pull:
            return None
        if abs(pull_tof) > self.max_tof_pull:
            return None

        low, high = PID_MASS_WINDOWS[self.pid]
        if not np.isfinite(mass) or not low <= abs(mass) <= high:
            return None

        # Event plane of the candidate, without its own contribution
        ep = event.event_plane
        phi = track.phi
        ep_tpc = event_plane_for_candidate(
            track.id, ep.q_tpc, ep.qx_contrib, ep.qy_contrib
        )

        u = np.cos(2 * phi), np.sin(2 * phi)
        qa, qc = planes["q_v0a"], planes["q_v0c"]

        return {
            "centrality": event.centrality,
            "event_type": event_type,
            "has_tof": has_tof,
            "pt": pt,
            "mass_tof": mass,
            "uq_v0a": u[0] * qa[0] + u[1] * qa[1],
            "uq_v0c": u[0] * qc[0] + u[1] * qc[1],
            "charge": track.charge,
            "cos2dphi_tpc": np.cos(2 * phi_0_pi(phi - ep_tpc)),
            "cos2dphi_v0m": np.cos(2 * phi_0_pi(phi - planes["v0m"])),
            "cos2dphi_v0a": np.cos(2 * phi_0_pi(phi - planes["v0a"])),
            "cos2dphi_v0c": np.cos(2 * phi_0_pi(phi - planes["v0c"])),
            "impact_xy": track.dca_xy,
            "impact_z": track.dca_z,
            "pull_tpc": pull_tpc,
            "phi": phi,
        }
