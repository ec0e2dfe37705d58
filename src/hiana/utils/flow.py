"""Event-plane and Q-vector helpers used by anisotropic flow analyses."""

import numpy as np

__all__ = [
    "q_vector",
    "event_plane_angle",
    "phi_0_pi",
    "event_plane_for_candidate",
]


def q_vector(phi, harmonic=2, weights=None):
    """Computes the flow Q vector of a set of azimuthal angles.

    Parameters
    ----------
    phi : np.ndarray
        (N) Azimuthal angles of the particles
    harmonic : int, default 2
        Harmonic of the flow vector
    weights : np.ndarray, optional
        (N) Weight of each particle

    Returns
    -------
    Tuple[float, float]
        (Qx, Qy) components
    """
    phi = np.asarray(phi, dtype=float)
    if weights is None:
        weights = np.ones(len(phi))

    qx = np.sum(weights * np.cos(harmonic * phi))
    qy = np.sum(weights * np.sin(harmonic * phi))

    return float(qx), float(qy)


def event_plane_angle(qx, qy, harmonic=2):
    """Event-plane angle in (-pi/n, pi/n] from the Q vector components."""
    return float(np.arctan2(qy, qx) / harmonic)


def phi_0_pi(phi):
    """Brings an azimuthal angle in the range [0, pi].

    Parameters
    ----------
    phi : float
        Angle to wrap

    Returns
    -------
    float
        Wrapped angle
    """
    result = phi
    while result < 0:
        result += np.pi
    while result > np.pi:
        result -= np.pi

    return result


def event_plane_for_candidate(track_id, q, qx_contrib, qy_contrib, harmonic=2):
    """Event-plane angle with the contribution of a candidate removed.

    The candidate track may have contributed to the event Q vector. To avoid
    auto-correlations, its contribution is subtracted before the angle is
    computed. Tracks with an ID outside of the contribution arrays did not
    contribute and are left untouched.

    Parameters
    ----------
    track_id : int
        ID of the candidate track
    q : Tuple[float, float]
        Event Q vector
    qx_contrib : np.ndarray
        (N) X contribution of each track to the Q vector
    qy_contrib : np.ndarray
        (N) Y contribution of each track to the Q vector
    harmonic : int, default 2
        Harmonic of the flow vector

    Returns
    -------
    float
        Event-plane angle in [0, 2pi/n)
    """
    qx, qy = q
    if 0 <= track_id < len(qx_contrib):
        qx -= qx_contrib[track_id]
        qy -= qy_contrib[track_id]

    phi = np.arctan2(qy, qx) % (2 * np.pi)

    return float(phi / harmonic)
