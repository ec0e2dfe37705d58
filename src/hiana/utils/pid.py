"""Module with functions used to identify light nuclei with the TPC and TOF."""

import numpy as np

from .globals import (
    BB_ALEPH_PARAMS,
    BB_ALEPH_PARAMS_Z2,
    HE3_PID,
    NUCLEON_MASS,
    PID_MASSES,
    PID_NUCLEONS,
    SPEED_OF_LIGHT,
)

__all__ = [
    "bethe_bloch_aleph",
    "expected_tpc_signal",
    "tpc_pull",
    "expected_beta",
    "tof_beta",
    "tof_mass",
    "tof_pull",
]


def bethe_bloch_aleph(bg, p1, p2, p3, p4, p5):
    """ALEPH parametrization of the Bethe-Bloch mean energy loss.

    Parameters
    ----------
    bg : Union[float, np.ndarray]
        Particle beta * gamma
    p1, p2, p3, p4, p5 : float
        Parameters of the parametrization

    Returns
    -------
    Union[float, np.ndarray]
        Expected TPC signal in arbitrary units
    """
    beta = bg / np.sqrt(1.0 + bg * bg)
    aa = beta**p4
    bb = np.log(p3 + (1.0 / bg) ** p5)

    return (p2 - aa - bb) * p1 / aa


def expected_tpc_signal(ptot, pid):
    """Expected TPC dE/dx of a nucleus of a given species.

    Helium-3 is doubly charged: the rigidity is converted to momentum and the
    signal scales as the charge squared.

    Parameters
    ----------
    ptot : float
        Momentum at the inner wall of the TPC (GeV/c)
    pid : int
        Nucleus species identifier

    Returns
    -------
    float
        Expected TPC signal
    """
    assert pid in PID_NUCLEONS, f"Particle species not recognized: {pid}"
    scale = NUCLEON_MASS * PID_NUCLEONS[pid]
    if pid == HE3_PID:
        return 4 * bethe_bloch_aleph(2 * ptot / scale, *BB_ALEPH_PARAMS_Z2)

    return bethe_bloch_aleph(ptot / scale, *BB_ALEPH_PARAMS)


def tpc_pull(signal, expected, resolution=0.07):
    """Number of standard deviations between a measured and expected dE/dx."""
    return (signal - expected) / (resolution * expected)


def expected_beta(p, pid):
    """Velocity expected for a nucleus of momentum `p`.

    Parameters
    ----------
    p : float
        Momentum (GeV/c)
    pid : int
        Nucleus species identifier

    Returns
    -------
    float
        Expected beta
    """
    mass = PID_MASSES[pid]
    return np.sqrt(1.0 - (mass * mass) / (p * p + mass * mass))


def tof_beta(length, tof):
    """Velocity measured from the track length (cm) and time of flight (ps).

    A non-positive time of flight yields a null velocity.
    """
    if tof <= 0.0:
        return 0.0

    return length / (SPEED_OF_LIGHT * tof)


def tof_mass(p, beta):
    """Mass estimate from the momentum and the TOF velocity.

    Returns NaN when the velocity is not physical (beta >= 1 or beta <= 0).

    Parameters
    ----------
    p : float
        Momentum (GeV/c)
    beta : float
        Measured velocity

    Returns
    -------
    float
        Mass estimate (GeV/c^2)
    """
    if beta <= 0.0 or beta >= 1.0:
        return np.nan

    gamma = 1.0 / np.sqrt(1.0 - beta * beta)
    return p / np.sqrt(gamma * gamma - 1.0)


def tof_pull(beta, exp_beta, resolution=0.01):
    """Number of standard deviations between a measured and expected beta."""
    return (beta - exp_beta) / (resolution * exp_beta)
