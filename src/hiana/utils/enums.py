"""Module which contains enumerated variables shared across the project."""

from enum import IntEnum, IntFlag

from .globals import *

__all__ = [
    "enum_factory",
    "PIDEnum",
    "TriggerEnum",
    "ClusterTypeEnum",
    "ClusterizerEnum",
]


def enum_factory(enum, value):
    """Parses an enumerated object from string name(s) to value(s).

    Parameters
    ----------
    enum : str
        Name of the enumerated type
    value : Union[str, int, List[str]]
        Name or names of the enumerated objects (from config)

    Returns
    -------
    Union[int, List[int]]
        Value or values of the enumerated objects
    """
    # Get the enumerated type
    ENUM_DICT = {
        "pid": PIDEnum,
        "trigger": TriggerEnum,
        "cluster_type": ClusterTypeEnum,
        "clusterizer": ClusterizerEnum,
    }
    if enum not in ENUM_DICT:
        raise ValueError(
            f"Enumerated type not recognized: {enum}. Must be one of "
            f"{list(ENUM_DICT.keys())}."
        )
    enum = ENUM_DICT[enum]

    # Integer values are passed through as is
    if isinstance(value, int):
        return value

    # Translate enumerated strings into values
    if isinstance(value, str):
        return _parse_one(enum, value)

    return [_parse_one(enum, v) for v in value]


def _parse_one(enum, value):
    """Parses a single enumerated object name."""
    if not hasattr(enum, value.upper()):
        raise ValueError(
            f"Enumerated object not recognized: {value}. Must be one "
            f"of {[e.name for e in enum]}."
        )

    return getattr(enum, value.upper()).value


class PIDEnum(IntEnum):
    """Enumerates the light nuclei species."""

    DEUTERON = DEUT_PID
    TRITON = TRIT_PID
    HELIUM3 = HE3_PID


class TriggerEnum(IntFlag):
    """Enumerates the centrality trigger classes."""

    MB = TRIGGER_MB
    CENTRAL = TRIGGER_CENTRAL
    SEMI_CENTRAL = TRIGGER_SEMI_CENTRAL


class ClusterTypeEnum(IntEnum):
    """Enumerates the calorimeter cluster types."""

    EMCAL = EMCAL_CLUSTER
    PHOS = PHOS_CLUSTER


class ClusterizerEnum(IntEnum):
    """Enumerates the EMCAL clusterization algorithms.

    Any flag above `NXN` selects the NxN algorithm with a 5x5 window.
    """

    V1 = CLUSTERIZER_V1
    NXN = CLUSTERIZER_NXN
    NXN_5X5 = CLUSTERIZER_NXN + 1
