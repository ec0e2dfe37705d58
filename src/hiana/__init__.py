"""Top-level module of the hiana source code."""

# Import main workflow entry point
from .driver import Driver
from .version import __version__

# Import commonly used data structures
from .data import (
    CaloCells,
    CaloCluster,
    ClusterContainer,
    Event,
    IterableContainer,
    Track,
    TrackContainer,
)
