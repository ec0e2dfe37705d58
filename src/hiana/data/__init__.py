"""Data structures and containers used by the analysis tasks.

- `track`: reconstructed central barrel tracks
- `calo`: calorimeter cells, digits and clusters
- `event`: vertices, event-plane information and full events
- `container`: object containers with acceptance cuts
- `iterable`: views over all or accepted objects of a container

Example usage:

.. code-block:: python

    from hiana.data import TrackContainer

    tracks = TrackContainer(event.tracks, min_pt=0.15)
    for track in tracks.accepted():
        ...
"""

from .base import *
from .calo import *
from .container import *
from .event import *
from .iterable import *
from .track import *
