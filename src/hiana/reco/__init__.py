"""EMCAL reconstruction tools.

- `params`: clusterization parameters
- `calib`: local calibration database and calibration objects
- `recpoint`: reconstructed points and shower shape evaluation
- `clusterizer`: v1 and NxN clusterization algorithms
- `unfold`: splitting of clusters with several local maxima
- `matching`: track to cluster matching
"""

from .calib import *
from .clusterizer import *
from .matching import *
from .params import *
from .recpoint import *
from .unfold import *
