"""EMCAL calorimeter geometry.

Geometries are described by YAML files under `config/` and shared across
analysis tasks through the :class:`GeoManager`:

.. code-block:: python

    from hiana.geo import GeoManager

    geo = GeoManager.get_instance("EMCAL_COMPLETEV1")
    sm, row, col = geo.get_cell_index(1234)
"""

from .base import EMCALGeometry
from .factories import geo_factory
from .manager import GeoManager

__all__ = ["EMCALGeometry", "GeoManager", "geo_factory"]
