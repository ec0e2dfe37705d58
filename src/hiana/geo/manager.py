"""Manages shared instances of the geometry classes."""

from typing import Dict, Optional

from .base import EMCALGeometry
from .factories import geo_factory

__all__ = ["GeoManager"]


class GeoManager:
    """Manages one shared geometry instance per geometry name.

    Every analysis task which requests the same geometry name gets the same
    object, such that misalignment matrices applied by one task are seen by
    the others.
    """

    _instances: Dict[str, EMCALGeometry] = {}

    @classmethod
    def get_instance(cls, name: str) -> EMCALGeometry:
        """Get the geometry instance of a given name, build it if needed.

        Parameters
        ----------
        name : str
            Name of the geometry

        Returns
        -------
        EMCALGeometry
            Shared geometry instance
        """
        key = name.upper()
        if key not in cls._instances:
            cls._instances[key] = geo_factory(name)

        return cls._instances[key]

    @classmethod
    def is_initialized(cls, name: str) -> bool:
        """Check if a geometry instance of a given name exists."""
        return name.upper() in cls._instances

    @classmethod
    def get_instance_if_initialized(cls, name: str) -> Optional[EMCALGeometry]:
        """Get a geometry instance if it exists, `None` otherwise."""
        return cls._instances.get(name.upper(), None)

    @classmethod
    def reset(cls) -> None:
        """Drop all the geometry instances (useful for testing)."""
        cls._instances = {}
