"""Construct a geometry class from its name."""

from pathlib import Path
from typing import Dict

import yaml

from .base import EMCALGeometry

# Get config directory relative to this module
GEO_CONFIG_DIR = Path(__file__).parent / "config"

__all__ = ["geo_factory"]


def geo_dict() -> Dict[str, Path]:
    """Builds a dictionary of available geometries.

    Returns
    -------
    Dict[str, Path]
        Dictionary which maps upper-case geometry names onto their
        configuration file
    """
    options = {}
    for path in GEO_CONFIG_DIR.glob("*/*_geometry.yaml"):
        with open(path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f)

        options[cfg["name"].upper()] = path

    return options


def geo_factory(name: str) -> EMCALGeometry:
    """Instantiates a geometry from its name.

    Parameters
    ----------
    name : str
        Name of the geometry (e.g. "EMCAL_FIRSTYEARV1", "EMCAL_COMPLETEV1")

    Returns
    -------
    EMCALGeometry
         Initialized geometry object
    """
    options = geo_dict()
    if name.upper() not in options:
        raise ValueError(
            f"No geometry found with name '{name}'. Available geometries "
            f"are: {sorted(options.keys())}"
        )

    with open(options[name.upper()], "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)

    return EMCALGeometry(**cfg)
