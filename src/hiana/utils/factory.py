"""Builds objects (analysis tasks, clusterizers, ...) from configuration blocks.

A configuration block is either a bare name or a dictionary which holds the
name of the object under `name` along with its keyword arguments.
"""

from copy import deepcopy
from warnings import warn

from .logger import logger

__all__ = ["module_dict", "instantiate"]


def module_dict(*modules, class_name=None):
    """Maps the names of the classes exported by modules onto the classes.

    A class is registered under its class name, under its `name` attribute
    and under each of its `aliases`.

    Parameters
    ----------
    *modules : List[module]
        Modules from which to fetch the classes
    class_name : str, optional
        Name requested by the configuration, used to flag deprecated aliases

    Returns
    -------
    dict
        Dictionary which maps acceptable names to classes
    """
    mapping = {}
    for module in modules:
        for cls_name in getattr(module, "__all__", dir(module)):
            if cls_name.startswith("_"):
                continue

            # Only register classes defined within the module
            cls = getattr(module, cls_name)
            if not isinstance(cls, type):
                continue
            if module.__name__ not in getattr(cls, "__module__", ""):
                continue

            mapping[cls_name] = cls
            if getattr(cls, "name", None):
                mapping[cls.name] = cls

            for alias in getattr(cls, "aliases", ()):
                if class_name is not None and class_name == alias:
                    warn(
                        f"The name `{alias}` is deprecated, use `{cls.name}`.",
                        DeprecationWarning,
                    )
                mapping[alias] = cls

    return mapping


def instantiate(module_dict, cfg, alt_name=None, **kwargs):
    """Instantiates a class from a configuration block.

    .. code-block:: yaml

        task:
          name: task_name
          kwarg_1: value_1

    Parameters
    ----------
    module_dict : dict
        Dictionary which maps names onto classes
    cfg : Union[str, dict]
        Configuration block (or bare class name)
    alt_name : str, optional
        Alternative key under which the class name can be provided
    **kwargs : dict, optional
        Additional keyword arguments passed to the class constructor

    Returns
    -------
    object
        Instantiated object
    """
    if isinstance(cfg, str):
        cfg = {"name": cfg}

    config = deepcopy(cfg)
    key = "name"
    if alt_name is not None and alt_name in config:
        assert "name" not in config, f"Specify one of `name` or `{alt_name}`, not both"
        key = alt_name
    if key not in config:
        raise KeyError("Could not find the name of the class under `name`.")

    class_name = config.pop(key)
    if class_name not in module_dict:
        raise ValueError(
            f"Could not find `{class_name}` among the available classes: "
            f"{list(module_dict.keys())}"
        )

    # Top-level parameters take precedence over the shared ones
    params = dict(kwargs)
    params.update(config)

    cls = module_dict[class_name]
    try:
        return cls(**params)

    except Exception:
        logger.error("Failed to instantiate %s with: %s", cls.__name__, params)
        raise
