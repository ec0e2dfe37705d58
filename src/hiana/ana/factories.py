"""Builds analysis tasks from their configuration block."""

from hiana.utils.factory import instantiate, module_dict

from . import emcal, nuclei

__all__ = ["ana_task_factory"]

# Dictionary of available analysis tasks
ANA_DICT = module_dict(emcal, nuclei)


def ana_task_factory(name, cfg, overwrite=None, log_dir=None, prefix=None):
    """Instantiates an analysis task from a configuration dictionary.

    Parameters
    ----------
    name : str
        Name of the analysis task
    cfg : dict
        Analysis task configuration
    overwrite : bool, optional
        If `True`, overwrite the CSV outputs if they already exist
    log_dir : str, optional
        Output CSV file directory (shared with driver log)
    prefix : str, optional
        Name used to prefix all the output CSV files

    Returns
    -------
    AnaBase
         Initialized analysis task
    """
    # Provide the name to the configuration
    cfg = dict(cfg or {})
    cfg["name"] = name

    kwargs = {"log_dir": log_dir, "prefix": prefix}
    if overwrite is not None:
        kwargs["overwrite"] = overwrite

    return instantiate(ANA_DICT, cfg, **kwargs)
