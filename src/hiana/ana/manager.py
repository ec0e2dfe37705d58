"""Manages the execution of the analysis tasks."""

from collections import OrderedDict
from copy import deepcopy

import numpy as np

from hiana.utils.stopwatch import StopwatchManager

from .factories import ana_task_factory

__all__ = ["AnaManager"]


class AnaManager:
    """Initializes and runs a chain of analysis tasks.

    The tasks are executed in decreasing order of priority. The data products
    returned by a task are added to the data dictionary, so that they can be
    used by the tasks which follow it.
    """

    def __init__(self, cfg, log_dir=None, prefix=None):
        """Initialize the analysis manager.

        Parameters
        ----------
        cfg : dict
            Analysis task configurations
        log_dir : str, optional
            Output CSV file directory (shared with driver log)
        prefix : str, optional
            Input file prefix, used to prefix the output CSV files if requested
        """
        self.parse_config(log_dir, prefix, **cfg)

    def parse_config(
        self, log_dir, prefix, overwrite=None, prefix_output=False, **modules
    ):
        """Parse the analysis block configuration.

        Parameters
        ----------
        log_dir : str
            Output CSV file directory (shared with driver log)
        prefix : str
            Input file prefix
        overwrite : bool, optional
            If `True`, overwrite the CSV outputs if they already exist
        prefix_output : bool, default False
            If `True`, prefix the output CSV names with the input file prefix
        **modules : dict
            Configuration of each analysis task
        """
        # Fetch the priority of each task (-1 if not specified)
        modules = deepcopy(modules)
        keys = np.array(list(modules.keys()))
        priorities = -np.ones(len(keys), dtype=np.int32)
        for i, k in enumerate(keys):
            if modules[k] is not None and "priority" in modules[k]:
                priorities[i] = modules[k].pop("priority")

        if not prefix_output:
            prefix = None

        # Stable sort, tasks with equal priority keep their configuration order
        self.watch = StopwatchManager()
        self.modules = OrderedDict()
        for k in keys[np.argsort(-priorities, kind="stable")]:
            self.watch.initialize(k)
            self.modules[k] = ana_task_factory(
                k, modules[k], overwrite, log_dir, prefix
            )

    def __call__(self, data):
        """Pass one event through the analysis tasks.

        Parameters
        ----------
        data : dict
            Dictionary of data products, updated in place
        """
        for key, module in self.modules.items():
            self.watch.start(key)
            result = module(data)
            self.watch.stop(key)

            if result is not None:
                data.update(result)
