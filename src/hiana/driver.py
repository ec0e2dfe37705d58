"""hiana driver class.

Takes care of everything in one centralized place:
- Configuration processing and logging
- Analysis task execution, event by event
- Profiling and logging of each event to a CSV file
"""

import os
import time
from datetime import datetime

import numpy as np
import yaml

from .ana import AnaManager
from .io.write import CSVWriter
from .utils.logger import logger
from .utils.stopwatch import StopwatchManager
from .version import __version__

__all__ = ["Driver"]


class Driver:
    """Central hiana driver.

    Processes the global configuration and runs the analysis tasks on each
    event provided by the steering layer. It takes a configuration dictionary
    of the form:

    .. code-block:: yaml

        base:
          <Base driver configuration>
        ana:
          <Analysis tasks>
    """

    def __init__(self, cfg):
        """Initializes the class attributes.

        Parameters
        ----------
        cfg : dict
            Global configuration dictionary
        """
        self.watch = StopwatchManager()
        self.watch.initialize("iteration")

        # Process the full configuration dictionary and store it
        base, ana = self.process_config(**cfg)

        # Initialize the base driver configuration parameters
        self.initialize_base(**base)

        # Initialize the analysis tasks
        self.ana = None
        if ana is not None:
            self.watch.initialize("ana")
            self.ana = AnaManager(ana, log_dir=self.log_dir, prefix=self.log_prefix)

        self.logger = None
        self.counter = 0

    def process_config(self, base=None, ana=None):
        """Reads the configuration and dumps it to the logger.

        Parameters
        ----------
        base : dict, optional
            Base driver configuration dictionary
        ana : dict, optional
            Analysis task configuration dictionary

        Returns
        -------
        dict
            Processed base configuration
        dict
            Analysis task configuration
        """
        if base is None:
            base = {}

        # Set the verbosity of the logger
        verbosity = base.get("verbosity", "info")
        logger.setLevel(verbosity.upper())

        # If the seed is not set, randomize it (and keep a record of it)
        if "seed" not in base or base["seed"] < 0:
            base["seed"] = int(time.time())
        else:
            assert isinstance(
                base["seed"], int
            ), f"The driver seed must be an integer, got: {base['seed']}"

        self.cfg = {"base": base}
        if ana is not None:
            self.cfg["ana"] = ana

        logger.info("Release version: %s\n", __version__)
        logger.info(yaml.dump(self.cfg, default_flow_style=None, sort_keys=False))

        return base, ana

    def initialize_base(
        self,
        seed,
        log_dir="logs",
        prefix=None,
        prefix_log=False,
        overwrite_log=False,
        iterations=None,
        log_step=1,
        verbosity="info",
    ):
        """Initialize the base driver parameters.

        Parameters
        ----------
        seed : int
            Random number generator seed
        log_dir : str, default 'logs'
            Path to the directory where the logs will be written to
        prefix : str, optional
            Name of the input dataset, used to prefix the output files
        prefix_log : bool, default False
            If `True`, use the prefix in the driver log name
        overwrite_log : bool, default False
            If `True`, overwrite the driver log even if it already exists
        iterations : int, optional
            Maximum number of events to process (-1 or `None` means all)
        log_step : int, default 1
            Number of events between two progress messages
        verbosity : str, default 'info'
            Verbosity level to pass to the `logging` module
        """
        np.random.seed(seed)

        self.seed = seed
        self.log_dir = log_dir
        self.log_prefix = prefix
        self.prefix_log = prefix_log
        self.overwrite_log = overwrite_log
        self.iterations = iterations
        self.log_step = log_step

    def initialize_log(self):
        """Initialize the output log for this driver process."""
        if self.log_dir and not os.path.exists(self.log_dir):
            os.makedirs(self.log_dir, exist_ok=True)

        log_name = "hiana_log.csv"
        if self.prefix_log and self.log_prefix:
            log_name = f"{self.log_prefix}_{log_name}"

        log_path = os.path.join(self.log_dir, log_name) if self.log_dir else log_name
        self.logger = CSVWriter(log_path, overwrite=self.overwrite_log)

    def process(self, event, index=None):
        """Run all the analysis tasks on one event.

        Parameters
        ----------
        event : Event
            Event to process
        index : int, optional
            Entry index of the event (defaults to the event index or to the
            number of events processed so far)

        Returns
        -------
        dict
            Data dictionary, including the outputs of the analysis tasks
        """
        self.watch.start("iteration")

        if index is None:
            index = self.counter
            if event is not None and event.index >= 0:
                index = event.index

        run = event.run if event is not None else -1
        data = {"index": index, "run": run, "event": event}

        if self.ana is not None:
            self.watch.start("ana")
            self.ana(data)
            self.watch.stop("ana")

        self.watch.stop("iteration")
        self.counter += 1

        return data

    def run(self, events):
        """Loop over a sequence of events and process them.

        Parameters
        ----------
        events : Iterable[Event]
            Events provided by the steering layer
        """
        self.initialize_log()

        self.counter = 0
        for iteration, event in enumerate(events):
            if self.iterations is not None and 0 <= self.iterations <= iteration:
                break

            tstamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            data = self.process(event)
            self.log(data, tstamp, iteration)

        logger.info("Processed %d events.", self.counter)

    def log(self, data, tstamp, iteration):
        """Log the timing and scalar information of one event.

        Parameters
        ----------
        data : dict
            Dictionary of data products to extract scalars from
        tstamp : str
            Time when this iteration was run
        iteration : int
            Iteration counter
        """
        log_dict = {"iter": iteration, "index": data["index"]}

        suff = "_time"
        keys = list(self.watch.keys())
        if self.ana is not None:
            keys += list(self.ana.watch.keys())
        for key in keys:
            watch = self.watch if key in self.watch.keys() else self.ana.watch
            log_dict[f"{key}{suff}"] = watch.time(key).wall
            log_dict[f"{key}{suff}_cpu"] = watch.time(key).cpu
            log_dict[f"{key}{suff}_sum"] = watch.time_sum(key).wall

        for key, value in data.items():
            if key not in log_dict and np.isscalar(value):
                log_dict[key] = value

        if self.logger is not None:
            self.logger.append(log_dict)

        if (iteration + 1) % self.log_step == 0:
            t_iter = self.watch.time("iteration").wall
            logger.info("Iter. %d @ %s: %.3f s", iteration, tstamp, t_iter)
