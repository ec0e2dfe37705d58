"""Test the central driver."""

import os

import numpy as np

from hiana import Driver


def test_driver_no_ana(tmp_path):
    """A driver without tasks still logs each event."""
    cfg = {"base": {"seed": 0, "log_dir": str(tmp_path)}}
    driver = Driver(cfg)

    assert driver.ana is None
    assert driver.seed == 0
    assert driver.cfg["base"]["seed"] == 0

    driver.run([None, None])
    assert driver.counter == 2
    assert driver.logger.num_rows == 2
    assert os.path.isfile(tmp_path / "hiana_log.csv")


def test_driver_seed(tmp_path):
    """A negative seed is replaced by a random one."""
    driver = Driver({"base": {"seed": -1, "log_dir": str(tmp_path)}})
    assert driver.seed >= 0


def test_driver_run(tmp_path, make_event, make_track):
    """The tasks run on each event, up to the requested number of iterations."""
    cfg = {
        "base": {
            "seed": 0,
            "log_dir": str(tmp_path),
            "prefix": "test",
            "prefix_log": True,
            "iterations": 2,
        },
        "ana": {"overwrite": True, "prefix_output": True, "nuclei_flow": {}},
    }
    driver = Driver(cfg)

    events = [make_event([make_track()], index=i) for i in range(3)]
    driver.run(events)

    assert driver.counter == 2
    assert driver.logger.num_rows == 2
    assert os.path.isfile(tmp_path / "test_hiana_log.csv")
    assert os.path.isfile(tmp_path / "test_nuclei_flow_events.csv")

    task = driver.ana.modules["nuclei_flow"]
    assert task.counters["selected"] == 2
    assert task.writers["events"].num_rows == 2

    with open(tmp_path / "test_hiana_log.csv", "r", encoding="utf-8") as f:
        header = f.readline().strip().split(",")
    assert "nuclei_flow_time" in header
    assert "iteration_time" in header
    assert "run" in header


def test_driver_process(tmp_path, make_event):
    """Single events can be processed without a log."""
    driver = Driver({"base": {"seed": 1, "log_dir": str(tmp_path)}})

    data = driver.process(make_event(index=7))
    assert data["index"] == 7
    assert data["run"] == 1000

    data = driver.process(None)
    assert data["index"] == 1
    assert data["run"] == -1
    assert np.isscalar(data["index"])
