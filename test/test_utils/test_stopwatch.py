"""Test the timing utilities."""

import pytest

from hiana.utils.stopwatch import StopwatchManager


def test_stopwatch_manager():
    """Times are accumulated over start/stop cycles."""
    watch = StopwatchManager()
    watch.initialize(["a", "b"])
    assert list(watch.keys()) == ["a", "b"]

    for _ in range(2):
        watch.start("a")
        watch.stop("a")

    assert watch.time("a").wall >= 0.0
    assert watch.time_sum("a").wall >= watch.time("a").wall
    assert set(watch.times_sum().keys()) == {"a", "b"}


def test_stopwatch_errors():
    """Watches must be initialized and cannot be restarted while running."""
    watch = StopwatchManager()
    with pytest.raises(KeyError):
        watch.start("a")

    watch.initialize("a")
    watch.start("a")
    with pytest.raises(ValueError):
        watch.start("a")
