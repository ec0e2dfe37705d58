"""Test the instantiation of classes from configuration blocks."""

import pytest

from hiana.ana import nuclei
from hiana.ana.nuclei import NucleiFlowAna
from hiana.utils.factory import instantiate, module_dict


def test_module_dict():
    """Classes are registered under their class name and their name."""
    mapping = module_dict(nuclei)

    assert mapping["NucleiFlowAna"] is NucleiFlowAna
    assert mapping["nuclei_flow"] is NucleiFlowAna
    assert "flow" not in mapping


def test_instantiate(tmp_path):
    """Instantiate a task from a dictionary or a bare name."""
    mapping = module_dict(nuclei)

    task = instantiate(
        mapping,
        {"name": "nuclei_flow", "particle": "triton"},
        log_dir=str(tmp_path),
    )
    assert isinstance(task, NucleiFlowAna)
    assert task.pid == 2

    task = instantiate(mapping, "nuclei_flow", log_dir=str(tmp_path), overwrite=True)
    assert task.pid == 1


def test_instantiate_errors(tmp_path):
    """Unknown names and missing names are reported."""
    mapping = module_dict(nuclei)

    with pytest.raises(ValueError):
        instantiate(mapping, {"name": "unknown"})
    with pytest.raises(KeyError):
        instantiate(mapping, {"particle": "deuteron"})
    with pytest.raises(ValueError):
        instantiate(
            mapping, {"name": "nuclei_flow", "particle": "pion"}, log_dir=str(tmp_path)
        )
