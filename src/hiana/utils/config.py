"""Module in charge of loading analysis configuration files."""

import os
import re
from copy import deepcopy

import yaml

__all__ = ["ConfigLoader", "load_config"]

# Keys written as `block.sub_block.key: value` are treated as overrides
DOTTED_KEY = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*(?:\.[a-zA-Z_][a-zA-Z0-9_]*)+$")


class ConfigLoader(yaml.SafeLoader):
    """YAML loader which supports the `!include` tag.

    A block of the configuration can be replaced by the content of another
    YAML file living in the same directory:

    .. code-block:: yaml

        ana:
          emcal_clusterize: !include clusterize.yaml
    """

    def __init__(self, stream):
        """Initialize the loader.

        Parameters
        ----------
        stream : _io.TextIOWrapper
            Output of python's `open` function on a yaml file
        """
        # Fetch the parent directory where the configuration file lives
        self._root = os.path.split(stream.name)[0]

        # Initialize the base loader
        super().__init__(stream)

    def include(self, node):
        """Load and include a YAML file that is requested in the base config.

        Parameters
        ----------
        node : yaml.Node
            Node which contains the name of the file to include
        """
        filename = os.path.join(self._root, self.construct_scalar(node))
        with open(filename, "r", encoding="utf-8") as f:
            return yaml.load(f, Loader=ConfigLoader)


ConfigLoader.add_constructor("!include", ConfigLoader.include)


def deep_merge(base_dict, override_dict):
    """Recursively merge `override_dict` into a copy of `base_dict`.

    Parameters
    ----------
    base_dict : dict
        Base dictionary to merge into
    override_dict : dict
        Dictionary with values to override

    Returns
    -------
    dict
        Merged dictionary
    """
    result = deepcopy(base_dict)
    for key, value in override_dict.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def set_nested_value(config, key_path, value):
    """Set a nested value in a dictionary using dot notation.

    Parameters
    ----------
    config : dict
        Configuration dictionary to modify
    key_path : str
        Dot-separated path to the key (e.g. "ana.nuclei_flow.particle")
    value : object
        Value to set

    Returns
    -------
    dict
        Modified configuration dictionary
    """
    keys = key_path.split(".")
    current = config
    for key in keys[:-1]:
        if key not in current:
            current[key] = {}
        elif not isinstance(current[key], dict):
            raise ValueError(f"Cannot set '{key_path}': '{key}' is not a dictionary")
        current = current[key]

    current[keys[-1]] = value

    return config


def parse_value(value_str):
    """Parse a string value into the appropriate Python type.

    Parameters
    ----------
    value_str : str
        String representation of the value

    Returns
    -------
    object
        Parsed value
    """
    if not isinstance(value_str, str):
        return value_str

    try:
        return yaml.safe_load(value_str)
    except yaml.YAMLError:
        return value_str


def load_config(cfg_path):
    """Load a configuration file to a dictionary.

    This function supports:
    - Including other YAML files: "include: base.yaml" or
      "include: [base.yaml, other.yaml]"
    - Including files within blocks: "key: !include file.yaml"
    - Overriding nested parameters with dot notation: "ana.task.key: value"

    Parameters
    ----------
    cfg_path : str
        Path to the configuration file

    Returns
    -------
    dict
        Loaded and merged configuration dictionary
    """
    root_dir = os.path.dirname(os.path.abspath(cfg_path))
    with open(cfg_path, "r", encoding="utf-8") as f:
        main_config = yaml.load(f, Loader=ConfigLoader)

    if main_config is None:
        return {}

    # Split the loaded block into includes, overrides and regular keys
    includes, overrides, cleaned = [], {}, {}
    for key, value in main_config.items():
        if key == "include":
            if isinstance(value, str):
                includes.append(value)
            elif isinstance(value, list):
                includes.extend(value)
            else:
                raise ValueError(
                    f"'include' must be a string or list of strings, got {type(value)}"
                )
        elif DOTTED_KEY.match(key):
            overrides[key] = value
        else:
            cleaned[key] = value

    # Load all included files first (in order), then the main block
    config = {}
    for include_file in includes:
        include_path = os.path.join(root_dir, include_file)
        if not os.path.exists(include_path):
            raise FileNotFoundError(f"Included file not found: {include_path}")

        config = deep_merge(config, load_config(include_path))

    config = deep_merge(config, cleaned)

    # Apply the dot-notation overrides last
    for key_path, value in overrides.items():
        config = set_nested_value(config, key_path, parse_value(value))

    return config
