"""Load configuration from YAML, JSON, or TOML file."""

import json

import yaml

try:
    import tomllib  # Python 3.11+
except ImportError:
    import toml as tomllib  # pip install toml

from patch_shap.errors import InvalidConfiguration


def load_config(path: str) -> dict:
    """Load configuration from YAML, JSON, or TOML file.

    :param str path: Path to the configuration file.
    :return dict: Parsed configuration dictionary (empty for an empty file).
    """
    path = str(path)
    if path.endswith((".yaml", ".yml")):
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    elif path.endswith(".json"):
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    elif path.endswith(".toml"):
        # the toml backport reads text, tomllib reads bytes
        mode = "r" if tomllib.__name__ == "toml" else "rb"
        with open(path, mode) as f:
            data = tomllib.load(f)
    else:
        raise InvalidConfiguration("Unsupported config file format. Use .yaml, .json, or .toml")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfiguration(f"{path} must contain a mapping, got {type(data).__name__}")
    return data
