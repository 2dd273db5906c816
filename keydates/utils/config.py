"""
Configuration loading for the Contract Key Dates service.
Reads YAML files from the config directory.
"""

import os
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"


def get_config_dir() -> Path:
    """Config directory, overridable with CONFIG_DIR."""
    return Path(os.getenv("CONFIG_DIR") or DEFAULT_CONFIG_DIR)


@lru_cache(maxsize=None)
def load_yaml_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file from the config directory.

    Args:
        filename: File name relative to the config directory

    Returns:
        Parsed configuration (empty dict for an empty file)

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = get_config_dir() / filename
    with open(path, 'r') as f:
        config = yaml.safe_load(f) or {}
    logger.debug(f"Loaded configuration from {path}")
    return config


def get_api_config() -> Dict[str, Any]:
    return load_yaml_config("api_config.yaml")


def get_engine_config() -> Dict[str, Any]:
    return load_yaml_config("engine_config.yaml")


def get_setting(section: str, key: str, default: Any) -> Any:
    """
    Look up a single engine setting, falling back to a default.

    Args:
        section: Top-level section, e.g. "horizon"
        key: Key inside the section
        default: Value used when the section or key is missing

    Returns:
        Configured value or the default
    """
    value = (get_engine_config().get(section) or {}).get(key)
    return default if value is None else value
