"""
Configuration loading.

Reads condparser settings, flags and rules from YAML files.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml
from pydantic import ValidationError

from .models import ConditionConfig, FlagTable

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a configuration file cannot be loaded."""


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML parse error in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping at the top of {path}, got {type(data).__name__}")
    return data


def parse_config(data: Dict[str, Any]) -> ConditionConfig:
    """
    Build a configuration from already-loaded data.

    Raises:
        ConfigError: If the data does not describe a valid configuration.
    """
    try:
        return ConditionConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def load_config(path: Union[str, Path]) -> ConditionConfig:
    """
    Load a configuration file.

    Args:
        path: Path to the YAML file.

    Returns:
        The parsed configuration. An empty file yields the defaults.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    path = Path(path)
    config = parse_config(_read_yaml(path))
    logger.debug(
        "Loaded %s: %d flags, %d rules",
        path, len(config.flags), len(config.rules.items),
    )
    return config


def load_flag_table(path: Union[str, Path]) -> FlagTable:
    """Load only the flag table from a configuration file."""
    return load_config(path).flag_table()
