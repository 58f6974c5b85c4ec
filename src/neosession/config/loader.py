"""Configuration loading.

Values come from an optional YAML file, overridden by ``NEOSESSION_*``
environment variables. Every way the result can be invalid surfaces as
ConfigurationError so callers handle file and configurator problems alike.
"""

from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pydantic import ValidationError

from neosession.config.models import Config
from neosession.errors import ConfigurationError


def load_config(config_path: Path | None) -> Config:
    """
    Load configuration from a YAML file, or from defaults and environment.

    Args:
        config_path: Path to YAML config file, or None for defaults.

    Returns:
        Validated Config object.

    Raises:
        FileNotFoundError: If config_path doesn't exist.
        ConfigurationError: If the YAML is malformed, its root is not a
            mapping, or a value fails validation.
    """
    data = _read_yaml(config_path) if config_path is not None else {}
    source = str(config_path) if config_path is not None else "defaults"

    try:
        config = Config(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {source}: {_describe(e)}") from e

    logger.debug("Configuration loaded from {}", source)
    return config


def _read_yaml(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with config_path.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"YAML root in {config_path} must be a mapping, not {type(data).__name__}"
        )
    return data


def _describe(error: ValidationError) -> str:
    """One ``section.field: message`` entry per validation failure."""
    return "; ".join(
        f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}" for item in error.errors()
    )
