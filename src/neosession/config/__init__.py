"""Configuration management for neosession."""

from neosession.config.loader import load_config
from neosession.config.models import Config, LoggingConfig, Neo4jConfig

__all__ = ["Config", "LoggingConfig", "Neo4jConfig", "load_config"]
