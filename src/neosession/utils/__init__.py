"""Utility modules for neosession."""

from neosession.utils.logging import configure_logging
from neosession.utils.retry import retry_connect

__all__ = ["configure_logging", "retry_connect"]
