"""Logging setup for neosession.

Application messages are written with loguru. The neo4j driver logs
through the stdlib ``neo4j`` logger; its records are forwarded into the
same loguru sinks at a separately configured level, since the driver is
very chatty at DEBUG.
"""

import logging
import sys
from typing import Any

from loguru import logger

from neosession.config.models import LoggingConfig

DRIVER_LOGGER = "neo4j"

_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[source]}</cyan> - "
    "<level>{message}</level>"
)


class _DriverLogHandler(logging.Handler):
    """Forward neo4j driver records to loguru, tagged with their logger name."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.bind(source=record.name).opt(exception=record.exc_info).log(
            level, record.getMessage()
        )


def _tag_source(record: Any) -> None:
    record["extra"].setdefault("source", record["name"])


def configure_logging(config: LoggingConfig) -> None:
    """
    Configure loguru sinks and route driver logs into them.

    Console output goes to stderr so command output on stdout
    (``neosession show``) stays machine-readable.

    Args:
        config: LoggingConfig with levels, format, and file settings.
    """
    logger.remove()
    logger.configure(patcher=_tag_source)

    serialize = config.format == "json"
    fmt = "{message}" if serialize else _CONSOLE_FORMAT

    logger.add(
        sys.stderr,
        format=fmt,
        level=config.level,
        serialize=serialize,
        colorize=not serialize,
    )

    if config.file:
        logger.add(
            config.file,
            format=fmt,
            level=config.level,
            serialize=serialize,
            rotation=config.rotation,
            retention=config.retention,
            compression="gz",
        )

    driver_logger = logging.getLogger(DRIVER_LOGGER)
    driver_logger.handlers = [_DriverLogHandler()]
    driver_logger.setLevel(config.driver_level)
    driver_logger.propagate = False

    logger.debug(
        "Logging configured: level={} driver_level={} format={}",
        config.level,
        config.driver_level,
        config.format,
    )
