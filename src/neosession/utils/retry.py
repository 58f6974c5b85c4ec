"""Retry utilities with exponential backoff.

Uses the backoff library to retry transient driver
connection failures.
"""

from collections.abc import Mapping
from typing import Any

import backoff
from loguru import logger
from neo4j.exceptions import ServiceUnavailable, SessionExpired


def on_backoff(details: Mapping[str, Any]) -> None:
    """Log retry attempts."""
    logger.warning(
        "Retrying {}: attempt={} wait={}s error={}",
        details["target"].__name__,
        details["tries"],
        details["wait"],
        details["exception"],
    )


def on_giveup(details: Mapping[str, Any]) -> None:
    """Log when retries are exhausted."""
    logger.error(
        "Gave up on {}: attempts={} error={}",
        details["target"].__name__,
        details["tries"],
        details["exception"],
    )


retry_connect = backoff.on_exception(
    backoff.expo,
    (ServiceUnavailable, SessionExpired, ConnectionError, TimeoutError),
    max_tries=3,
    max_time=30,  # Total max time in seconds
    on_backoff=on_backoff,
    on_giveup=on_giveup,
)
