"""Mutable builder for Neo4j driver sessions.

The Neo4j driver is configured through keyword arguments rather than a
builder object. SessionBuilder accumulates those arguments so that
configurators can inspect and change them before anything is opened:

- driver options are passed to ``AsyncGraphDatabase.driver()``
- session options are passed to ``driver.session()``
"""

from typing import Any, Literal

from loguru import logger
from neo4j import AsyncGraphDatabase
from neo4j.exceptions import ConfigurationError as DriverConfigurationError

from neosession.config.models import SUPPORTED_URI_SCHEMES, Neo4jConfig
from neosession.errors import ConfigurationError
from neosession.session.managed import ManagedSession

_POSITIVE_DRIVER_OPTIONS = (
    "connection_timeout",
    "connection_acquisition_timeout",
    "max_connection_pool_size",
    "max_connection_lifetime",
    "max_transaction_retry_time",
)


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


class SessionBuilder:
    """
    Accumulates connection and session settings before a session exists.

    Mutators return the builder itself so calls can be chained:

        builder = SessionBuilder().with_uri("bolt://db:7687").with_database("movies")
    """

    def __init__(self, uri: str | None = None) -> None:
        self._uri = uri
        self._auth: tuple[str, str] | None = None
        self._database: str | None = None
        self._driver_options: dict[str, Any] = {}
        self._session_options: dict[str, Any] = {}

    @classmethod
    def from_config(cls, config: Neo4jConfig) -> "SessionBuilder":
        """Create a builder pre-populated from a Neo4jConfig."""
        builder = cls(config.uri)
        if config.username:
            builder.with_auth(config.username, config.password)
        if config.database:
            builder.with_database(config.database)
        builder.with_pool_size(config.max_connection_pool_size)
        builder.with_connection_timeout(config.connection_timeout_seconds)
        if config.user_agent:
            builder.with_user_agent(config.user_agent)
        return builder

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def uri(self) -> str | None:
        return self._uri

    @property
    def auth(self) -> tuple[str, str] | None:
        return self._auth

    @property
    def username(self) -> str | None:
        return self._auth[0] if self._auth else None

    @property
    def database(self) -> str | None:
        return self._database

    @property
    def connection_timeout(self) -> float | None:
        return self._driver_options.get("connection_timeout")

    @property
    def max_connection_pool_size(self) -> int | None:
        return self._driver_options.get("max_connection_pool_size")

    @property
    def user_agent(self) -> str | None:
        return self._driver_options.get("user_agent")

    @property
    def driver_options(self) -> dict[str, Any]:
        """Copy of the keyword options passed to the driver."""
        return dict(self._driver_options)

    @property
    def session_options(self) -> dict[str, Any]:
        """Copy of the keyword options passed to ``driver.session()``."""
        return dict(self._session_options)

    # =========================================================================
    # Mutators
    # =========================================================================

    def with_uri(self, uri: str) -> "SessionBuilder":
        self._uri = uri
        return self

    def with_auth(self, username: str, password: str) -> "SessionBuilder":
        if not username:
            raise ConfigurationError("username must not be empty")
        self._auth = (username, password)
        return self

    def without_auth(self) -> "SessionBuilder":
        self._auth = None
        return self

    def with_database(self, database: str | None) -> "SessionBuilder":
        self._database = database
        return self

    def with_connection_timeout(self, seconds: float) -> "SessionBuilder":
        return self.with_driver_option("connection_timeout", seconds)

    def with_pool_size(self, size: int) -> "SessionBuilder":
        return self.with_driver_option("max_connection_pool_size", size)

    def with_user_agent(self, user_agent: str) -> "SessionBuilder":
        return self.with_driver_option("user_agent", user_agent)

    def with_fetch_size(self, fetch_size: int) -> "SessionBuilder":
        return self.with_session_option("fetch_size", fetch_size)

    def with_access_mode(self, mode: Literal["READ", "WRITE"]) -> "SessionBuilder":
        if mode not in ("READ", "WRITE"):
            raise ConfigurationError(f"access mode must be READ or WRITE, got {mode!r}")
        return self.with_session_option("default_access_mode", mode)

    def with_driver_option(self, name: str, value: Any) -> "SessionBuilder":
        """Set a raw driver keyword option. ``auth`` has its own mutator."""
        if name in ("auth", "uri"):
            raise ConfigurationError(f"use with_{name}() to set {name!r}")
        self._driver_options[name] = value
        return self

    def with_session_option(self, name: str, value: Any) -> "SessionBuilder":
        """Set a raw session keyword option. ``database`` has its own mutator."""
        if name == "database":
            raise ConfigurationError("use with_database() to set 'database'")
        self._session_options[name] = value
        return self

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def copy(self) -> "SessionBuilder":
        """Return an independent builder with the same settings."""
        other = SessionBuilder(self._uri)
        other._auth = self._auth
        other._database = self._database
        other._driver_options = dict(self._driver_options)
        other._session_options = dict(self._session_options)
        return other

    def validate(self) -> "SessionBuilder":
        """Check the builder can be finalized.

        Raises:
            ConfigurationError: If the URI is missing or unsupported, or a
                numeric option is not a positive number.
        """
        if not self._uri:
            raise ConfigurationError("uri is required")
        if not isinstance(self._uri, str):
            raise ConfigurationError(f"uri must be a string, got {self._uri!r}")
        if not self._uri.startswith(SUPPORTED_URI_SCHEMES):
            raise ConfigurationError(
                f"uri must start with one of: {', '.join(SUPPORTED_URI_SCHEMES)}"
            )
        for name in _POSITIVE_DRIVER_OPTIONS:
            value = self._driver_options.get(name)
            if value is None:
                continue
            if not _is_number(value):
                raise ConfigurationError(f"{name} must be a number, got {value!r}")
            if value <= 0:
                raise ConfigurationError(f"{name} must be positive, got {value!r}")
        fetch_size = self._session_options.get("fetch_size")
        if fetch_size is not None:
            if not isinstance(fetch_size, int) or isinstance(fetch_size, bool):
                raise ConfigurationError(f"fetch_size must be an integer, got {fetch_size!r}")
            if fetch_size == 0:
                raise ConfigurationError("fetch_size must not be zero")
        return self

    def describe(self) -> dict[str, Any]:
        """Effective settings with the password masked."""
        return {
            "uri": self._uri,
            "username": self.username,
            "password": "***" if self._auth else None,
            "database": self._database,
            "driver_options": self.driver_options,
            "session_options": self.session_options,
        }

    def build(self) -> ManagedSession:
        """Finalize the builder into a session bound to a new driver."""
        self.validate()
        try:
            driver = AsyncGraphDatabase.driver(
                self._uri,
                auth=self._auth,
                **self._driver_options,
            )
        except (DriverConfigurationError, ValueError, TypeError) as e:
            raise ConfigurationError(f"Driver rejected configuration: {e}") from e
        logger.debug("Driver created for {} (database={})", self._uri, self._database)
        return ManagedSession(
            driver,
            database=self._database,
            session_options=self._session_options,
            uri=self._uri,
        )

    def __repr__(self) -> str:
        return f"SessionBuilder(uri={self._uri!r}, database={self._database!r})"
