"""Session configurators.

A configurator is any callable that receives a SessionBuilder and returns a
SessionBuilder with additional configuration applied. It may mutate its
argument and return it, or return a different builder; callers must not
assume either. Configurators only configure: they never open the session.

    def read_replica(builder: SessionBuilder) -> SessionBuilder:
        return builder.with_access_mode("READ")

    factory = SessionFactory(config, configurator=compose(read_replica, with_timeout(5)))
"""

import importlib
from typing import Any, Protocol, runtime_checkable

from loguru import logger

from neosession.errors import ConfigurationError, NeoSessionError
from neosession.session.builder import SessionBuilder


@runtime_checkable
class SessionConfigurator(Protocol):
    """Hook applying extra configuration to a SessionBuilder."""

    def __call__(self, builder: SessionBuilder) -> SessionBuilder: ...


def configure(configurator: SessionConfigurator, builder: SessionBuilder) -> SessionBuilder:
    """
    Apply a configurator and check what it hands back.

    Args:
        configurator: Hook to apply.
        builder: Builder to configure; must not be None.

    Returns:
        The builder returned by the configurator.

    Raises:
        ConfigurationError: If the builder is missing, the configurator
            returns something other than a SessionBuilder, or the
            configurator itself fails.
    """
    try:
        return _apply(configurator, builder)
    except NeoSessionError as e:
        logger.error(
            "Session configurator {} rejected the builder: {}", _name_of(configurator), e
        )
        raise


def _apply(configurator: SessionConfigurator, builder: SessionBuilder) -> SessionBuilder:
    """Contract checks of configure(), without logging."""
    if builder is None:
        raise ConfigurationError("Cannot configure a missing session builder")

    name = _name_of(configurator)
    try:
        result = configurator(builder)
    except NeoSessionError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Session configurator {name} failed: {e}") from e

    if not isinstance(result, SessionBuilder):
        raise ConfigurationError(
            f"Session configurator {name} must return a SessionBuilder, "
            f"not {type(result).__name__}"
        )
    return result


def noop(builder: SessionBuilder) -> SessionBuilder:
    """Identity configurator."""
    return builder


def compose(*configurators: SessionConfigurator) -> SessionConfigurator:
    """Chain configurators; each receives the builder the previous one returned."""

    def composed(builder: SessionBuilder) -> SessionBuilder:
        for configurator in configurators:
            builder = _apply(configurator, builder)
        return builder

    composed.__name__ = "compose(" + ", ".join(_name_of(c) for c in configurators) + ")"
    return composed


# =============================================================================
# Stock configurators
# =============================================================================


def with_timeout(seconds: float) -> SessionConfigurator:
    """Configurator setting the driver connection timeout."""

    def set_timeout(builder: SessionBuilder) -> SessionBuilder:
        return builder.with_connection_timeout(seconds)

    return set_timeout


def with_credentials(username: str, password: str) -> SessionConfigurator:
    """Configurator replacing the basic auth credentials."""

    def set_credentials(builder: SessionBuilder) -> SessionBuilder:
        return builder.with_auth(username, password)

    return set_credentials


def with_database(database: str) -> SessionConfigurator:
    """Configurator selecting the target database."""

    def set_database(builder: SessionBuilder) -> SessionBuilder:
        return builder.with_database(database)

    return set_database


def with_user_agent(user_agent: str) -> SessionConfigurator:
    """Configurator setting the driver user agent."""

    def set_user_agent(builder: SessionBuilder) -> SessionBuilder:
        return builder.with_user_agent(user_agent)

    return set_user_agent


def with_options(**driver_options: Any) -> SessionConfigurator:
    """Configurator setting raw driver keyword options."""

    def set_options(builder: SessionBuilder) -> SessionBuilder:
        for name, value in driver_options.items():
            builder.with_driver_option(name, value)
        return builder

    return set_options


def load_configurator(reference: str) -> SessionConfigurator:
    """
    Resolve a ``package.module:attribute`` reference to a configurator.

    Raises:
        ConfigurationError: If the reference is malformed, cannot be
            imported, or does not name a callable.
    """
    module_name, sep, attr_path = reference.partition(":")
    if not sep or not module_name or not attr_path:
        raise ConfigurationError(f"Configurator reference must be 'module:attribute': {reference!r}")

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import configurator module {module_name!r}: {e}") from e

    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError as e:
            raise ConfigurationError(f"Configurator {reference!r} not found") from e

    if not callable(target):
        raise ConfigurationError(f"Configurator {reference!r} is not callable")
    return target


def _name_of(configurator: Any) -> str:
    return getattr(configurator, "__name__", type(configurator).__name__)
