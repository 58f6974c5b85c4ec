"""Session building, configuration and assembly."""

from neosession.session.builder import SessionBuilder
from neosession.session.configurators import (
    SessionConfigurator,
    compose,
    configure,
    load_configurator,
    noop,
    with_credentials,
    with_database,
    with_options,
    with_timeout,
    with_user_agent,
)
from neosession.session.factory import SessionFactory
from neosession.session.managed import ManagedSession

__all__ = [
    "ManagedSession",
    "SessionBuilder",
    "SessionConfigurator",
    "SessionFactory",
    "compose",
    "configure",
    "load_configurator",
    "noop",
    "with_credentials",
    "with_database",
    "with_options",
    "with_timeout",
    "with_user_agent",
]
