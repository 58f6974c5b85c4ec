"""neosession: configurable Neo4j session assembly.

A session builder accumulates driver and session settings, caller-supplied
configurators customize it, and a session factory finalizes it into a live
session.
"""

from neosession.errors import ConfigurationError, NeoSessionError, SessionError
from neosession.session.builder import SessionBuilder
from neosession.session.configurators import (
    SessionConfigurator,
    compose,
    configure,
    load_configurator,
    noop,
)
from neosession.session.factory import SessionFactory
from neosession.session.managed import ManagedSession

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "ManagedSession",
    "NeoSessionError",
    "SessionBuilder",
    "SessionConfigurator",
    "SessionError",
    "SessionFactory",
    "__version__",
    "compose",
    "configure",
    "load_configurator",
    "noop",
]
