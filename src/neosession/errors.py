"""neosession error types.

All custom exceptions inherit from NeoSessionError to allow
catching any neosession-specific error.
"""


class NeoSessionError(Exception):
    """Base exception for all neosession errors."""

    pass


class ConfigurationError(NeoSessionError):
    """Invalid configuration supplied to a session builder."""

    pass


class SessionError(NeoSessionError):
    """Opening or using a database session failed."""

    def __init__(self, message: str, uri: str | None = None) -> None:
        super().__init__(message)
        self.uri = uri
