"""Port interface for database session operations."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Protocol


class DbSessionPort(Protocol):
    """Protocol for database session operations.

    Provides Cypher execution and transaction management
    without exposing the underlying driver session.
    """

    async def run(self, query: str, params: dict[str, Any] | None = None) -> Any:
        """Run a Cypher query.

        Args:
            query: Cypher query to run
            params: Optional query parameters

        Returns:
            Driver result object
        """
        ...

    async def fetchone(self, query: str, params: dict[str, Any] | None = None) -> dict[str, Any] | None:
        """Run a query and fetch one record.

        Args:
            query: Cypher query
            params: Optional query parameters

        Returns:
            Single record as a dict, or None
        """
        ...

    async def fetchall(self, query: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Run a query and fetch all records.

        Args:
            query: Cypher query
            params: Optional query parameters

        Returns:
            List of records as dicts
        """
        ...

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Any]:
        """Start a transaction context.

        Commits on success, rolls back on exception.

        Yields:
            The open transaction
        """
        yield

    async def close(self) -> None:
        """Release the session."""
        ...
