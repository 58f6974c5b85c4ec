"""Opened Neo4j session bound to its driver.

Implements DbSessionPort on top of the async Neo4j driver. The underlying
``AsyncSession`` is created lazily on first use and queries issued inside
``transaction()`` run on the open transaction.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from loguru import logger
from neo4j.exceptions import DriverError, Neo4jError

from neosession.errors import SessionError
from neosession.utils.retry import retry_connect


class ManagedSession:
    """A driver and a session that are closed together."""

    def __init__(
        self,
        driver: Any,
        database: str | None = None,
        session_options: dict[str, Any] | None = None,
        uri: str | None = None,
    ) -> None:
        self._driver = driver
        self._database = database
        self._session_options = dict(session_options or {})
        self._uri = uri
        self._session: Any = None
        self._tx: Any = None

    @property
    def database(self) -> str | None:
        return self._database

    @property
    def driver(self) -> Any:
        return self._driver

    @property
    def closed(self) -> bool:
        return self._driver is None

    def _get_session(self) -> Any:
        if self._driver is None:
            raise SessionError("Session is closed", uri=self._uri)
        if self._session is None:
            self._session = self._driver.session(
                database=self._database, **self._session_options
            )
        return self._session

    async def verify_connectivity(self) -> None:
        """Check the server is reachable, retrying transient failures."""
        if self._driver is None:
            raise SessionError("Session is closed", uri=self._uri)

        @retry_connect
        async def _verify() -> None:
            await self._driver.verify_connectivity()

        try:
            await _verify()
        except (DriverError, Neo4jError, OSError) as e:
            raise SessionError(
                f"Failed to connect to Neo4j at {self._uri}: {e}. "
                "Check that Neo4j is running and credentials are correct.",
                uri=self._uri,
            ) from e

    async def run(self, query: str, params: dict[str, Any] | None = None) -> Any:
        """Run a Cypher query and return the driver result."""
        runner = self._tx if self._tx is not None else self._get_session()
        return await runner.run(query, params or {})

    async def fetchone(self, query: str, params: dict[str, Any] | None = None) -> dict[str, Any] | None:
        """Run a query and return the first record as a dict, or None."""
        result = await self.run(query, params)
        record = await result.single()
        return dict(record) if record is not None else None

    async def fetchall(self, query: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Run a query and return all records as dicts."""
        result = await self.run(query, params)
        return list(await result.data())

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Any]:
        """Explicit transaction; commits on success, rolls back on exception."""
        if self._tx is not None:
            raise SessionError("Transaction already open", uri=self._uri)
        tx = await self._get_session().begin_transaction()
        self._tx = tx
        try:
            yield tx
        except BaseException:
            await tx.rollback()
            raise
        else:
            await tx.commit()
        finally:
            self._tx = None

    async def close(self) -> None:
        """Close the session and the driver. Safe to call twice."""
        if self._session is not None:
            await self._session.close()
            self._session = None
        if self._driver is not None:
            await self._driver.close()
            self._driver = None
            logger.debug("Driver for {} closed", self._uri)

    async def __aenter__(self) -> "ManagedSession":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
