"""Session factory.

Assembles a session from configuration:

1. build the initial SessionBuilder from Neo4jConfig
2. apply configurators (those named in config first, then the explicit one)
3. validate the configured builder
4. finalize it into a ManagedSession, verify connectivity, run startup scripts

If any of steps 1-3 fail nothing is opened. Shutdown scripts run before
the session is closed.
"""

from collections.abc import Sequence
from typing import Any

from loguru import logger
from neo4j.exceptions import DriverError, Neo4jError

from neosession.config.models import Neo4jConfig
from neosession.errors import SessionError
from neosession.session.builder import SessionBuilder
from neosession.session.configurators import (
    SessionConfigurator,
    compose,
    configure,
    load_configurator,
    noop,
)
from neosession.session.managed import ManagedSession


class SessionFactory:
    """
    Creates configured Neo4j sessions.

    Usage:
        async with SessionFactory(config, configurator=with_timeout(5)) as session:
            rows = await session.fetchall("MATCH (n) RETURN n LIMIT 10")
    """

    def __init__(
        self,
        config: Neo4jConfig,
        configurator: SessionConfigurator | None = None,
        startup_scripts: Sequence[str] = (),
        shutdown_scripts: Sequence[str] = (),
    ) -> None:
        self._config = config
        self._configurator = configurator
        self._startup_scripts = list(startup_scripts)
        self._shutdown_scripts = list(shutdown_scripts)
        self._session: ManagedSession | None = None

    @property
    def session(self) -> ManagedSession | None:
        """The open session, if any."""
        return self._session

    def create_builder(self) -> SessionBuilder:
        """Initial builder from configuration, before any configurator runs."""
        return SessionBuilder.from_config(self._config)

    def _effective_configurator(self) -> SessionConfigurator:
        configurators = [load_configurator(ref) for ref in self._config.configurators]
        if self._configurator is not None:
            configurators.append(self._configurator)
        if not configurators:
            return noop
        if len(configurators) == 1:
            return configurators[0]
        return compose(*configurators)

    def assemble(self) -> SessionBuilder:
        """Create, configure and validate a builder without opening anything."""
        builder = configure(self._effective_configurator(), self.create_builder())
        return builder.validate()

    async def open(self) -> ManagedSession:
        """
        Assemble and open the session.

        Raises:
            ConfigurationError: If configuration or a configurator is invalid.
            SessionError: If the server is unreachable or a startup script fails.
        """
        if self._session is not None:
            return self._session

        builder = self.assemble()
        session = builder.build()
        try:
            if self._config.verify_connectivity:
                await session.verify_connectivity()
            await self._run_scripts(session, self._startup_scripts)
        except BaseException:
            await session.close()
            raise

        self._session = session
        logger.info("Session opened: uri={} database={}", builder.uri, builder.database)
        return session

    async def close(self) -> None:
        """Run shutdown scripts and close the session."""
        session, self._session = self._session, None
        if session is None:
            return
        try:
            await self._run_scripts(session, self._shutdown_scripts)
        except SessionError as e:
            logger.warning("Shutdown script failed: {}", e)
        finally:
            await session.close()
        logger.info("Session closed")

    async def _run_scripts(self, session: ManagedSession, scripts: list[str]) -> None:
        for script in scripts:
            try:
                result = await session.run(script)
                await result.consume()
            except (DriverError, Neo4jError, OSError) as e:
                raise SessionError(f"Script failed: {script!r}: {e}", uri=self._config.uri) from e
            logger.debug("Executed script: {}", script)

    async def __aenter__(self) -> ManagedSession:
        return await self.open()

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
