"""Tests for SessionFactory."""

from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from neo4j.exceptions import ConfigurationError as DriverConfigurationError
from neo4j.exceptions import ServiceUnavailable

from neosession.config.models import Neo4jConfig
from neosession.errors import ConfigurationError, NeoSessionError, SessionError
from neosession.session.builder import SessionBuilder
from neosession.session.configurators import with_database, with_options, with_timeout
from neosession.session.factory import SessionFactory
from neosession.session.managed import ManagedSession


@pytest.fixture
def graph_db(mock_driver: MagicMock) -> Iterator[MagicMock]:
    with patch("neosession.session.builder.AsyncGraphDatabase") as graph_db:
        graph_db.driver.return_value = mock_driver
        yield graph_db


def require_database(builder: SessionBuilder) -> SessionBuilder:
    if builder.database is None:
        raise ConfigurationError("database is required")
    return builder


class TestSessionFactoryAssemble:
    """Tests for building and configuring without I/O."""

    def test_create_builder_from_config(self, neo4j_config: Neo4jConfig) -> None:
        builder = SessionFactory(neo4j_config).create_builder()
        assert builder.uri == neo4j_config.uri
        assert builder.database == "movies"

    def test_assemble_without_configurator(self, neo4j_config: Neo4jConfig) -> None:
        builder = SessionFactory(neo4j_config).assemble()
        assert builder.connection_timeout == 30.0

    def test_assemble_applies_configurator(self, neo4j_config: Neo4jConfig) -> None:
        builder = SessionFactory(neo4j_config, configurator=with_timeout(3)).assemble()
        assert builder.connection_timeout == 3

    def test_configurator_called_once(self, neo4j_config: Neo4jConfig) -> None:
        configurator = MagicMock(side_effect=lambda b: b)
        SessionFactory(neo4j_config, configurator=configurator).assemble()
        configurator.assert_called_once()
        assert isinstance(configurator.call_args.args[0], SessionBuilder)

    def test_config_configurators_run_before_explicit(self) -> None:
        config = Neo4jConfig(configurators=["neosession.session.configurators:noop"])
        seen: list[str | None] = []

        def record(builder: SessionBuilder) -> SessionBuilder:
            seen.append(builder.database)
            return builder.with_database("explicit")

        builder = SessionFactory(config, configurator=record).assemble()
        assert seen == [None]
        assert builder.database == "explicit"

    def test_unresolvable_config_configurator(self) -> None:
        config = Neo4jConfig(configurators=["neosession.nowhere:tune"])
        with pytest.raises(ConfigurationError, match="Cannot import"):
            SessionFactory(config).assemble()

    def test_assemble_validates_result(self, neo4j_config: Neo4jConfig) -> None:
        factory = SessionFactory(neo4j_config, configurator=with_timeout(-1))
        with pytest.raises(ConfigurationError, match="connection_timeout"):
            factory.assemble()

    def test_assemble_rejects_non_numeric_timeout(self) -> None:
        factory = SessionFactory(
            Neo4jConfig(verify_connectivity=False),
            configurator=with_timeout("5"),  # type: ignore[arg-type]
        )
        with pytest.raises(NeoSessionError, match="must be a number"):
            factory.assemble()


class TestSessionFactoryOpen:
    """Tests for opening and closing sessions."""

    async def test_open_returns_managed_session(
        self, neo4j_config: Neo4jConfig, graph_db: MagicMock, mock_driver: MagicMock
    ) -> None:
        factory = SessionFactory(neo4j_config, configurator=with_database("graph"))
        session = await factory.open()
        assert isinstance(session, ManagedSession)
        assert session.database == "graph"
        assert factory.session is session
        mock_driver.verify_connectivity.assert_awaited_once()

    async def test_open_is_reentrant(self, neo4j_config: Neo4jConfig, graph_db: MagicMock) -> None:
        factory = SessionFactory(neo4j_config)
        first = await factory.open()
        assert await factory.open() is first
        graph_db.driver.assert_called_once()

    async def test_unknown_driver_option_is_configuration_error(self) -> None:
        factory = SessionFactory(
            Neo4jConfig(verify_connectivity=False),
            configurator=with_options(no_such_option=1),
        )
        with pytest.raises(ConfigurationError, match="Driver rejected") as exc_info:
            await factory.open()
        assert isinstance(exc_info.value, NeoSessionError)
        assert isinstance(exc_info.value.__cause__, DriverConfigurationError)
        assert factory.session is None

    async def test_skip_connectivity_check(self, graph_db: MagicMock, mock_driver: MagicMock) -> None:
        factory = SessionFactory(Neo4jConfig(verify_connectivity=False))
        await factory.open()
        mock_driver.verify_connectivity.assert_not_awaited()

    async def test_failing_configurator_never_builds(self, graph_db: MagicMock) -> None:
        factory = SessionFactory(Neo4jConfig(), configurator=require_database)
        with patch.object(SessionBuilder, "build") as build:
            with pytest.raises(ConfigurationError, match="database is required"):
                await factory.open()
        build.assert_not_called()
        graph_db.driver.assert_not_called()
        assert factory.session is None

    async def test_connectivity_failure_closes_driver(
        self, neo4j_config: Neo4jConfig, graph_db: MagicMock, mock_driver: MagicMock
    ) -> None:
        mock_driver.verify_connectivity = AsyncMock(side_effect=OSError("refused"))
        factory = SessionFactory(neo4j_config)
        with pytest.raises(SessionError, match="Failed to connect"):
            await factory.open()
        mock_driver.close.assert_awaited_once()
        assert factory.session is None

    async def test_startup_scripts_run_in_order(
        self, neo4j_config: Neo4jConfig, graph_db: MagicMock, mock_driver: MagicMock
    ) -> None:
        scripts = ["CREATE INDEX a IF NOT EXISTS FOR (n:A) ON (n.id)", "RETURN 1"]
        factory = SessionFactory(neo4j_config, startup_scripts=scripts)
        await factory.open()
        session = mock_driver.session.return_value
        assert [c.args[0] for c in session.run.await_args_list] == scripts

    async def test_startup_script_failure(
        self, neo4j_config: Neo4jConfig, graph_db: MagicMock, mock_driver: MagicMock
    ) -> None:
        mock_driver.session.return_value.run = AsyncMock(
            side_effect=ServiceUnavailable("connection lost")
        )
        factory = SessionFactory(neo4j_config, startup_scripts=["BROKEN"])
        with pytest.raises(SessionError, match="Script failed"):
            await factory.open()
        mock_driver.close.assert_awaited_once()

    async def test_close_runs_shutdown_scripts(
        self, neo4j_config: Neo4jConfig, graph_db: MagicMock, mock_driver: MagicMock
    ) -> None:
        factory = SessionFactory(neo4j_config, shutdown_scripts=["MATCH (n:Temp) DETACH DELETE n"])
        await factory.open()
        await factory.close()
        session = mock_driver.session.return_value
        session.run.assert_awaited_once_with("MATCH (n:Temp) DETACH DELETE n", {})
        mock_driver.close.assert_awaited_once()
        assert factory.session is None

    async def test_shutdown_script_failure_still_closes(
        self, neo4j_config: Neo4jConfig, graph_db: MagicMock, mock_driver: MagicMock
    ) -> None:
        factory = SessionFactory(neo4j_config, shutdown_scripts=["BROKEN"])
        await factory.open()
        mock_driver.session.return_value.run = AsyncMock(
            side_effect=ServiceUnavailable("connection lost")
        )
        await factory.close()
        mock_driver.close.assert_awaited_once()

    async def test_close_without_open(self, neo4j_config: Neo4jConfig) -> None:
        await SessionFactory(neo4j_config).close()

    async def test_context_manager(
        self, neo4j_config: Neo4jConfig, graph_db: MagicMock, mock_driver: MagicMock
    ) -> None:
        async with SessionFactory(neo4j_config) as session:
            assert await session.fetchone("RETURN 1 AS ok") == {"ok": 1}
        mock_driver.close.assert_awaited_once()
