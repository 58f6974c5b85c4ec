"""CLI entry point for neosession.

Provides commands for inspecting the assembled session
settings and checking that a session can be opened.
"""

import asyncio
import json
from pathlib import Path
from typing import TYPE_CHECKING

import click

from neosession import __version__

if TYPE_CHECKING:
    from neosession.session.factory import SessionFactory

_config_option = click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)

_configurator_option = click.option(
    "--configurator",
    "configurators",
    multiple=True,
    metavar="MODULE:ATTR",
    help="Session configurator to apply (repeatable)",
)


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """Configurable Neo4j session assembly.

    Builds a Neo4j session from configuration, applies
    session configurators, and opens the session.
    """
    pass


def _build_factory(config: Path | None, configurators: tuple[str, ...]) -> "SessionFactory":
    from pydantic import ValidationError

    from neosession.config.loader import load_config
    from neosession.config.models import Neo4jConfig
    from neosession.errors import ConfigurationError
    from neosession.session.factory import SessionFactory
    from neosession.utils.logging import configure_logging

    cfg = load_config(config)
    configure_logging(cfg.logging)

    neo4j_config = cfg.neo4j
    if configurators:
        data = neo4j_config.model_dump()
        data["configurators"] = [*neo4j_config.configurators, *configurators]
        try:
            neo4j_config = Neo4jConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid --configurator: {e.errors()[0]['msg']}") from e
    return SessionFactory(neo4j_config)


@cli.command()
@_config_option
@_configurator_option
def show(config: Path | None, configurators: tuple[str, ...]) -> None:
    """Show the effective session settings.

    Applies all configurators and prints the resulting
    builder settings as JSON. The password is masked.
    """
    from neosession.errors import NeoSessionError

    try:
        builder = _build_factory(config, configurators).assemble()
    except NeoSessionError as e:
        raise click.ClickException(str(e)) from e

    click.echo(json.dumps(builder.describe(), indent=2, sort_keys=True, default=str))


@cli.command()
@_config_option
@_configurator_option
def ping(config: Path | None, configurators: tuple[str, ...]) -> None:
    """Open a session and run a trivial query."""
    from neosession.errors import NeoSessionError

    async def main() -> None:
        async with _build_factory(config, configurators) as session:
            record = await session.fetchone("RETURN 1 AS ok")
        if not record or record.get("ok") != 1:
            raise click.ClickException("Unexpected response from server")

    try:
        asyncio.run(main())
    except NeoSessionError as e:
        raise click.ClickException(str(e)) from e

    click.echo("OK")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
