"""CLI interface for Inkstage.

Command-line tool for serving a content site and inspecting path resolution.
"""

import asyncio
import json
import logging
import sys
from pathlib import Path

import click

from inkstage.config import Config
from inkstage.core.outcomes import FeedSource, NotFound, Outcome, Redirect
from inkstage.core.pattern import InvalidTemplate
from inkstage.store.errors import DataStoreError


@click.group()
def cli() -> None:
    """Inkstage - where posts take the stage."""


@cli.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover inkstage.toml)",
)
@click.option(
    "--data-file",
    "-d",
    type=click.Path(exists=True, path_type=Path, dir_okay=False),
    default=None,
    help="JSON content file (overrides config)",
)
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--watch/--no-watch",
    default=None,
    help="Enable/disable reloading the content file on change (overrides config, default: enabled)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (log redirects and not-found reasons)",
)
def serve(
    config_path: Path | None,
    data_file: Path | None,
    host: str | None,
    port: int | None,
    watch: bool | None,
    verbose: bool,
) -> None:
    """Start the content server."""
    from inkstage.server import run_server

    _configure_logging(verbose)
    config = _load_config(config_path).with_overrides(
        host=host,
        port=port,
        data_file=data_file,
        watch=watch,
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Site URL: {config.site.url}")
    click.echo(f"Content file: {config.content.data_file}")
    if config.content.watch:
        click.echo("Content reload: enabled")
    else:
        click.echo("Content reload: disabled")

    run_server(config)


@cli.command()
@click.argument("path")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover inkstage.toml)",
)
@click.option(
    "--data-file",
    "-d",
    type=click.Path(exists=True, path_type=Path, dir_okay=False),
    default=None,
    help="JSON content file (overrides config)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def resolve(path: str, config_path: Path | None, data_file: Path | None, verbose: bool) -> None:
    """Show how PATH resolves against the content file."""
    from inkstage.server import build_resolver
    from inkstage.store.loader import load_snapshot
    from inkstage.store.memory import MemoryStore

    _configure_logging(verbose)
    config = _load_config(config_path).with_overrides(data_file=data_file)

    try:
        store = MemoryStore(load_snapshot(config.content.data_file))
        resolver = build_resolver(config, store)
    except (OSError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    relative = resolver.urls.strip_subdir(path)
    if relative is None:
        click.echo(f"not-found: outside site path {resolver.urls.subdir}/")
        return

    try:
        outcome = asyncio.run(resolver.resolve(relative))
    except DataStoreError as e:
        click.echo(click.style(f"Error ({e.status}): {e.message}", fg="red"), err=True)
        sys.exit(1)
    except InvalidTemplate as e:
        click.echo(click.style(f"Error: invalid permalinks setting: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(_describe(outcome))


def _describe(outcome: Outcome) -> str:
    if isinstance(outcome, Redirect):
        return f"redirect: {outcome.location}"
    if isinstance(outcome, NotFound):
        return f"not-found: {outcome.reason}"
    if isinstance(outcome, FeedSource):
        return f"feed: {outcome.metadata.title} ({len(outcome.items)} items)"
    return f"render: {outcome.view}\n{json.dumps(outcome.data, indent=2)}"


def _load_config(config_path: Path | None) -> Config:
    try:
        return Config.load(config_path)
    except (OSError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


if __name__ == "__main__":
    cli()
