"""Main CLI application for podfeed."""

import asyncio
import logging
from dataclasses import replace
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from podfeed.core.config import Config, load_config, write_default_config
from podfeed.core.errors import ConfigError
from podfeed.core.models import MAX_EPISODES, FeedResult

app = typer.Typer(
    name="podfeed",
    help="Fetch podcast RSS feeds and extract podcast and episode records.",
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)

LOG_FORMAT = "%(name)s: %(message)s"


class Verbosity(Enum):
    QUIET = "quiet"
    NORMAL = "normal"
    VERBOSE = "verbose"


class Engine(str, Enum):
    PATTERN = "pattern"
    FEEDPARSER = "feedparser"


class State:
    """Global CLI state."""

    def __init__(self) -> None:
        self.verbosity: Verbosity = Verbosity.NORMAL
        self.config: Config | None = None


state = State()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from podfeed import __version__

        console.print(f"podfeed version {__version__}")
        raise typer.Exit()


def _configure_logging(verbosity: Verbosity) -> None:
    level = {
        Verbosity.QUIET: logging.ERROR,
        Verbosity.NORMAL: logging.WARNING,
        Verbosity.VERBOSE: logging.DEBUG,
    }[verbosity]
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[RichHandler(console=error_console, show_path=False)],
        force=True,
    )


def _effective_config(engine: Engine | None, limit: int | None) -> Config:
    config = state.config or Config()
    parser_config = config.parser
    if engine is not None:
        parser_config = replace(parser_config, engine=engine.value)
    if limit is not None:
        parser_config = replace(parser_config, max_episodes=limit)
    return replace(config, parser=parser_config)


def _report(results: dict[str, FeedResult], as_json: bool) -> None:
    from podfeed.cli.output import display_result, format_results_json

    if as_json:
        typer.echo(format_results_json(results))
    elif state.verbosity != Verbosity.QUIET:
        for feed_url, result in results.items():
            display_result(feed_url, result, console)
    else:
        for feed_url, result in results.items():
            if not result.success:
                error_console.print(f"[red]Error:[/red] {feed_url}: {result.error}")

    if not all(result.success for result in results.values()):
        raise typer.Exit(code=1)


EngineOption = Annotated[
    Engine | None,
    typer.Option("--engine", "-e", help="Parser engine (overrides config)"),
]
LimitOption = Annotated[
    int | None,
    typer.Option(
        "--limit",
        "-l",
        min=1,
        max=MAX_EPISODES,
        help="Maximum number of episodes per feed",
    ),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Print result envelopes as JSON"),
]


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress all output except errors"),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", help="Path to configuration file"),
    ] = None,
    version: Annotated[  # noqa: ARG001
        bool,
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version"),
    ] = False,
) -> None:
    """podfeed - podcast feed ingestion tool."""
    if quiet:
        state.verbosity = Verbosity.QUIET
    elif verbose:
        state.verbosity = Verbosity.VERBOSE
    else:
        state.verbosity = Verbosity.NORMAL

    _configure_logging(state.verbosity)

    try:
        state.config = load_config(config_path)
    except ConfigError as e:
        error_console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(code=1) from e


@app.command()
def fetch(
    feed_urls: Annotated[list[str], typer.Argument(help="RSS feed URLs to ingest")],
    engine: EngineOption = None,
    limit: LimitOption = None,
    as_json: JsonOption = False,
) -> None:
    """Fetch one or more podcast feeds and show their episodes."""
    from podfeed.services.ingest import process_podcast_feeds

    config = _effective_config(engine, limit)

    if state.verbosity != Verbosity.QUIET and not as_json:
        for feed_url in feed_urls:
            console.print(f"Fetching feed: [bold]{feed_url}[/bold]")

    results = asyncio.run(process_podcast_feeds(feed_urls, config=config))
    _report(results, as_json)


@app.command()
def parse(
    path: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, readable=True, help="Local feed file"),
    ],
    engine: EngineOption = None,
    limit: LimitOption = None,
    as_json: JsonOption = False,
) -> None:
    """Parse a feed document stored on disk."""
    from podfeed.services.ingest import parse_feed_text

    config = _effective_config(engine, limit)
    xml_text = path.read_text(encoding="utf-8", errors="replace")
    _report({str(path): parse_feed_text(xml_text, config=config)}, as_json)


@app.command("init-config")
def init_config(
    path: Annotated[
        Path | None,
        typer.Option("--path", help="Where to write the config file"),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file"),
    ] = False,
) -> None:
    """Write the default configuration file."""
    try:
        written = write_default_config(path, overwrite=force)
    except ConfigError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from e

    if state.verbosity != Verbosity.QUIET:
        console.print(f"Wrote default configuration to [bold]{written}[/bold]")


if __name__ == "__main__":
    app()
