"""
CLI entry point: ``tinyhatchet [-config PATH]``.

Loads the config file, sets up logging and the HTTP session, runs the
terminal UI, and writes the server URL and email back to the config file on
the way out.  Startup failures print a message on stderr and exit 1.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
import structlog
from rich.console import Console
from rich.markup import escape

from tinyhatchet import __version__
from tinyhatchet.core.config import default_config_path, load_config, save_config
from tinyhatchet.core.exceptions import ConfigError, TransportError
from tinyhatchet.core.logging import configure_logging
from tinyhatchet.core.session import SessionContext

logger = structlog.get_logger()


@click.command("tinyhatchet")
@click.option(
    "-config",
    "--config",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to the config file (default: ~/.tinyhatchet.config).",
)
@click.version_option(__version__, prog_name="tinyhatchet")
def main(config_path: Path | None) -> None:
    """Search and browse your tinyhatchet log entries from the terminal."""
    console = Console(stderr=True)
    path = config_path or default_config_path()
    configure_logging()

    try:
        config = load_config(path)
        configure_logging(config.debug_path, config.log_level)
        session = SessionContext.from_config(config)
    except (ConfigError, TransportError) as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)

    logger.info("startup", version=__version__, config=str(path), server_url=config.server_url)

    from tinyhatchet.ui.app import run

    try:
        run(session)
    finally:
        session.close()
        try:
            save_config(session.store(config), path)
        except ConfigError as exc:
            console.print(f"[yellow]Warning:[/yellow] {escape(str(exc))}")
        logger.info("shutdown")
        configure_logging()
