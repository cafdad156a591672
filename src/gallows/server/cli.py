"""CLI entry point for the gallows server. Uses Click for argument parsing."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace

import click

from gallows.server.config import Config

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@click.command()
@click.option("--host", default=None, help="Host to bind to (default: 0.0.0.0)")
@click.option("--port", type=int, default=None, help="Port to bind to (default: 9191)")
@click.option(
    "--interval",
    type=float,
    default=None,
    help="Seconds between redraws of each client's screen (default: 0.2)",
)
@click.option("--max-misses", type=int, default=None, help="Wrong guesses allowed before losing")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="info",
    show_default=True,
)
def main(host, port, interval, max_misses, log_level):
    """Serve multiplayer hangman to raw TCP clients (e.g. ``nc host 9191``)."""
    logging.basicConfig(level=getattr(logging, log_level.upper()), format=_LOG_FORMAT)

    try:
        config = Config.from_env()
    except ValueError as e:
        raise click.BadParameter(str(e)) from None

    overrides = {
        "host": host,
        "port": port,
        "redraw_interval": interval,
        "max_misses": max_misses,
    }
    config = replace(config, **{k: v for k, v in overrides.items() if v is not None})

    from gallows.server.app import GallowsServer

    try:
        server = GallowsServer(config)
    except ValueError as e:
        raise click.BadParameter(str(e)) from None

    try:
        asyncio.run(server.serve())
    except KeyboardInterrupt:
        click.echo("Shutting down")


if __name__ == "__main__":
    main()
