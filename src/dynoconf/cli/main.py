from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated

import typer

from dynoconf.common import create_logger, setup_cli_logging
from dynoconf.settings import get_settings

from .commands import config as config_commands
from .commands.config import CliContext

logger = create_logger("cli")

app = typer.Typer(
    help="Read, write and watch dynamically synchronized configuration.",
    context_settings={"help_option_names": ["-h", "--help"]},
)
app.add_typer(config_commands.app, name="config")


@app.callback(invoke_without_command=True)
def _root_callback(
    ctx: typer.Context,
    service: Annotated[
        str | None,
        typer.Option("--service", "-s", help="Service name used to namespace store keys."),
    ] = None,
    redis_url: Annotated[
        str | None,
        typer.Option("--redis-url", "-r", help="Redis connection URL."),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Schema file with keys and default values."),
    ] = None,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable colored output")] = False,
) -> None:
    # Respect NO_COLOR environment variable and --no-color flag
    if no_color or os.getenv("NO_COLOR"):
        ctx.color = False

    ctx.obj = CliContext(service_name=service, redis_url=redis_url, config_path=config_path)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _setup_logging() -> None:
    settings = get_settings()
    if settings.logging.enabled:
        setup_cli_logging(app_info=settings.app, config=settings.logging)
        logger.debug("CLI logging initialized", config=settings.logging.model_dump())


def main() -> None:
    """Entrypoint for the dynoconf CLI."""
    _setup_logging()
    app()
