"""CLI commands that operate on synchronized configuration."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any, Literal

import typer
import yaml
from pydantic import ValidationError
from redis.exceptions import RedisError
from result import Err, Ok, Result, is_err

from dynoconf.schema import SchemaLoadError
from dynoconf.settings import get_settings
from dynoconf.sync import DynamicConfig, SyncError

FormatOption = Annotated[
    Literal["yaml", "json"],
    typer.Option("--format", "-f", show_default=True, case_sensitive=False, help="Output format (yaml or json)."),
]

app = typer.Typer(help="Inspect and update synchronized configuration.")


@dataclass(frozen=True)
class CliContext:
    service_name: str | None = None
    redis_url: str | None = None
    config_path: Path | None = None


@app.callback(invoke_without_command=True)
def _config_root(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("show")
def show(ctx: typer.Context, format: FormatOption = "yaml") -> None:
    """Print every configuration value after hydrating from the store."""

    async def _show(config: DynamicConfig) -> Result[Any, SyncError]:
        return Ok(config.snapshot())

    payload = _run(ctx, _show)
    typer.echo(_format_payload(payload, format.lower()))


@app.command("get")
def get(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Configuration key.")],
    format: FormatOption = "json",
) -> None:
    """Print the current value of KEY."""

    async def _get(config: DynamicConfig) -> Result[Any, SyncError]:
        return config.get(key)

    typer.echo(_format_payload(_run(ctx, _get), format.lower()))


@app.command("set")
def set_(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Configuration key.")],
    value: Annotated[str, typer.Argument(help="New value, parsed as YAML/JSON when possible.")],
) -> None:
    """Store VALUE for KEY and publish it to every instance."""
    parsed = _parse_value(value)

    async def _set(config: DynamicConfig) -> Result[None, SyncError]:
        return await config.set(key, parsed)

    _run(ctx, _set)
    typer.secho(f"Updated {key}", fg=typer.colors.GREEN)


@app.command("delete")
def delete(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Configuration key.")],
) -> None:
    """Remove the stored value of KEY so every instance reverts to the default."""

    async def _delete(config: DynamicConfig) -> Result[None, SyncError]:
        return await config.delete(key)

    _run(ctx, _delete)
    typer.secho(f"Reset {key} to its default", fg=typer.colors.GREEN)


@app.command("watch")
def watch(
    ctx: typer.Context,
    count: Annotated[
        int | None,
        typer.Option("--count", "-n", min=1, help="Exit after this many updates."),
    ] = None,
) -> None:
    """Print configuration updates as they arrive."""

    async def _watch(config: DynamicConfig) -> Result[None, SyncError]:
        done = asyncio.Event()
        seen = 0

        def _echo(key: str, value: Any) -> None:
            nonlocal seen
            typer.echo(json.dumps({"key": key, "value": value}))
            seen += 1
            if count is not None and seen >= count:
                done.set()

        config.on_update(_echo)
        await done.wait()
        return Ok(None)

    try:
        _run(ctx, _watch)
    except KeyboardInterrupt:
        raise typer.Exit() from None


def _run[T](ctx: typer.Context, action: Callable[[DynamicConfig], Awaitable[Result[T, SyncError]]]) -> T:
    cli: CliContext = ctx.obj or CliContext()
    try:
        options = get_settings().to_sync_options(
            service_name=cli.service_name,
            redis_url=cli.redis_url,
            config_path=cli.config_path,
        )
    except ValidationError as exc:
        typer.secho(f"Invalid options: {_first_error(exc)}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=2) from None

    match DynamicConfig.from_options(options):
        case Err(load_error):
            _handle_load_error(load_error)
            raise typer.Exit(code=1)
        case Ok(config):
            pass

    try:
        result = asyncio.run(_session(config, action))
    except RedisError as exc:
        typer.secho(f"Store error: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1) from None

    match result:
        case Ok(value):
            return value
        case Err(error):
            _handle_sync_error(error)
            raise typer.Exit(code=1)


async def _session[T](
    config: DynamicConfig,
    action: Callable[[DynamicConfig], Awaitable[Result[T, SyncError]]],
) -> Result[T, SyncError]:
    try:
        initialized = await config.initialize()
        if is_err(initialized):
            return initialized
        return await action(config)
    finally:
        await config.disconnect()


def _parse_value(raw: str) -> object:
    try:
        parsed = yaml.safe_load(raw)
        json.dumps(parsed)
    except (yaml.YAMLError, TypeError):
        # Not YAML, or YAML types without a JSON form (dates, sets)
        return raw
    return parsed


def _format_payload(payload: object, format: str) -> str:
    if format == "json":
        return json.dumps(payload, indent=2, sort_keys=True)
    return yaml.safe_dump(payload, sort_keys=True).rstrip("\n")


def _first_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first.get("loc") or ())
    return f"{field}: {first.get('msg')}" if field else str(first.get("msg"))


def _handle_load_error(error: SchemaLoadError) -> None:
    typer.secho(f"[schema] {error.message} ({error.path})", err=True, fg=typer.colors.RED)


def _handle_sync_error(error: SyncError) -> None:
    key = getattr(error, "key", None)
    suffix = f" (key: {key})" if key is not None else ""
    typer.secho(f"[{error.service_name}] {error.message}{suffix}", err=True, fg=typer.colors.RED)
