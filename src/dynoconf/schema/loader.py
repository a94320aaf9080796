"""Schema file loading with extension-directed and fallback parsing."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import yaml
from result import Err, Ok, Result

from dynoconf.common import create_logger
from dynoconf.utils import loads_jsonc

from .models import FormatError, Schema, SchemaIOError, SchemaLoadError

logger = create_logger("schema")

JSON_EXTENSIONS = frozenset({".json", ".jsonc"})
YAML_EXTENSIONS = frozenset({".yml", ".yaml"})

type _Parser = Callable[[str], object]


def load_schema(path: Path | str) -> Result[Schema, SchemaLoadError]:
    """Read a schema file and parse it into a key to default mapping."""
    path = Path(path)

    try:
        raw_text = path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("Schema file unreadable", path=str(path), error=str(exc))
        return Err(SchemaIOError(path=path, message=str(exc)))

    return (
        parse_schema_text(raw_text, path)
        .map(lambda data: Schema(path=path, defaults=data))
        .inspect(lambda schema: logger.debug("Schema loaded", path=str(path), keys=schema.keys()))
    )


def parse_schema_text(text: str, path: Path) -> Result[dict[str, object], FormatError]:
    """Parse schema text, choosing the format from the file extension first.

    JSON and JSONC files are parsed as JSON with comments stripped, YAML files
    as YAML. When that fails, or the extension is unknown, JSON with comments
    and then YAML are tried in turn.
    """
    extension = path.suffix.lower()

    if extension in JSON_EXTENSIONS:
        result = _try_parse(text, _parse_jsonc)
        if result is not None:
            return _ensure_mapping(result, path)
        logger.warning("Failed to parse schema as JSON, trying YAML", path=str(path))
    elif extension in YAML_EXTENSIONS:
        result = _try_parse(text, _parse_yaml)
        if result is not None:
            return _ensure_mapping(result, path)
        logger.warning("Failed to parse schema as YAML, trying JSON", path=str(path))

    for parser in (_parse_jsonc, _parse_yaml):
        result = _try_parse(text, parser)
        if result is not None:
            return _ensure_mapping(result, path)

    return Err(FormatError(path=path, message=f"Could not determine the format of {path}"))


def _parse_jsonc(text: str) -> object:
    return loads_jsonc(text)


def _parse_yaml(text: str) -> object:
    data = yaml.safe_load(text)
    return {} if data is None else data


def _try_parse(text: str, parser: _Parser) -> Ok[object] | None:
    try:
        return Ok(parser(text))
    except (ValueError, RecursionError, yaml.YAMLError):
        return None


def _ensure_mapping(parsed: Ok[object], path: Path) -> Result[dict[str, object], FormatError]:
    data = parsed.ok_value
    if not isinstance(data, dict):
        return Err(
            FormatError(
                path=path,
                message=f"Schema root in {path} must be a mapping of keys to default values.",
            )
        )
    return Ok({str(key): value for key, value in data.items()})
