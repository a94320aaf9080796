"""Schema loading for Dynoconf."""

from .loader import load_schema, parse_schema_text
from .models import FormatError, Schema, SchemaIOError, SchemaLoadError

__all__ = [
    "FormatError",
    "Schema",
    "SchemaIOError",
    "SchemaLoadError",
    "load_schema",
    "parse_schema_text",
]
