"""Dynoconf - schema-driven configuration kept in sync across service instances.

By default, Dynoconf's internal logging is disabled when used as a library.
Library users can enable logging by calling dynoconf.enable_logging().
"""

from dynoconf.common import disable_library_logging, enable_library_logging
from dynoconf.schema import FormatError, Schema, SchemaIOError, SchemaLoadError, load_schema
from dynoconf.sync import (
    ConfigurationError,
    DynamicConfig,
    NotFoundError,
    SchemaError,
    SyncError,
    SyncOptions,
    UpdateCallback,
)

disable_library_logging()

enable_logging = enable_library_logging

__all__ = [
    "ConfigurationError",
    "DynamicConfig",
    "FormatError",
    "NotFoundError",
    "Schema",
    "SchemaError",
    "SchemaIOError",
    "SchemaLoadError",
    "SyncError",
    "SyncOptions",
    "UpdateCallback",
    "enable_logging",
    "load_schema",
]
