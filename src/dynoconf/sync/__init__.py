"""Configuration synchronization engine."""

from .engine import DynamicConfig
from .models import ConfigurationError, NotFoundError, SchemaError, SyncError, SyncOptions
from .notifier import UpdateCallback, UpdateNotifier

__all__ = [
    "ConfigurationError",
    "DynamicConfig",
    "NotFoundError",
    "SchemaError",
    "SyncError",
    "SyncOptions",
    "UpdateCallback",
    "UpdateNotifier",
]
