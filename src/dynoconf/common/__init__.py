"""Common models and types used across Dynoconf modules."""

from dynoconf.utils.types import NonEmptyString, RedisUrl

from .logging import LoggingConfig, create_logger, disable_library_logging, enable_library_logging, setup_cli_logging
from .models import AppInfo

__all__ = [
    "AppInfo",
    "LoggingConfig",
    "NonEmptyString",
    "RedisUrl",
    "create_logger",
    "disable_library_logging",
    "enable_library_logging",
    "setup_cli_logging",
]
