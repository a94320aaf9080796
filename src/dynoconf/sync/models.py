"""Engine options and error models."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat

from dynoconf.constants import DEFAULT_CONFIG_PATH
from dynoconf.utils.types import NonEmptyString, RedisUrl


class SyncOptions(BaseModel):
    """Construction options for a DynamicConfig.

    Attributes:
        service_name: Prefix for every store key, so services can share one store
        redis_url: Connection URL used when no client is supplied
        redis_client: Already constructed store client (e.g. ``redis.asyncio.Redis``)
        config_path: Schema file with keys and their default values
        listen_timeout: Seconds the subscription listener waits per poll
    """

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    service_name: NonEmptyString
    redis_url: RedisUrl | None = None
    redis_client: Any = Field(default=None, repr=False, exclude=True)
    config_path: Path = Path(DEFAULT_CONFIG_PATH)
    listen_timeout: PositiveFloat = 1.0


class SyncError(BaseModel):
    """Base engine error."""

    model_config = ConfigDict(extra="forbid")

    service_name: str
    message: str


class ConfigurationError(SyncError):
    """Engine is misconfigured or used before initialize()."""


class SchemaError(SyncError):
    """Key is not declared in the schema."""

    key: str


class NotFoundError(SyncError):
    """Key is not present in the live cache."""

    key: str
