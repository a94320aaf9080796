"""Schema model and schema loading errors."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class Schema(BaseModel):
    """Configuration keys managed by an engine and their default values.

    The key set is fixed at load time. Defaults are opaque structured values.
    """

    model_config = ConfigDict(frozen=True)

    path: Path | None = None
    defaults: Mapping[str, Any]

    @field_validator("defaults", mode="after")
    @classmethod
    def _freeze_defaults(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    def __contains__(self, key: object) -> bool:
        return key in self.defaults

    def keys(self) -> list[str]:
        return list(self.defaults)

    def default(self, key: str) -> Any:
        return self.defaults[key]


class SchemaLoadError(BaseModel):
    """Base schema loading error."""

    model_config = ConfigDict(extra="forbid")

    path: Path
    message: str


class SchemaIOError(SchemaLoadError):
    """Schema file could not be read."""


class FormatError(SchemaLoadError):
    """Schema file is neither JSON (comments allowed) nor YAML, or its root is not a mapping."""
