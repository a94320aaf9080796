"""Reusable Pydantic field annotations."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field, StrictStr


NonEmptyString = Annotated[StrictStr, Field(min_length=1, frozen=True)]

# Redis connection URL (redis://, rediss:// or unix://)
RedisUrl = Annotated[
    StrictStr,
    Field(
        pattern=r"^(rediss?|unix)://",
        frozen=True,
        description="Redis connection URL",
    ),
]

__all__ = [
    "NonEmptyString",
    "RedisUrl",
]
