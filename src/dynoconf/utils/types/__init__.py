"""Utilities for reusable typed field annotations."""

from .fields import NonEmptyString, RedisUrl

__all__ = [
    "NonEmptyString",
    "RedisUrl",
]
