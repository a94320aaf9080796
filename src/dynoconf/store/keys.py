"""Store key naming."""

from __future__ import annotations

from dynoconf.constants import STORE_KEY_SEPARATOR


def store_key(service_name: str, config_key: str) -> str:
    """Key and channel name for ``config_key`` of ``service_name``."""
    return f"{service_name}{STORE_KEY_SEPARATOR}{config_key}"


def config_key_from_channel(service_name: str, channel: str) -> str | None:
    """Recover the configuration key from a channel name.

    Returns None when the channel does not belong to ``service_name``.
    """
    prefix = f"{service_name}{STORE_KEY_SEPARATOR}"
    if not channel.startswith(prefix):
        return None
    return channel[len(prefix) :]


def decode(payload: bytes | str) -> str:
    if isinstance(payload, bytes):
        return payload.decode("utf-8")
    return payload
