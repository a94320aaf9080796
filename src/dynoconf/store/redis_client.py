"""Redis-backed store connections."""

from __future__ import annotations

import redis.asyncio as aioredis

from dynoconf.common import create_logger

from .protocol import PubSub, StoreClient

logger = create_logger("store")


def connect(url: str) -> StoreClient:
    """Create a command connection for ``url``.

    Connections are established lazily by redis-py on the first command.
    """
    logger.debug("Creating Redis client", url=_redact(url))
    return aioredis.from_url(url)


def open_pubsub(client: StoreClient) -> PubSub:
    """Open a subscribing connection separate from ``client``'s command connection."""
    return client.pubsub()


def _redact(url: str) -> str:
    scheme, sep, rest = url.partition("://")
    if "@" not in rest:
        return url
    return f"{scheme}{sep}***@{rest.rsplit('@', 1)[1]}"
