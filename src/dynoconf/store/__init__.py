"""Shared store access for Dynoconf."""

from .keys import config_key_from_channel, store_key
from .protocol import PubSub, StoreClient
from .redis_client import connect, open_pubsub

__all__ = [
    "PubSub",
    "StoreClient",
    "config_key_from_channel",
    "connect",
    "open_pubsub",
    "store_key",
]
