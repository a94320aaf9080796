"""Store client protocols.

``redis.asyncio.Redis`` and its ``PubSub`` satisfy these structurally; tests
substitute in-memory doubles.
"""

from __future__ import annotations

from typing import Any, Protocol


class PubSub(Protocol):
    """A subscribing connection, independent of the command connection."""

    async def subscribe(self, *channels: str) -> Any: ...

    async def unsubscribe(self, *channels: str) -> Any: ...

    async def get_message(
        self,
        ignore_subscribe_messages: bool = False,
        timeout: float | None = 0.0,
    ) -> dict[str, Any] | None: ...

    async def aclose(self) -> None: ...


class StoreClient(Protocol):
    """Command connection to the shared key-value and pub/sub store."""

    async def get(self, name: str) -> bytes | str | None: ...

    async def set(self, name: str, value: str) -> Any: ...

    async def delete(self, *names: str) -> int: ...

    async def publish(self, channel: str, message: str) -> int: ...

    def pubsub(self) -> PubSub: ...

    async def aclose(self) -> None: ...
