from __future__ import annotations

import asyncio
import json
from collections import defaultdict
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from dynoconf.schema import load_schema
from dynoconf.sync import DynamicConfig, SyncOptions


class FakeServer:
    """Shared state behind every FakeRedis connected to it."""

    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}
        self.subscribers: dict[str, list[FakePubSub]] = defaultdict(list)
        self.published: list[tuple[str, str]] = []
        self.fail_subscribe: set[str] = set()
        self.fail_set = False
        self.fail_publish = False


class FakePubSub:
    def __init__(self, server: FakeServer) -> None:
        self._server = server
        self._queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self.channels: list[str] = []
        self.closed = False

    async def subscribe(self, *channels: str) -> None:
        for channel in channels:
            if channel in self._server.fail_subscribe:
                raise RedisConnectionError(f"cannot subscribe to {channel}")
            self._server.subscribers[channel].append(self)
            self.channels.append(channel)
            self._queue.put_nowait(
                {"type": "subscribe", "pattern": None, "channel": channel.encode(), "data": len(self.channels)}
            )

    async def unsubscribe(self, *channels: str) -> None:
        for channel in channels or tuple(self.channels):
            if self in self._server.subscribers[channel]:
                self._server.subscribers[channel].remove(self)
            if channel in self.channels:
                self.channels.remove(channel)

    async def get_message(
        self,
        ignore_subscribe_messages: bool = False,
        timeout: float | None = 0.0,
    ) -> dict[str, Any] | None:
        try:
            message = await asyncio.wait_for(self._queue.get(), timeout)
        except TimeoutError:
            return None
        if ignore_subscribe_messages and message["type"] == "subscribe":
            return None
        return message

    async def aclose(self) -> None:
        await self.unsubscribe()
        self.closed = True

    def deliver(self, channel: str, data: bytes) -> None:
        self._queue.put_nowait({"type": "message", "pattern": None, "channel": channel.encode(), "data": data})


class FakeRedis:
    """In-memory stand-in for ``redis.asyncio.Redis`` covering the calls dynoconf makes."""

    def __init__(self, server: FakeServer) -> None:
        self._server = server
        self.pubsubs: list[FakePubSub] = []
        self.closed = False

    async def get(self, name: str) -> bytes | None:
        return self._server.data.get(name)

    async def set(self, name: str, value: str) -> bool:
        if self._server.fail_set:
            raise RedisConnectionError("connection refused")
        self._server.data[name] = value.encode()
        return True

    async def delete(self, *names: str) -> int:
        return sum(1 for name in names if self._server.data.pop(name, None) is not None)

    async def publish(self, channel: str, message: str) -> int:
        if self._server.fail_publish:
            raise RedisConnectionError("connection reset")
        self._server.published.append((channel, message))
        subscribers = list(self._server.subscribers[channel])
        for subscriber in subscribers:
            subscriber.deliver(channel, message.encode())
        return len(subscribers)

    def pubsub(self) -> FakePubSub:
        pubsub = FakePubSub(self._server)
        self.pubsubs.append(pubsub)
        return pubsub

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def redis_client(server: FakeServer) -> FakeRedis:
    return FakeRedis(server)


@pytest.fixture
def schema_file(tmp_path: Path) -> Path:
    path = tmp_path / "dyn-config.json"
    path.write_text(json.dumps({"retries": 3, "timeout": 1000, "feature_flags": {"beta": False}}))
    return path


@pytest.fixture
def make_config(server: FakeServer, schema_file: Path) -> Callable[..., DynamicConfig]:
    """Build engines for one service that share the fake server."""

    def _make(service_name: str = "orders", **overrides: Any) -> DynamicConfig:
        options = SyncOptions(
            service_name=service_name,
            redis_client=overrides.pop("redis_client", FakeRedis(server)),
            config_path=overrides.pop("config_path", schema_file),
            listen_timeout=0.05,
            **overrides,
        )
        return DynamicConfig(options, load_schema(options.config_path).unwrap())

    return _make


@pytest.fixture
def eventually() -> Callable[[Callable[[], bool]], Awaitable[None]]:
    """Wait until a condition holds, giving the subscription listener time to run."""

    async def _eventually(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                raise AssertionError("condition not met before timeout")
            await asyncio.sleep(0.01)

    return _eventually
