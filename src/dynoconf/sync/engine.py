"""Keeps a local configuration cache in sync with the shared store."""

from __future__ import annotations

import asyncio
import copy
import json
import threading
from typing import Any, Self

from redis.exceptions import RedisError
from result import Err, Ok, Result, is_err

from dynoconf.common import create_logger
from dynoconf.schema import Schema, SchemaLoadError, load_schema
from dynoconf.store import PubSub, StoreClient, config_key_from_channel, connect, open_pubsub, store_key
from dynoconf.store.keys import decode

from .models import ConfigurationError, NotFoundError, SchemaError, SyncError, SyncOptions
from .notifier import UpdateCallback, UpdateNotifier

logger = create_logger("sync")

_TRANSPORT_ERRORS = (RedisError, OSError)
# JSONDecodeError is a ValueError; oversized integers raise a plain one
_DECODE_ERRORS = (ValueError, RecursionError)


class DynamicConfig:
    """Schema-driven configuration cache kept consistent through a pub/sub store.

    Each schema key is stored under ``<service>_CONFIG_<key>`` as JSON text and
    updates are published on a channel of the same name. Every instance for the
    same service subscribes to those channels and applies what it receives.

    Cache access and callback fan-out share one lock and never await while
    holding it. Updates made through ``set`` are applied locally and then again
    when the store echoes the publish back, so callbacks see each change at
    least once.
    """

    def __init__(self, options: SyncOptions, schema: Schema) -> None:
        self._options = options
        self._schema = schema
        self._lock = threading.RLock()
        self._cache: dict[str, Any] = {}
        self._notifier = UpdateNotifier(self._lock)
        self._client: StoreClient | None = None
        self._pubsub: PubSub | None = None
        self._listener: asyncio.Task[None] | None = None
        self._supplied_client_closed = False
        self._logger = logger.bind(service=options.service_name)

    @classmethod
    def from_options(cls, options: SyncOptions) -> Result[DynamicConfig, SchemaLoadError]:
        """Load the schema named by ``options.config_path`` and build an engine for it."""
        return load_schema(options.config_path).map(lambda schema: cls(options, schema))

    @property
    def service_name(self) -> str:
        return self._options.service_name

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    async def initialize(self) -> Result[None, ConfigurationError]:
        """Connect, subscribe to every schema key and hydrate the cache.

        Subscribing happens before hydration so that updates published while
        hydrating are not lost. A key whose subscription fails is logged and
        will not receive live updates until the next ``refresh``.

        ``disconnect`` closes a supplied ``redis_client`` as well, so after it
        the engine can only be initialized again from ``redis_url``.

        Raises:
            RedisError: Store failures while reading initial values.
        """
        supplied = None if self._supplied_client_closed else self._options.redis_client
        if self._client is None and supplied is None and self._options.redis_url is None:
            message = "No redis_url or redis_client provided, must provide at least one"
            if self._supplied_client_closed:
                message = "Supplied redis_client was closed by disconnect() and no redis_url is set"
            return Err(ConfigurationError(service_name=self.service_name, message=message))

        await self._stop_listening()

        if self._client is None:
            self._client = supplied if supplied is not None else connect(self._options.redis_url)
        pubsub = open_pubsub(self._client)
        self._pubsub = pubsub

        subscribed = await self._subscribe_all(pubsub)
        if subscribed:
            self._listener = asyncio.create_task(self._listen(pubsub), name=f"dynoconf-{self.service_name}")

        await self._hydrate(self._client)

        self._logger.info(
            "Configuration initialized",
            keys=len(self._schema.keys()),
            subscribed=len(subscribed),
        )
        return Ok(None)

    def get(self, key: str) -> Result[Any, NotFoundError]:
        """Current value of ``key``, a copy the caller may modify."""
        with self._lock:
            if key not in self._cache:
                return Err(
                    NotFoundError(
                        service_name=self.service_name,
                        key=key,
                        message=f'Configuration key "{key}" not found',
                    )
                )
            return Ok(copy.deepcopy(self._cache[key]))

    async def set(self, key: str, value: Any) -> Result[None, SyncError]:
        """Persist ``value`` for ``key``, publish it and apply it locally.

        The store write gates everything else. If publishing fails afterwards
        the local cache is still updated and callbacks still run before the
        publish error is raised.

        Raises:
            TypeError: ``value`` is not JSON serializable.
            RedisError: Store failures.
        """
        checked = self._check_writable(key)
        if is_err(checked):
            return checked
        client = checked.ok_value

        payload = json.dumps(value)
        channel = store_key(self.service_name, key)

        try:
            await client.set(channel, payload)
        except _TRANSPORT_ERRORS as exc:
            self._logger.error("Error updating configuration", key=key, error=str(exc))
            raise

        await self._publish_and_apply(client, key, channel, payload)
        return Ok(None)

    async def delete(self, key: str) -> Result[None, SyncError]:
        """Remove the stored value of ``key`` so every instance reverts to the schema default.

        Raises:
            RedisError: Store failures.
        """
        checked = self._check_writable(key)
        if is_err(checked):
            return checked
        client = checked.ok_value

        channel = store_key(self.service_name, key)
        payload = json.dumps(self._schema.default(key))

        try:
            await client.delete(channel)
        except _TRANSPORT_ERRORS as exc:
            self._logger.error("Error deleting configuration", key=key, error=str(exc))
            raise

        await self._publish_and_apply(client, key, channel, payload)
        return Ok(None)

    async def refresh(self) -> Result[None, ConfigurationError]:
        """Drop every cached value and run ``initialize`` again, re-subscribing."""
        with self._lock:
            self._cache.clear()
        self._logger.debug("Configuration cache cleared for refresh")
        return await self.initialize()

    def on_update(self, callback: UpdateCallback) -> None:
        self._notifier.add(callback)

    def remove_update_callback(self, callback: UpdateCallback) -> bool:
        return self._notifier.remove(callback)

    def keys(self) -> list[str]:
        return self._schema.keys()

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return copy.deepcopy(self._cache)

    async def disconnect(self) -> None:
        """Close the subscribing and command connections, whichever exist."""
        await self._stop_listening()
        if self._client is not None:
            client, self._client = self._client, None
            if client is self._options.redis_client:
                self._supplied_client_closed = True
            await client.aclose()
        self._logger.debug("Disconnected from store")

    async def __aenter__(self) -> Self:
        (await self.initialize()).unwrap()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.disconnect()

    def _check_writable(self, key: str) -> Result[StoreClient, SyncError]:
        if key not in self._schema:
            return Err(
                SchemaError(
                    service_name=self.service_name,
                    key=key,
                    message=f'Configuration key "{key}" not found in schema',
                )
            )
        if self._client is None:
            return Err(
                ConfigurationError(
                    service_name=self.service_name,
                    message="Store client not initialized, call initialize() first",
                )
            )
        return Ok(self._client)

    async def _publish_and_apply(self, client: StoreClient, key: str, channel: str, payload: str) -> None:
        # Local value is the decoded payload, identical to what peers apply
        value = json.loads(payload)
        try:
            await client.publish(channel, payload)
        except _TRANSPORT_ERRORS as exc:
            self._logger.error("Error publishing configuration", key=key, error=str(exc))
            self._apply(key, value)
            raise
        self._apply(key, value)

    async def _subscribe_all(self, pubsub: PubSub) -> list[str]:
        subscribed: list[str] = []
        for key in self._schema.keys():
            channel = store_key(self.service_name, key)
            try:
                await pubsub.subscribe(channel)
            except _TRANSPORT_ERRORS as exc:
                self._logger.error("Failed to subscribe", channel=channel, error=str(exc))
                continue
            subscribed.append(channel)
        return subscribed

    async def _hydrate(self, client: StoreClient) -> None:
        for key in self._schema.keys():
            raw = await client.get(store_key(self.service_name, key))
            value = self._schema.default(key)
            if raw:
                try:
                    value = json.loads(decode(raw))
                except _DECODE_ERRORS as exc:
                    self._logger.warning("Stored value is not valid JSON, using default", key=key, error=str(exc))
            with self._lock:
                self._cache[key] = value

    async def _listen(self, pubsub: PubSub) -> None:
        while True:
            try:
                message = await pubsub.get_message(
                    ignore_subscribe_messages=True,
                    timeout=self._options.listen_timeout,
                )
            except _TRANSPORT_ERRORS as exc:
                self._logger.error("Error in subscription listener", error=str(exc))
                await asyncio.sleep(self._options.listen_timeout)
                continue

            if message is None or message.get("type") != "message":
                continue
            try:
                self._on_message(decode(message["channel"]), message["data"])
            except Exception:
                self._logger.opt(exception=True).error("Unexpected error handling message")

    def _on_message(self, channel: str, data: bytes | str) -> None:
        key = config_key_from_channel(self.service_name, channel)
        if key is None or key not in self._schema:
            self._logger.warning("Ignoring message on unknown channel", channel=channel)
            return

        try:
            value = json.loads(decode(data))
        except _DECODE_ERRORS as exc:
            self._logger.error("Error parsing message", key=key, error=str(exc))
            return

        self._logger.debug("Received configuration update", key=key)
        self._apply(key, value)

    def _apply(self, key: str, value: Any) -> None:
        with self._lock:
            self._cache[key] = value
            self._notifier.notify(key, value)

    async def _stop_listening(self) -> None:
        listener, self._listener = self._listener, None
        if listener is not None:
            listener.cancel()
            try:
                await listener
            except asyncio.CancelledError:
                pass

        pubsub, self._pubsub = self._pubsub, None
        if pubsub is not None:
            await pubsub.aclose()
