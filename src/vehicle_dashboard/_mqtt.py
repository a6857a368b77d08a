"""MQTT bus adapter: paho-mqtt network thread -> per-topic async streams."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import AsyncIterator
from typing import Any, cast

import paho.mqtt.client as mqtt

from vehicle_dashboard.exceptions import SubscriptionError

_END = object()


class MqttSubscription:
    """Async stream of raw payloads for one topic filter.

    Payloads are handed over from the paho network thread with
    ``call_soon_threadsafe``. The inbound buffer is unbounded: backpressure
    is applied downstream by the pump's bounded channel, never by
    stalling the network thread.
    """

    def __init__(self, key: str, loop: asyncio.AbstractEventLoop) -> None:
        self.key = key
        self._loop = loop
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def feed_threadsafe(self, payload: bytes) -> None:
        self._loop.call_soon_threadsafe(self._queue.put_nowait, payload)

    def close_threadsafe(self) -> None:
        self._loop.call_soon_threadsafe(self._queue.put_nowait, _END)

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self

    async def __anext__(self) -> bytes:
        if self._closed:
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _END:
            self._closed = True
            raise StopAsyncIteration
        payload: bytes = item
        return payload


class MqttBus:
    """Threaded paho-mqtt client that fans messages out to subscriptions."""

    def __init__(
        self,
        *,
        host: str,
        port: int = 1883,
        keepalive: int = 60,
        client_id: str = "",
        loop: asyncio.AbstractEventLoop | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._host = host
        self._port = port
        self._keepalive = keepalive
        self._client_id = client_id
        self._loop = loop
        self._logger = logger or logging.getLogger(__name__)
        self._client: mqtt.Client | None = None
        self._connected = False
        self._running = False
        self._lock = threading.Lock()
        self._subscriptions: list[MqttSubscription] = []

    @property
    def is_running(self) -> bool:
        """Whether the MQTT network loop is running."""
        return self._running

    @property
    def is_connected(self) -> bool:
        return self._connected

    def _resolve_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def subscribe(self, key: str) -> MqttSubscription:
        """Register a subscription for *key* (MQTT wildcards allowed)."""
        subscription = MqttSubscription(key, self._resolve_loop())
        with self._lock:
            self._subscriptions.append(subscription)
            client = self._client if self._connected else None
        if client is not None:
            self._logger.debug("MQTT subscribing topic=%s", key)
            client.subscribe(key, qos=0)
        return subscription

    def dispatch(self, topic: str, payload: bytes) -> int:
        """Hand *payload* to every subscription whose filter matches *topic*."""
        with self._lock:
            targets = [sub for sub in self._subscriptions if mqtt.topic_matches_sub(sub.key, topic)]
        for sub in targets:
            sub.feed_threadsafe(payload)
        if not targets:
            self._logger.debug("MQTT message on unsubscribed topic=%s", topic)
        return len(targets)

    def _on_connect(
        self,
        client: mqtt.Client,
        _userdata: Any,
        _flags: Any,
        reason_code: Any,
        _properties: Any,
    ) -> None:
        if reason_code.value != 0:
            self._logger.warning("MQTT connect failed: %s", reason_code)
            return
        self._logger.debug("MQTT connected successfully reason=%s", reason_code)
        with self._lock:
            self._connected = True
            keys = sorted({sub.key for sub in self._subscriptions})
        for key in keys:
            self._logger.debug("MQTT subscribing topic=%s", key)
            client.subscribe(key, qos=0)

    def _on_message(self, _client: mqtt.Client, _userdata: Any, msg: mqtt.MQTTMessage) -> None:
        self._logger.debug("Received PUBLISH topic=%s bytes=%d", msg.topic, len(msg.payload))
        self.dispatch(msg.topic, msg.payload)

    def _on_disconnect(
        self,
        _client: mqtt.Client,
        _userdata: Any,
        _disconnect_flags: Any,
        reason_code: Any,
        _properties: Any,
    ) -> None:
        self._connected = False
        if self._running:
            self._logger.warning("MQTT disconnected: %s", reason_code)

    def _start(self) -> None:
        client = mqtt.Client(
            callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
            client_id=self._client_id,
            protocol=mqtt.MQTTv5,
        )
        client.enable_logger(self._logger)
        client.on_connect = self._on_connect
        client.on_message = self._on_message
        client.on_disconnect = self._on_disconnect

        client.connect(self._host, self._port, keepalive=self._keepalive)
        client.loop_start()
        self._client = client
        self._running = True
        self._logger.debug("MQTT network loop started host=%s port=%s", self._host, self._port)

    async def connect(self) -> None:
        """Connect to the broker and start the network thread."""
        loop = self._resolve_loop()
        try:
            await loop.run_in_executor(None, self._start)
        except (OSError, ValueError) as exc:
            raise SubscriptionError(
                f"Cannot connect to MQTT broker {self._host}:{self._port}: {exc}",
                key=f"{self._host}:{self._port}",
            ) from exc

    def stop(self) -> None:
        """Disconnect and end every subscription."""
        client = self._client
        self._client = None
        was_running = self._running
        self._running = False
        self._connected = False

        with self._lock:
            subscriptions = list(self._subscriptions)
            self._subscriptions.clear()
        for sub in subscriptions:
            sub.close_threadsafe()

        if client is None:
            return
        try:
            if was_running:
                self._logger.debug("MQTT disconnect requested")
                client.disconnect()
        finally:
            client.loop_stop()
            self._logger.debug("MQTT network loop stopped")
