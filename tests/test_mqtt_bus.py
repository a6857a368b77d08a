from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest

from vehicle_dashboard._mqtt import MqttBus


class _RecordingClient:
    def __init__(self) -> None:
        self.subscribed: list[str] = []

    def subscribe(self, key: str, qos: int = 0) -> None:
        self.subscribed.append(key)


@pytest.mark.asyncio
async def test_dispatch_routes_by_topic_filter() -> None:
    bus = MqttBus(host="localhost")
    lock = bus.subscribe("vehicle/lock_state")
    everything = bus.subscribe("vehicle/#")

    assert bus.dispatch("vehicle/lock_state", b"\x08\x01") == 2
    assert bus.dispatch("vehicle/speed", b"\x0d") == 1
    assert bus.dispatch("other/speed", b"") == 0

    assert await asyncio.wait_for(anext(lock), 1) == b"\x08\x01"
    assert await asyncio.wait_for(anext(everything), 1) == b"\x08\x01"
    assert await asyncio.wait_for(anext(everything), 1) == b"\x0d"


@pytest.mark.asyncio
async def test_dispatch_from_network_thread() -> None:
    bus = MqttBus(host="localhost")
    subscription = bus.subscribe("vehicle/speed")

    await asyncio.to_thread(bus.dispatch, "vehicle/speed", b"payload")

    assert await asyncio.wait_for(anext(subscription), 1) == b"payload"


@pytest.mark.asyncio
async def test_stop_ends_subscriptions() -> None:
    bus = MqttBus(host="localhost")
    subscription = bus.subscribe("vehicle/battery")
    bus.dispatch("vehicle/battery", b"last")

    bus.stop()

    received = [payload async for payload in subscription]
    assert received == [b"last"]
    assert subscription.closed
    assert not bus.is_running


@pytest.mark.asyncio
async def test_on_connect_subscribes_registered_keys() -> None:
    bus = MqttBus(host="localhost")
    bus.subscribe("vehicle/speed")
    bus.subscribe("vehicle/battery")
    bus.subscribe("vehicle/speed")
    client = _RecordingClient()

    bus._on_connect(client, None, None, SimpleNamespace(value=0), None)  # type: ignore[arg-type]

    assert client.subscribed == ["vehicle/battery", "vehicle/speed"]
    assert bus.is_connected


@pytest.mark.asyncio
async def test_on_connect_failure_subscribes_nothing() -> None:
    bus = MqttBus(host="localhost")
    bus.subscribe("vehicle/speed")
    client = _RecordingClient()

    bus._on_connect(client, None, None, SimpleNamespace(value=135), None)  # type: ignore[arg-type]

    assert client.subscribed == []
    assert not bus.is_connected
