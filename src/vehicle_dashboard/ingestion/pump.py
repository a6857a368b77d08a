"""Subscription pump: one bus subscription -> decoder -> bounded channel."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Protocol

from vehicle_dashboard.exceptions import ChannelClosedError, DecodeError, SubscriptionError
from vehicle_dashboard.ingestion.channel import BoundedChannel
from vehicle_dashboard.ingestion.decode import decode
from vehicle_dashboard.ingestion.normalize import payload_preview
from vehicle_dashboard.ingestion.topics import TopicSpec
from vehicle_dashboard.models.telemetry import TelemetryRecord

_logger = logging.getLogger(__name__)


class TelemetryBus(Protocol):
    """What the pipeline needs from a message bus."""

    def subscribe(self, key: str) -> AsyncIterator[bytes]: ...


@dataclass
class PumpStats:
    received: int = 0
    forwarded: int = 0
    decode_failed: int = 0


class SubscriptionPump:
    """Forward decoded records from one topic into its channel.

    Backpressure is explicit: when the channel is full ``run`` waits on
    the send instead of dropping. A decode failure only loses that one
    message. The pump ends when the subscription ends or breaks, or when
    the channel receiver goes away, and always closes the channel's
    sender side on the way out. Reconnecting is the bus owner's job.
    """

    def __init__(
        self,
        bus: TelemetryBus,
        topic: TopicSpec,
        channel: BoundedChannel[TelemetryRecord],
    ) -> None:
        self._bus = bus
        self._topic = topic
        self._channel = channel
        self.stats = PumpStats()

    @property
    def topic(self) -> TopicSpec:
        return self._topic

    async def run(self) -> PumpStats:
        topic = self._topic
        try:
            subscription = self._bus.subscribe(topic.key)
            async for payload in subscription:
                self.stats.received += 1
                try:
                    record = decode(topic.kind, payload)
                except DecodeError as exc:
                    self.stats.decode_failed += 1
                    _logger.warning(
                        "Failed to decode %s message on %s: %s (payload=%s)",
                        topic.kind,
                        topic.key,
                        exc,
                        payload_preview(bytes(payload)) if isinstance(payload, (bytes, bytearray)) else "<non-bytes>",
                    )
                    continue

                try:
                    await self._channel.send(record)
                except ChannelClosedError as exc:
                    _logger.error("Failed to send %s record through channel: %s", topic.kind, exc)
                    break
                self.stats.forwarded += 1
        except SubscriptionError as exc:
            _logger.error("Subscription to %s failed: %s", topic.key, exc)
        finally:
            await self._channel.close_sender()
            _logger.info(
                "Pump for %s stopped received=%d forwarded=%d decode_failed=%d",
                topic.key,
                self.stats.received,
                self.stats.forwarded,
                self.stats.decode_failed,
            )
        return self.stats
