"""Merge task: drain one channel into one snapshot slot."""

from __future__ import annotations

import logging

from vehicle_dashboard.ingestion.channel import BoundedChannel
from vehicle_dashboard.models.telemetry import TelemetryRecord
from vehicle_dashboard.state.snapshot import SlotWriter

_logger = logging.getLogger(__name__)


class MergeTask:
    """Apply records in channel order, replacing the slot value wholesale.

    Runs until the channel's sender side closes. The slot then keeps its
    last value; that is a quiet degradation, not an error. On any exit
    the receiver side is closed so the feeding pump stops too.
    """

    def __init__(self, channel: BoundedChannel[TelemetryRecord], writer: SlotWriter) -> None:
        self._channel = channel
        self._writer = writer
        self.applied = 0

    async def run(self) -> int:
        kind = self._writer.kind
        try:
            async for record in self._channel:
                _logger.debug("Received %s: %r", kind, record)
                self._writer.write(record)
                self.applied += 1
        finally:
            # Wakes a pump blocked on a full channel.
            await self._channel.close_receiver()
        _logger.info("Merge task for %s stopped after %d record(s); slot frozen at last value", kind, self.applied)
        return self.applied
