from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import pytest

from vehicle_dashboard.exceptions import HardwareWriteError, SubscriptionError


class FakeBus:
    """In-memory bus: each subscription replays the payloads queued for its key."""

    def __init__(self) -> None:
        self.payloads: dict[str, list[bytes]] = {}
        self.fail_keys: set[str] = set()
        self.subscribed: list[str] = []

    def publish(self, key: str, *payloads: bytes) -> None:
        self.payloads.setdefault(key, []).extend(payloads)

    def subscribe(self, key: str) -> AsyncIterator[bytes]:
        self.subscribed.append(key)
        if key in self.fail_keys:
            raise SubscriptionError(f"cannot subscribe to {key}", key=key)
        return self._stream(key)

    async def _stream(self, key: str) -> AsyncIterator[bytes]:
        for payload in self.payloads.get(key, []):
            yield payload
            await asyncio.sleep(0)


class RecordingPwmOutput:
    """PWM output that records every write and can fail on demand."""

    def __init__(self, *, fail_after: int | None = None) -> None:
        self.writes: list[tuple[int, int]] = []
        self.fail_after = fail_after
        self.closed = False

    @property
    def pulses(self) -> list[int]:
        return [pulse for _period, pulse in self.writes]

    def write(self, period_us: int, pulse_width_us: int) -> None:
        if self.fail_after is not None and len(self.writes) >= self.fail_after:
            raise HardwareWriteError("driver rejected write", pin=26)
        self.writes.append((period_us, pulse_width_us))

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_bus() -> FakeBus:
    return FakeBus()


@pytest.fixture
def pwm_output() -> RecordingPwmOutput:
    return RecordingPwmOutput()


@pytest.fixture
def make_pwm_output() -> type[RecordingPwmOutput]:
    return RecordingPwmOutput
