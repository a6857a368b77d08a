from __future__ import annotations

import asyncio
import math
import struct

import pytest

from vehicle_dashboard.ingestion.channel import BoundedChannel
from vehicle_dashboard.ingestion.decode import encode
from vehicle_dashboard.ingestion.pump import SubscriptionPump
from vehicle_dashboard.ingestion.topics import TopicSpec
from vehicle_dashboard.models.telemetry import (
    BatteryStatus,
    ExteriorConditions,
    LockPosition,
    LockState,
    Speed,
    TelemetryKind,
    TelemetryRecord,
    TripData,
)
from vehicle_dashboard.refresh import DashboardView, RefreshCycle, minutes_to_ddhhmm
from vehicle_dashboard.state.merge import MergeTask
from vehicle_dashboard.state.snapshot import SlotWriter, SnapshotStore, TelemetrySnapshot


class _FakeActuator:
    def __init__(self, *, accept: bool = True) -> None:
        self.accept = accept
        self.calls: list[tuple[str, bool | None]] = []

    def request_lock(self) -> bool:
        self.calls.append(("lock", None))
        return self.accept

    def request_unlock(self) -> bool:
        self.calls.append(("unlock", None))
        return self.accept

    def request_blink(self, phase: bool) -> bool:
        self.calls.append(("blink", phase))
        return self.accept


def _store_with_lock(position: LockPosition) -> tuple[SnapshotStore, SlotWriter]:
    store = SnapshotStore()
    writer = store.writer(TelemetryKind.LOCK_STATE)
    writer.write(LockState(state=position))
    return store, writer


def test_minutes_to_ddhhmm() -> None:
    assert minutes_to_ddhhmm(0) == "00:00:00"
    assert minutes_to_ddhhmm(59) == "00:00:59"
    assert minutes_to_ddhhmm(1500) == "01:01:00"
    assert minutes_to_ddhhmm(-5) == "00:00:00"


def test_view_from_snapshot() -> None:
    snapshot = TelemetrySnapshot(
        battery=BatteryStatus(level=66.6, is_charging=True, estimated_range_km=310, minutes_to_full_charge=42),
        exterior=ExteriorConditions(air_temperature=21.7),
        speed=Speed(value=88.9),
        trip_data=TripData(
            traveled_distance=120.5,
            traveled_distance_since_start=20.25,
            average_speed=55.0,
            trip_duration_minutes=125,
        ),
    )

    view = DashboardView.from_snapshot(snapshot)

    assert view.battery_level == 67
    assert view.is_charging is True
    assert view.estimated_range_km == 310
    assert view.minutes_to_full_charge == 42
    assert view.air_temperature == 21
    assert view.speed == 88
    assert view.trip_distance == 120.5
    assert view.trip_time == "00:02:05"
    assert view.is_locked is None


def test_empty_snapshot_issues_no_lock_intent() -> None:
    actuator = _FakeActuator()
    refresh = RefreshCycle(SnapshotStore(), actuator)  # type: ignore[arg-type]

    view = refresh.tick()

    assert view == DashboardView(blink_phase=True)
    assert actuator.calls == []


def test_unlocked_issues_lock_once() -> None:
    store, _writer = _store_with_lock(LockPosition.UNLOCKED)
    actuator = _FakeActuator()
    refresh = RefreshCycle(store, actuator)  # type: ignore[arg-type]

    for _ in range(4):
        refresh.tick()

    assert actuator.calls == [("lock", None)]


def test_locked_issues_unlock_then_blinks_every_second_tick() -> None:
    store, _writer = _store_with_lock(LockPosition.LOCKED)
    actuator = _FakeActuator()
    refresh = RefreshCycle(store, actuator)  # type: ignore[arg-type]

    for _ in range(5):
        refresh.tick()

    assert actuator.calls == [
        ("unlock", None),
        ("blink", False),
        ("blink", True),
        ("blink", False),
    ]


def test_transition_issues_new_intent() -> None:
    store, writer = _store_with_lock(LockPosition.LOCKED)
    actuator = _FakeActuator()
    refresh = RefreshCycle(store, actuator)  # type: ignore[arg-type]

    refresh.tick()
    writer.write(LockState(state=LockPosition.UNLOCKED))
    refresh.tick()

    assert [name for name, _ in actuator.calls] == ["unlock", "blink", "lock"]


def test_dropped_intent_is_reissued_next_tick() -> None:
    store, _writer = _store_with_lock(LockPosition.UNLOCKED)
    actuator = _FakeActuator(accept=False)
    refresh = RefreshCycle(store, actuator)  # type: ignore[arg-type]

    refresh.tick()
    actuator.accept = True
    refresh.tick()
    refresh.tick()

    assert actuator.calls == [("lock", None), ("lock", None)]


@pytest.mark.asyncio
async def test_non_finite_payloads_never_reach_the_view(fake_bus) -> None:
    topic = TopicSpec(kind=TelemetryKind.SPEED, key="vehicle/speed", depth=100)
    fake_bus.publish(
        topic.key,
        encode(Speed(value=-1.5)),
        b"\x0d" + struct.pack("<f", math.inf),
        b"\x0d" + struct.pack("<f", math.nan),
    )
    store = SnapshotStore()
    channel: BoundedChannel[TelemetryRecord] = BoundedChannel(topic.depth)
    pump = SubscriptionPump(fake_bus, topic, channel)
    merge = MergeTask(channel, store.writer(topic.kind))

    stats, applied = await asyncio.gather(pump.run(), merge.run())
    view = RefreshCycle(store, _FakeActuator()).tick()  # type: ignore[arg-type]

    assert stats.decode_failed == 2
    assert applied == 1
    assert view.speed == -1
