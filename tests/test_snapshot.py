from __future__ import annotations

from datetime import UTC, datetime

import pytest

from vehicle_dashboard.exceptions import DashboardError
from vehicle_dashboard.models.telemetry import BatteryStatus, Speed, TelemetryKind
from vehicle_dashboard.state.snapshot import SnapshotStore, TelemetrySnapshot


def _dt() -> datetime:
    return datetime(2026, 1, 1, tzinfo=UTC)


def test_slots_start_empty() -> None:
    store = SnapshotStore()
    snapshot = store.snapshot()

    assert snapshot == TelemetrySnapshot()
    for kind in TelemetryKind:
        assert snapshot.get(kind) is None
        assert store.updated_at(kind) is None


def test_write_replaces_slot_and_keeps_old_snapshot_intact() -> None:
    store = SnapshotStore(clock=_dt)
    writer = store.writer(TelemetryKind.SPEED)

    writer.write(Speed(value=50.0))
    before = store.snapshot()
    writer.write(Speed(value=70.0))
    after = store.snapshot()

    assert before.speed == Speed(value=50.0)
    assert after.speed == Speed(value=70.0)
    assert store.updated_at(TelemetryKind.SPEED) == _dt()


def test_slots_are_independent() -> None:
    store = SnapshotStore()
    store.writer(TelemetryKind.SPEED).write(Speed(value=12.0))
    store.writer(TelemetryKind.BATTERY).write(BatteryStatus(level=40.0))

    snapshot = store.snapshot()
    assert snapshot.speed == Speed(value=12.0)
    assert snapshot.battery is not None
    assert snapshot.battery.level == 40.0
    assert snapshot.lock_state is None


def test_single_writer_per_slot() -> None:
    store = SnapshotStore()
    store.writer(TelemetryKind.BATTERY)

    with pytest.raises(DashboardError):
        store.writer(TelemetryKind.BATTERY)


def test_writer_rejects_record_of_another_kind() -> None:
    store = SnapshotStore()
    writer = store.writer(TelemetryKind.BATTERY)

    with pytest.raises(TypeError):
        writer.write(Speed(value=1.0))
    assert store.snapshot().battery is None
