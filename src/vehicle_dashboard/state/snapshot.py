"""Latest-value-per-kind telemetry snapshot.

Slots are partitioned one writer per kind. A write never mutates the
published snapshot: it builds a new immutable :class:`TelemetrySnapshot`
with the slot replaced and swaps it in under a lock, so readers always
see whole records (cross-slot consistency is not promised).
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict

from vehicle_dashboard.exceptions import DashboardError
from vehicle_dashboard.models.telemetry import (
    RECORD_TYPES,
    BatteryStatus,
    ExteriorConditions,
    LockState,
    Speed,
    TelemetryKind,
    TelemetryRecord,
    TripData,
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TelemetrySnapshot(BaseModel):
    """Immutable view of the latest record per kind (``None`` until received)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    lock_state: LockState | None = None
    battery: BatteryStatus | None = None
    exterior: ExteriorConditions | None = None
    speed: Speed | None = None
    trip_data: TripData | None = None

    def get(self, kind: TelemetryKind) -> TelemetryRecord | None:
        record: TelemetryRecord | None = getattr(self, kind.value)
        return record


class SlotWriter:
    """Exclusive write handle for one snapshot slot."""

    def __init__(self, store: SnapshotStore, kind: TelemetryKind) -> None:
        self._store = store
        self._kind = kind

    @property
    def kind(self) -> TelemetryKind:
        return self._kind

    def write(self, record: TelemetryRecord) -> None:
        self._store._replace(self._kind, record)  # noqa: SLF001


class SnapshotStore:
    """Thread-safe holder of the current :class:`TelemetrySnapshot`."""

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._snapshot = TelemetrySnapshot()
        self._updated_at: dict[TelemetryKind, datetime] = {}
        self._claimed: set[TelemetryKind] = set()

    def writer(self, kind: TelemetryKind) -> SlotWriter:
        """Claim the single writer handle for *kind*."""
        with self._lock:
            if kind in self._claimed:
                raise DashboardError(f"Snapshot slot {kind} already has a writer")
            self._claimed.add(kind)
        return SlotWriter(self, kind)

    def _replace(self, kind: TelemetryKind, record: TelemetryRecord) -> None:
        expected = RECORD_TYPES[kind]
        if type(record) is not expected:
            raise TypeError(f"Slot {kind} expects {expected.__name__}, got {type(record).__name__}")
        with self._lock:
            self._snapshot = self._snapshot.model_copy(update={kind.value: record})
            self._updated_at[kind] = self._clock()

    def snapshot(self) -> TelemetrySnapshot:
        """Return the current snapshot. It is immutable and safe to keep."""
        with self._lock:
            return self._snapshot

    def updated_at(self, kind: TelemetryKind) -> datetime | None:
        """Time of the last write to *kind*, ``None`` if never written."""
        with self._lock:
            return self._updated_at.get(kind)
