"""Data models for decoded vehicle telemetry."""

from vehicle_dashboard.models._base import TelemetryEnum, TelemetryRecord
from vehicle_dashboard.models.telemetry import (
    RECORD_TYPES,
    BatteryStatus,
    ExteriorConditions,
    LockPosition,
    LockState,
    Speed,
    TelemetryKind,
    TelemetryRecordType,
    TripData,
    kind_of,
)

__all__ = [
    "RECORD_TYPES",
    "BatteryStatus",
    "ExteriorConditions",
    "LockPosition",
    "LockState",
    "Speed",
    "TelemetryEnum",
    "TelemetryKind",
    "TelemetryRecord",
    "TelemetryRecordType",
    "TripData",
    "kind_of",
]
