"""Telemetry record models, one per telemetry kind.

Wire field names follow the ``intra`` protobuf schema published on the
vehicle bus. Records expose friendlier Python names and map the wire
names through ``validation_alias`` / ``serialization_alias``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated

from pydantic import AliasChoices, BeforeValidator, Field

from vehicle_dashboard.models._base import TelemetryEnum, TelemetryRecord


class TelemetryKind(StrEnum):
    LOCK_STATE = "lock_state"
    BATTERY = "battery"
    EXTERIOR = "exterior"
    SPEED = "speed"
    TRIP_DATA = "trip_data"


class LockPosition(TelemetryEnum):
    """Central lock position.

    Wire enum ``intra.State``: ``LOCK = 0``, ``UNLOCK = 1``.
    """

    UNKNOWN = -1
    LOCKED = 0
    UNLOCKED = 1


def _wire(name: str, wire_name: str) -> AliasChoices:
    return AliasChoices(name, wire_name)


class LockState(TelemetryRecord):
    """Door lock state of the vehicle."""

    state: Annotated[LockPosition, BeforeValidator(LockPosition.coerce)] = LockPosition.UNKNOWN

    @property
    def is_locked(self) -> bool:
        return self.state == LockPosition.LOCKED


class BatteryStatus(TelemetryRecord):
    """Traction battery status.

    Parameters
    ----------
    level : float
        State of charge in percent, ``0..100``.
    is_charging : bool
        Whether a charge session is active.
    estimated_range_km : int
        Remaining range estimate in kilometres.
    minutes_to_full_charge : int
        Estimated minutes until the battery is full.
    """

    level: float = Field(
        default=0.0,
        ge=0.0,
        le=100.0,
        validation_alias=_wire("level", "battery_level"),
        serialization_alias="battery_level",
    )
    is_charging: bool = False
    estimated_range_km: int = Field(
        default=0,
        ge=0,
        validation_alias=_wire("estimated_range_km", "estimated_range"),
        serialization_alias="estimated_range",
    )
    minutes_to_full_charge: int = Field(
        default=0,
        ge=0,
        validation_alias=_wire("minutes_to_full_charge", "time_to_fully_charge"),
        serialization_alias="time_to_fully_charge",
    )


class ExteriorConditions(TelemetryRecord):
    """Conditions outside the vehicle."""

    air_temperature: float = 0.0


class Speed(TelemetryRecord):
    """Vehicle speed in km/h."""

    value: float = 0.0


class TripData(TelemetryRecord):
    traveled_distance: float = 0.0
    traveled_distance_since_start: float = 0.0
    average_speed: float = 0.0
    trip_duration_minutes: int = Field(
        default=0,
        ge=0,
        validation_alias=_wire("trip_duration_minutes", "trip_duration"),
        serialization_alias="trip_duration",
    )


TelemetryRecordType = LockState | BatteryStatus | ExteriorConditions | Speed | TripData

RECORD_TYPES: dict[TelemetryKind, type[TelemetryRecord]] = {
    TelemetryKind.LOCK_STATE: LockState,
    TelemetryKind.BATTERY: BatteryStatus,
    TelemetryKind.EXTERIOR: ExteriorConditions,
    TelemetryKind.SPEED: Speed,
    TelemetryKind.TRIP_DATA: TripData,
}


def kind_of(record: TelemetryRecord) -> TelemetryKind:
    """Return the telemetry kind carried by *record*."""
    for kind, record_type in RECORD_TYPES.items():
        if type(record) is record_type:
            return kind
    raise TypeError(f"Not a telemetry record: {type(record).__name__}")
