"""Headless refresh cycle.

Stands in for the GUI timer: reads the snapshot, builds the values a
renderer would display, and turns lock-state changes into actuator
intents. Every call returns immediately.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict

from vehicle_dashboard.actuator.manager import ActuatorManager
from vehicle_dashboard.state.snapshot import SnapshotStore, TelemetrySnapshot

_logger = logging.getLogger(__name__)


def minutes_to_ddhhmm(minutes: float) -> str:
    """Format a duration in minutes as ``DD:HH:MM``."""
    total = max(int(minutes), 0)
    days, remainder = divmod(total, 1440)
    hours, mins = divmod(remainder, 60)
    return f"{days:02}:{hours:02}:{mins:02}"


class DashboardView(BaseModel):
    """Display values derived from one snapshot (``None`` = no data yet)."""

    model_config = ConfigDict(frozen=True)

    battery_level: int | None = None
    is_charging: bool | None = None
    estimated_range_km: int | None = None
    minutes_to_full_charge: int | None = None
    is_locked: bool | None = None
    air_temperature: int | None = None
    speed: int | None = None
    trip_distance: float | None = None
    trip_distance_since_start: float | None = None
    trip_average_speed: float | None = None
    trip_time: str | None = None
    blink_phase: bool = False

    @classmethod
    def from_snapshot(cls, snapshot: TelemetrySnapshot, *, blink_phase: bool = False) -> DashboardView:
        values: dict[str, object] = {"blink_phase": blink_phase}
        if snapshot.battery is not None:
            values["battery_level"] = round(snapshot.battery.level)
            values["is_charging"] = snapshot.battery.is_charging
            values["estimated_range_km"] = snapshot.battery.estimated_range_km
            values["minutes_to_full_charge"] = snapshot.battery.minutes_to_full_charge
        if snapshot.lock_state is not None:
            values["is_locked"] = snapshot.lock_state.is_locked
        if snapshot.exterior is not None:
            values["air_temperature"] = int(snapshot.exterior.air_temperature)
        if snapshot.speed is not None:
            values["speed"] = int(snapshot.speed.value)
        if snapshot.trip_data is not None:
            values["trip_distance"] = snapshot.trip_data.traveled_distance
            values["trip_distance_since_start"] = snapshot.trip_data.traveled_distance_since_start
            values["trip_average_speed"] = snapshot.trip_data.average_speed
            values["trip_time"] = minutes_to_ddhhmm(snapshot.trip_data.trip_duration_minutes)
        return cls.model_validate(values)


class RefreshCycle:
    """Periodic reader of the snapshot that issues actuator intents.

    * Observed unlocked -> ``request_lock()`` (fade out); observed locked
      -> ``request_unlock()`` (fade in). Issued once per observed change;
      an intent the actuator dropped as busy is issued again next tick.
    * While locked, every second tick flips the blink phase and issues
      ``request_blink`` with the phase shown before the flip.
    """

    def __init__(self, store: SnapshotStore, actuator: ActuatorManager) -> None:
        self._store = store
        self._actuator = actuator
        self._counter = 0
        self._blink_phase = False
        self._applied_locked: bool | None = None
        self.last_view: DashboardView | None = None

    @property
    def ticks(self) -> int:
        return self._counter

    def tick(self) -> DashboardView:
        snapshot = self._store.snapshot()

        is_locked = False
        if snapshot.lock_state is not None:
            is_locked = snapshot.lock_state.is_locked
            if is_locked != self._applied_locked:
                accepted = self._actuator.request_unlock() if is_locked else self._actuator.request_lock()
                if accepted:
                    self._applied_locked = is_locked

        if self._counter % 2 == 0:
            previous = self._blink_phase
            self._blink_phase = not previous
            if is_locked:
                self._actuator.request_blink(previous)

        self._counter += 1
        view = DashboardView.from_snapshot(snapshot, blink_phase=self._blink_phase)
        self.last_view = view
        _logger.debug("Refresh tick=%d view=%s", self._counter, view)
        return view
