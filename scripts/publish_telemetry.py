#!/usr/bin/env python3
"""Publish sample vehicle telemetry to an MQTT broker.

Drives a running dashboard without a vehicle: every tick publishes one
record per topic, toggling the lock state every few ticks so the
indicator light fades in and out.
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys
import time
from pathlib import Path
from typing import Any

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

import paho.mqtt.client as mqtt  # noqa: E402

from vehicle_dashboard import (  # noqa: E402
    BatteryStatus,
    DashboardConfig,
    ExteriorConditions,
    LockPosition,
    LockState,
    Speed,
    TelemetryKind,
    TripData,
    encode,
)
from vehicle_dashboard.models import TelemetryRecord  # noqa: E402

_LOG = logging.getLogger("publish_telemetry")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Publish sample vehicle telemetry.")
    parser.add_argument("--host", help="MQTT broker host.")
    parser.add_argument("--port", type=int, help="MQTT broker port.")
    parser.add_argument("--prefix", help="Telemetry topic prefix.")
    parser.add_argument("--interval", type=float, default=1.0, help="Seconds between ticks.")
    parser.add_argument("--toggle-every", type=int, default=10, help="Ticks between lock state changes.")
    parser.add_argument("--count", type=int, default=0, help="Number of ticks (0 = until Ctrl+C).")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logs.")
    return parser.parse_args()


def _sample(tick: int, toggle_every: int) -> dict[TelemetryKind, TelemetryRecord]:
    locked = (tick // max(toggle_every, 1)) % 2 == 0
    level = 100.0 - (tick % 200) * 0.5
    return {
        TelemetryKind.LOCK_STATE: LockState(state=LockPosition.LOCKED if locked else LockPosition.UNLOCKED),
        TelemetryKind.BATTERY: BatteryStatus(
            level=level,
            is_charging=tick % 50 < 10,
            estimated_range_km=int(level * 4),
            minutes_to_full_charge=int((100.0 - level) * 3),
        ),
        TelemetryKind.EXTERIOR: ExteriorConditions(air_temperature=18.0 + (tick % 10) * 0.5),
        TelemetryKind.SPEED: Speed(value=float(tick % 130)),
        TelemetryKind.TRIP_DATA: TripData(
            traveled_distance=tick * 0.25,
            traveled_distance_since_start=tick * 0.25,
            average_speed=42.0,
            trip_duration_minutes=tick // 60,
        ),
    }


def _main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    overrides: dict[str, Any] = {}
    if args.host:
        overrides["mqtt_host"] = args.host
    if args.port:
        overrides["mqtt_port"] = args.port
    if args.prefix:
        overrides["topic_prefix"] = args.prefix
    config = DashboardConfig.from_env(**overrides)
    keys = {topic.kind: topic.key for topic in config.topics()}

    should_stop = False

    def stop_handler(_signum: int, _frame: Any) -> None:
        nonlocal should_stop
        should_stop = True

    signal.signal(signal.SIGINT, stop_handler)
    signal.signal(signal.SIGTERM, stop_handler)

    client = mqtt.Client(
        callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
        protocol=mqtt.MQTTv5,
    )
    client.enable_logger(_LOG)

    print(f"[publish] Connecting to {config.mqtt_host}:{config.mqtt_port}...")
    try:
        client.connect(config.mqtt_host, config.mqtt_port, keepalive=config.mqtt_keepalive)
    except OSError as exc:  # pragma: no cover - network/system interaction
        print(f"[publish] Connect failed: {exc}", file=sys.stderr)
        return 2
    client.loop_start()

    tick = 0
    try:
        while not should_stop and (args.count <= 0 or tick < args.count):
            for kind, record in _sample(tick, args.toggle_every).items():
                client.publish(keys[kind], encode(record), qos=0)
            _LOG.debug("Published tick=%d", tick)
            tick += 1
            time.sleep(args.interval)
    finally:
        try:
            client.disconnect()
        finally:
            client.loop_stop()

    print(f"[publish] Published {tick} tick(s)")
    return 0


if __name__ == "__main__":
    raise SystemExit(_main())
