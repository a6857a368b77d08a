"""Command line entry point: run the dashboard headless."""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from collections.abc import Sequence
from typing import Any

from vehicle_dashboard.config import DashboardConfig
from vehicle_dashboard.exceptions import DashboardError
from vehicle_dashboard.runtime import Dashboard

_LOG = logging.getLogger("vehicle_dashboard")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vehicle-dashboard",
        description="Ingest vehicle telemetry from MQTT and drive the indicator light.",
    )
    parser.add_argument("--host", help="MQTT broker host (env VEHICLE_DASHBOARD_MQTT_HOST).")
    parser.add_argument("--port", type=int, help="MQTT broker port.")
    parser.add_argument("--prefix", help="Telemetry topic prefix.")
    parser.add_argument("--pin", type=int, help="GPIO line of the indicator light.")
    parser.add_argument(
        "--hardware",
        action="store_true",
        default=None,
        help="Drive the real PWM line instead of the no-op output.",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=0.0,
        help="Maximum runtime in seconds (0 = run until Ctrl+C).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logs.",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> DashboardConfig:
    overrides: dict[str, Any] = {}
    for option, field_name in (
        ("host", "mqtt_host"),
        ("port", "mqtt_port"),
        ("prefix", "topic_prefix"),
        ("pin", "pwm_pin"),
        ("hardware", "hardware_enabled"),
    ):
        value = getattr(args, option)
        if value is not None:
            overrides[field_name] = value
    return DashboardConfig.from_env(**overrides)


async def _run(config: DashboardConfig, duration: float) -> None:
    loop = asyncio.get_running_loop()
    stop = asyncio.Event()
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, stop.set)
        except NotImplementedError:  # pragma: no cover - Windows
            pass

    async with Dashboard(config) as dashboard:
        refresh = asyncio.create_task(dashboard.run_refresh_loop(duration=duration or None))
        waiter = asyncio.create_task(stop.wait())
        await asyncio.wait({refresh, waiter}, return_when=asyncio.FIRST_COMPLETED)
        for task in (refresh, waiter):
            task.cancel()
        await asyncio.gather(refresh, waiter, return_exceptions=True)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = config_from_args(args)
    except DashboardError as exc:
        print(f"[dashboard] Invalid configuration: {exc}", file=sys.stderr)
        return 2

    _LOG.info("Connecting to %s:%s prefix=%s", config.mqtt_host, config.mqtt_port, config.topic_prefix)
    try:
        asyncio.run(_run(config, args.duration))
    except DashboardError as exc:  # pragma: no cover - network/system interaction
        print(f"[dashboard] {exc}", file=sys.stderr)
        return 1
    return 0
