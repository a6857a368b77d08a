"""Wiring of the pipeline, the actuator and the refresh loop."""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType

from vehicle_dashboard._mqtt import MqttBus
from vehicle_dashboard.actuator.manager import ActuatorManager
from vehicle_dashboard.actuator.pwm import PwmOutput, build_pwm_output
from vehicle_dashboard.actuator.waveform import WaveformController
from vehicle_dashboard.config import DashboardConfig
from vehicle_dashboard.ingestion.channel import BoundedChannel
from vehicle_dashboard.ingestion.pump import SubscriptionPump, TelemetryBus
from vehicle_dashboard.models.telemetry import TelemetryRecord
from vehicle_dashboard.refresh import RefreshCycle
from vehicle_dashboard.state.merge import MergeTask
from vehicle_dashboard.state.snapshot import SnapshotStore

_logger = logging.getLogger(__name__)


class Dashboard:
    """Headless dashboard runtime.

    Usage::

        async with Dashboard(config) as dashboard:
            await dashboard.run_refresh_loop()

    When *bus* is omitted an :class:`~vehicle_dashboard._mqtt.MqttBus` is
    built from the configuration and connected on start.
    """

    def __init__(
        self,
        config: DashboardConfig,
        *,
        bus: TelemetryBus | None = None,
        output: PwmOutput | None = None,
    ) -> None:
        self._config = config
        self._external_bus = bus is not None
        self._bus = bus
        self._output = output or build_pwm_output(config)
        self.store = SnapshotStore()
        self.controller = WaveformController(self._output, config.waveform_params())
        self.actuator: ActuatorManager | None = None
        self.refresh: RefreshCycle | None = None
        self.pumps: list[SubscriptionPump] = []
        self.merges: list[MergeTask] = []
        self._tasks: list[asyncio.Task[object]] = []

    async def __aenter__(self) -> Dashboard:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.stop()

    async def start(self) -> None:
        loop = asyncio.get_running_loop()
        if self._bus is None:
            mqtt_bus = MqttBus(
                host=self._config.mqtt_host,
                port=self._config.mqtt_port,
                keepalive=self._config.mqtt_keepalive,
                client_id=self._config.mqtt_client_id,
                loop=loop,
            )
            await mqtt_bus.connect()
            self._bus = mqtt_bus

        self.actuator = ActuatorManager(self.controller, loop=loop)
        self.refresh = RefreshCycle(self.store, self.actuator)

        for topic in self._config.topics():
            channel: BoundedChannel[TelemetryRecord] = BoundedChannel(topic.depth)
            pump = SubscriptionPump(self._bus, topic, channel)
            merge = MergeTask(channel, self.store.writer(topic.kind))
            self.pumps.append(pump)
            self.merges.append(merge)
            self._tasks.append(asyncio.create_task(pump.run(), name=f"pump:{topic.key}"))
            self._tasks.append(asyncio.create_task(merge.run(), name=f"merge:{topic.kind}"))
        _logger.info("Dashboard started with %d topic(s)", len(self.pumps))

    async def run_refresh_loop(self, *, duration: float | None = None) -> None:
        """Tick the refresh cycle every ``refresh_interval`` seconds."""
        if self.refresh is None:
            raise RuntimeError("Dashboard is not started")
        loop = asyncio.get_running_loop()
        deadline = None if duration is None else loop.time() + duration
        while deadline is None or loop.time() < deadline:
            self.refresh.tick()
            await asyncio.sleep(self._config.refresh_interval)

    async def stop(self) -> None:
        if isinstance(self._bus, MqttBus) and not self._external_bus:
            await asyncio.get_running_loop().run_in_executor(None, self._bus.stop)

        for task in self._tasks:
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()

        if self.actuator is not None:
            await self.actuator.wait_idle()
        self.controller.close()
        _logger.info("Dashboard stopped")
