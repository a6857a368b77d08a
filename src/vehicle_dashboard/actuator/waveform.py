"""Indicator light waveforms: instant level, linear fade-in, linear fade-out."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from vehicle_dashboard.actuator.pwm import PwmOutput
from vehicle_dashboard.exceptions import DashboardConfigError

_logger = logging.getLogger(__name__)

PERIOD_US = 10_000  # 100 Hz
PULSE_HEADROOM_US = 1_000
FADE_STEP_US = 100
FADE_STEP_INTERVAL_S = 0.03


@dataclass(frozen=True)
class WaveformParams:
    """PWM timing. Invariant: ``0 <= pulse_min_us <= pulse_max_us < period_us``."""

    period_us: int = PERIOD_US
    pulse_min_us: int = 0
    pulse_max_us: int = PERIOD_US - PULSE_HEADROOM_US
    step_us: int = FADE_STEP_US
    step_interval_s: float = FADE_STEP_INTERVAL_S

    def __post_init__(self) -> None:
        if self.period_us <= 0:
            raise DashboardConfigError(f"PWM period must be positive, got {self.period_us}us")
        if not 0 <= self.pulse_min_us <= self.pulse_max_us < self.period_us:
            raise DashboardConfigError(
                f"Pulse range [{self.pulse_min_us}, {self.pulse_max_us}]us invalid for period {self.period_us}us"
            )
        if self.step_us <= 0:
            raise DashboardConfigError(f"Fade step must be positive, got {self.step_us}us")
        if self.step_interval_s < 0:
            raise DashboardConfigError(f"Fade step interval must not be negative, got {self.step_interval_s}s")

    def fade_in_steps(self) -> list[int]:
        steps = list(range(self.pulse_min_us, self.pulse_max_us + 1, self.step_us))
        if steps[-1] != self.pulse_max_us:
            steps.append(self.pulse_max_us)
        return steps

    def fade_out_steps(self) -> list[int]:
        steps = list(range(self.pulse_max_us, self.pulse_min_us - 1, -self.step_us))
        if steps[-1] != self.pulse_min_us:
            steps.append(self.pulse_min_us)
        return steps


class WaveformController:
    """Emit PWM duty-cycle ramps on one output line.

    Every step is a single ``output.write(period_us, pulse_width_us)``.
    A :class:`~vehicle_dashboard.exceptions.HardwareWriteError` from the
    output aborts the remaining steps and propagates to the caller.
    """

    def __init__(
        self,
        output: PwmOutput,
        params: WaveformParams | None = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._output = output
        self._params = params or WaveformParams()
        self._sleep = sleep
        self._pulse_width: int | None = None

    @property
    def params(self) -> WaveformParams:
        return self._params

    @property
    def pulse_width(self) -> int | None:
        """Last pulse width written successfully, ``None`` before any write."""
        return self._pulse_width

    def _write(self, pulse_width_us: int) -> None:
        self._output.write(self._params.period_us, pulse_width_us)
        self._pulse_width = pulse_width_us

    def set_level(self, on: bool) -> None:
        self._write(self._params.pulse_max_us if on else 0)

    async def _ramp(self, steps: list[int]) -> None:
        for pulse_width in steps:
            self._write(pulse_width)
            await self._sleep(self._params.step_interval_s)

    async def fade_in(self) -> None:
        _logger.debug("Fade in %sus -> %sus", self._params.pulse_min_us, self._params.pulse_max_us)
        await self._ramp(self._params.fade_in_steps())

    async def fade_out(self) -> None:
        _logger.debug("Fade out %sus -> %sus", self._params.pulse_max_us, self._params.pulse_min_us)
        await self._ramp(self._params.fade_out_steps())

    def close(self) -> None:
        self._output.close()
