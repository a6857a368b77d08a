"""PWM output capability.

The waveform controller only needs ``write(period_us, pulse_width_us)``.
Two implementations exist: :class:`BlinkaPwmOutput` drives a real GPIO
line through Adafruit Blinka, :class:`NullPwmOutput` accepts writes and
does nothing else. :func:`build_pwm_output` picks one from configuration
so the actuator logic is identical on hosts without the hardware.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

from vehicle_dashboard.exceptions import HardwareWriteError

if TYPE_CHECKING:
    from vehicle_dashboard.config import DashboardConfig

_logger = logging.getLogger(__name__)

_DUTY_CYCLE_MAX = 0xFFFF


class PwmOutput(Protocol):
    def write(self, period_us: int, pulse_width_us: int) -> None: ...

    def close(self) -> None: ...


def duty_cycle_16(period_us: int, pulse_width_us: int) -> int:
    """Convert a pulse width into a 16-bit duty cycle value."""
    if period_us <= 0:
        raise ValueError("period must be positive")
    if not 0 <= pulse_width_us <= period_us:
        raise ValueError(f"pulse width {pulse_width_us}us outside period {period_us}us")
    return round(pulse_width_us * _DUTY_CYCLE_MAX / period_us)


class NullPwmOutput:
    """No-op output for hosts without a PWM line."""

    def __init__(self) -> None:
        self.last_write: tuple[int, int] | None = None
        self.writes = 0

    def write(self, period_us: int, pulse_width_us: int) -> None:
        self.last_write = (period_us, pulse_width_us)
        self.writes += 1

    def close(self) -> None:
        self.last_write = None


class BlinkaPwmOutput:
    """PWM on a GPIO line through Adafruit Blinka ``pwmio``.

    The line is opened lazily on the first write so that constructing
    the output never touches hardware.
    """

    def __init__(self, pin: int) -> None:
        self._pin = pin
        self._pwm: Any = None

    @property
    def pin(self) -> int:
        return self._pin

    def _open(self, frequency: int) -> Any:
        import board  # noqa: PLC0415
        import pwmio  # noqa: PLC0415

        board_pin = getattr(board, f"D{self._pin}")
        _logger.debug("Opening PWM output pin=%s frequency=%sHz", self._pin, frequency)
        return pwmio.PWMOut(board_pin, frequency=frequency, duty_cycle=0, variable_frequency=True)

    def write(self, period_us: int, pulse_width_us: int) -> None:
        frequency = round(1_000_000 / period_us)
        try:
            duty_cycle = duty_cycle_16(period_us, pulse_width_us)
            if self._pwm is None:
                self._pwm = self._open(frequency)
            elif self._pwm.frequency != frequency:
                self._pwm.frequency = frequency
            self._pwm.duty_cycle = duty_cycle
        except (OSError, RuntimeError, ValueError, AttributeError, NotImplementedError, ImportError) as exc:
            raise HardwareWriteError(
                f"PWM write failed on pin {self._pin} (period={period_us}us pulse={pulse_width_us}us): {exc}",
                pin=self._pin,
            ) from exc

    def close(self) -> None:
        pwm = self._pwm
        self._pwm = None
        if pwm is None:
            return
        try:
            pwm.deinit()
        except (OSError, RuntimeError):
            _logger.debug("PWM deinit failed on pin %s", self._pin, exc_info=True)


def build_pwm_output(config: DashboardConfig) -> PwmOutput:
    if config.hardware_enabled:
        return BlinkaPwmOutput(config.pwm_pin)
    _logger.info("Hardware disabled; indicator light writes are no-ops")
    return NullPwmOutput()
