"""Runtime configuration for vehicle_dashboard."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from vehicle_dashboard.actuator.waveform import (
    FADE_STEP_INTERVAL_S,
    FADE_STEP_US,
    PERIOD_US,
    PULSE_HEADROOM_US,
    WaveformParams,
)
from vehicle_dashboard.exceptions import DashboardConfigError
from vehicle_dashboard.ingestion.topics import DEFAULT_TOPIC_PREFIX, TopicSpec, default_topics

_ENV_PREFIX = "VEHICLE_DASHBOARD_"


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class DashboardConfig:
    """Dashboard configuration.

    Parameters
    ----------
    mqtt_host : str
        Broker host name.
    mqtt_port : int
        Broker port.
    mqtt_keepalive : int
        MQTT keepalive in seconds.
    mqtt_client_id : str
        MQTT client id. Empty lets the broker client generate one.
    topic_prefix : str
        Prefix of the five telemetry topic keys (``<prefix>/<kind>``).
    pwm_pin : int
        GPIO line driving the indicator light.
    hardware_enabled : bool
        Drive the real PWM line. When ``False`` writes go to a no-op output.
    refresh_interval : float
        Seconds between refresh cycle ticks.
    pwm_period_us : int
        PWM period in microseconds.
    pwm_headroom_us : int
        Distance between the maximum pulse width and the period.
    fade_step_us : int
        Pulse width increment per fade step.
    fade_step_interval : float
        Seconds slept between fade steps.
    """

    mqtt_host: str = "localhost"
    mqtt_port: int = 1883
    mqtt_keepalive: int = 60
    mqtt_client_id: str = ""
    topic_prefix: str = DEFAULT_TOPIC_PREFIX
    pwm_pin: int = 26
    hardware_enabled: bool = False
    refresh_interval: float = 0.3
    pwm_period_us: int = PERIOD_US
    pwm_headroom_us: int = PULSE_HEADROOM_US
    fade_step_us: int = FADE_STEP_US
    fade_step_interval: float = FADE_STEP_INTERVAL_S

    def __post_init__(self) -> None:
        if not 0 < self.mqtt_port < 65536:
            raise DashboardConfigError(f"Invalid MQTT port: {self.mqtt_port}")
        if self.mqtt_keepalive <= 0:
            raise DashboardConfigError(f"Invalid MQTT keepalive: {self.mqtt_keepalive}")
        if self.refresh_interval <= 0:
            raise DashboardConfigError(f"Refresh interval must be positive, got {self.refresh_interval}")
        if self.pwm_pin < 0:
            raise DashboardConfigError(f"Invalid PWM pin: {self.pwm_pin}")
        # Validates the PWM invariants eagerly.
        self.waveform_params()

    def waveform_params(self) -> WaveformParams:
        return WaveformParams(
            period_us=self.pwm_period_us,
            pulse_min_us=0,
            pulse_max_us=self.pwm_period_us - self.pwm_headroom_us,
            step_us=self.fade_step_us,
            step_interval_s=self.fade_step_interval,
        )

    def topics(self) -> tuple[TopicSpec, ...]:
        return default_topics(self.topic_prefix)

    @classmethod
    def from_env(cls, **overrides: Any) -> DashboardConfig:
        """Create configuration from environment variables.

        Reads ``VEHICLE_DASHBOARD_<FIELD>`` for every field (for example
        ``VEHICLE_DASHBOARD_MQTT_HOST``). Explicit keyword arguments
        override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        for field in dataclasses.fields(cls):
            if field.name in overrides:
                continue
            raw = env.get(f"{_ENV_PREFIX}{field.name.upper()}")
            if raw is None:
                continue
            config_kwargs[field.name] = _parse_env_value(field.name, field.type, raw)

        config_kwargs.update(overrides)
        return cls(**config_kwargs)


def _parse_env_value(name: str, field_type: Any, raw: str) -> Any:
    # Annotations are strings under ``from __future__ import annotations``.
    type_name = field_type if isinstance(field_type, str) else getattr(field_type, "__name__", "")
    try:
        if type_name == "bool":
            return _env_bool(raw, False)
        if type_name == "int":
            return int(raw)
        if type_name == "float":
            return float(raw)
    except ValueError as exc:
        raise DashboardConfigError(f"Invalid value for {_ENV_PREFIX}{name.upper()}: {raw!r}") from exc
    return raw
