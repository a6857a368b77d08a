from __future__ import annotations

import pytest

from vehicle_dashboard.cli import build_parser, config_from_args
from vehicle_dashboard.config import DashboardConfig
from vehicle_dashboard.exceptions import DashboardConfigError
from vehicle_dashboard.models.telemetry import TelemetryKind


def test_defaults() -> None:
    config = DashboardConfig()

    assert config.mqtt_host == "localhost"
    assert config.pwm_pin == 26
    assert config.hardware_enabled is False
    assert config.refresh_interval == 0.3
    params = config.waveform_params()
    assert (params.period_us, params.pulse_max_us) == (10_000, 9_000)


def test_from_env_reads_prefixed_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VEHICLE_DASHBOARD_MQTT_HOST", "broker.local")
    monkeypatch.setenv("VEHICLE_DASHBOARD_MQTT_PORT", "8883")
    monkeypatch.setenv("VEHICLE_DASHBOARD_HARDWARE_ENABLED", "yes")
    monkeypatch.setenv("VEHICLE_DASHBOARD_FADE_STEP_INTERVAL", "0.01")
    monkeypatch.setenv("VEHICLE_DASHBOARD_TOPIC_PREFIX", "fleet/van1")

    config = DashboardConfig.from_env(mqtt_port=1884)

    assert config.mqtt_host == "broker.local"
    assert config.mqtt_port == 1884
    assert config.hardware_enabled is True
    assert config.fade_step_interval == 0.01
    keys = {topic.kind: topic.key for topic in config.topics()}
    assert keys[TelemetryKind.SPEED] == "fleet/van1/speed"


def test_from_env_rejects_bad_numbers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VEHICLE_DASHBOARD_PWM_PIN", "twenty-six")

    with pytest.raises(DashboardConfigError):
        DashboardConfig.from_env()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"mqtt_port": 0},
        {"refresh_interval": 0},
        {"pwm_headroom_us": 0},
        {"fade_step_us": -100},
        {"pwm_pin": -1},
    ],
)
def test_invalid_values(kwargs: dict) -> None:
    with pytest.raises(DashboardConfigError):
        DashboardConfig(**kwargs)


def test_cli_arguments_override_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("VEHICLE_DASHBOARD_MQTT_HOST", raising=False)
    args = build_parser().parse_args(["--host", "10.0.0.2", "--pin", "18", "--hardware"])

    config = config_from_args(args)

    assert config.mqtt_host == "10.0.0.2"
    assert config.pwm_pin == 18
    assert config.hardware_enabled is True
