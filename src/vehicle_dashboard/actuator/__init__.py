"""Indicator light actuation."""

from vehicle_dashboard.actuator.manager import ActuatorManager
from vehicle_dashboard.actuator.pwm import BlinkaPwmOutput, NullPwmOutput, PwmOutput, build_pwm_output
from vehicle_dashboard.actuator.waveform import WaveformController, WaveformParams

__all__ = [
    "ActuatorManager",
    "BlinkaPwmOutput",
    "NullPwmOutput",
    "PwmOutput",
    "WaveformController",
    "WaveformParams",
    "build_pwm_output",
]
