"""Custom exception hierarchy for vehicle_dashboard."""

from __future__ import annotations


class DashboardError(Exception):
    """Base exception for all vehicle_dashboard errors."""


class DashboardConfigError(DashboardError):
    """Invalid or missing configuration."""


class DecodeError(DashboardError):
    """Telemetry payload could not be decoded into a typed record.

    Raised for truncated or malformed bytes and for payloads whose
    values do not satisfy the record schema.
    """

    def __init__(self, message: str, *, kind: str = "") -> None:
        self.kind = kind
        super().__init__(message)


class SubscriptionError(DashboardError):
    """A bus subscription could not be established or was broken."""

    def __init__(self, message: str, *, key: str = "") -> None:
        self.key = key
        super().__init__(message)


class ChannelClosedError(DashboardError):
    """The other end of a bounded channel has been closed."""


class HardwareWriteError(DashboardError):
    """Writing a PWM step to the output line failed.

    Physical PWM failures are not treated as transient: the current
    waveform operation is aborted and nothing retries it.
    """

    def __init__(self, message: str, *, pin: int | None = None) -> None:
        self.pin = pin
        super().__init__(message)
