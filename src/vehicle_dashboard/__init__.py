"""vehicle_dashboard - vehicle telemetry ingestion and indicator light control."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("vehicle-dashboard")
except PackageNotFoundError:
    __version__ = "0+local"
from vehicle_dashboard.actuator import (
    ActuatorManager,
    BlinkaPwmOutput,
    NullPwmOutput,
    WaveformController,
    WaveformParams,
)
from vehicle_dashboard.config import DashboardConfig
from vehicle_dashboard.exceptions import (
    ChannelClosedError,
    DashboardConfigError,
    DashboardError,
    DecodeError,
    HardwareWriteError,
    SubscriptionError,
)
from vehicle_dashboard.ingestion.channel import BoundedChannel
from vehicle_dashboard.ingestion.decode import decode, encode
from vehicle_dashboard.ingestion.pump import SubscriptionPump, TelemetryBus
from vehicle_dashboard.ingestion.topics import TopicSpec, default_topics
from vehicle_dashboard.models import (
    BatteryStatus,
    ExteriorConditions,
    LockPosition,
    LockState,
    Speed,
    TelemetryKind,
    TripData,
)
from vehicle_dashboard.refresh import DashboardView, RefreshCycle
from vehicle_dashboard.runtime import Dashboard
from vehicle_dashboard.state.merge import MergeTask
from vehicle_dashboard.state.snapshot import SnapshotStore, TelemetrySnapshot

__all__ = [
    "__version__",
    "ActuatorManager",
    "BatteryStatus",
    "BlinkaPwmOutput",
    "BoundedChannel",
    "ChannelClosedError",
    "Dashboard",
    "DashboardConfig",
    "DashboardConfigError",
    "DashboardError",
    "DashboardView",
    "DecodeError",
    "ExteriorConditions",
    "HardwareWriteError",
    "LockPosition",
    "LockState",
    "MergeTask",
    "NullPwmOutput",
    "RefreshCycle",
    "SnapshotStore",
    "Speed",
    "SubscriptionError",
    "SubscriptionPump",
    "TelemetryBus",
    "TelemetryKind",
    "TelemetrySnapshot",
    "TopicSpec",
    "TripData",
    "WaveformController",
    "WaveformParams",
    "decode",
    "default_topics",
    "encode",
]
