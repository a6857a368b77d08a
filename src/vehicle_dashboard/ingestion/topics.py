"""Topic table: which bus key carries which telemetry kind."""

from __future__ import annotations

from dataclasses import dataclass

from vehicle_dashboard.models.telemetry import TelemetryKind

# Lock state gates the indicator light, so it gets tighter backpressure.
LOCK_STATE_CHANNEL_DEPTH = 32
DEFAULT_CHANNEL_DEPTH = 100

DEFAULT_TOPIC_PREFIX = "vehicle"


@dataclass(frozen=True)
class TopicSpec:
    """One bus channel and the telemetry kind it carries."""

    kind: TelemetryKind
    key: str
    depth: int


def channel_depth(kind: TelemetryKind) -> int:
    if kind == TelemetryKind.LOCK_STATE:
        return LOCK_STATE_CHANNEL_DEPTH
    return DEFAULT_CHANNEL_DEPTH


def default_topics(prefix: str = DEFAULT_TOPIC_PREFIX) -> tuple[TopicSpec, ...]:
    """Build the five telemetry topics under *prefix*."""
    base = prefix.strip().rstrip("/")
    return tuple(
        TopicSpec(
            kind=kind,
            key=f"{base}/{kind.value}" if base else kind.value,
            depth=channel_depth(kind),
        )
        for kind in TelemetryKind
    )
