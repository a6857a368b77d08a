"""Protobuf wire schema for telemetry published on the vehicle bus.

The bus carries proto3 messages from the ``intra`` package. The
descriptors are assembled here and registered in a private descriptor
pool, so no generated ``_pb2`` modules are needed at runtime.
"""

from __future__ import annotations

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import Message

from vehicle_dashboard.models.telemetry import TelemetryKind

_F = descriptor_pb2.FieldDescriptorProto

PACKAGE = "intra"

# kind -> (message name, ((field name, number, type, enum type name), ...))
_MESSAGES: dict[TelemetryKind, tuple[str, tuple[tuple[str, int, int, str], ...]]] = {
    TelemetryKind.LOCK_STATE: (
        "LockState",
        (("state", 1, _F.TYPE_ENUM, f".{PACKAGE}.State"),),
    ),
    TelemetryKind.BATTERY: (
        "BatteryData",
        (
            ("battery_level", 1, _F.TYPE_FLOAT, ""),
            ("is_charging", 2, _F.TYPE_BOOL, ""),
            ("estimated_range", 3, _F.TYPE_UINT32, ""),
            ("time_to_fully_charge", 4, _F.TYPE_UINT32, ""),
        ),
    ),
    TelemetryKind.EXTERIOR: (
        "Exterior",
        (("air_temperature", 1, _F.TYPE_FLOAT, ""),),
    ),
    TelemetryKind.SPEED: (
        "Speed",
        (("value", 1, _F.TYPE_FLOAT, ""),),
    ),
    TelemetryKind.TRIP_DATA: (
        "TripData",
        (
            ("traveled_distance", 1, _F.TYPE_FLOAT, ""),
            ("traveled_distance_since_start", 2, _F.TYPE_FLOAT, ""),
            ("average_speed", 3, _F.TYPE_FLOAT, ""),
            ("trip_duration", 4, _F.TYPE_UINT32, ""),
        ),
    ),
}


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    proto = descriptor_pb2.FileDescriptorProto(
        name=f"{PACKAGE}/telemetry.proto",
        package=PACKAGE,
        syntax="proto3",
    )
    state = proto.enum_type.add(name="State")
    state.value.add(name="LOCK", number=0)
    state.value.add(name="UNLOCK", number=1)

    for message_name, fields in _MESSAGES.values():
        message = proto.message_type.add(name=message_name)
        for field_name, number, field_type, type_name in fields:
            field = message.field.add(
                name=field_name,
                number=number,
                type=field_type,  # type: ignore[arg-type]
                label=_F.LABEL_OPTIONAL,
            )
            if type_name:
                field.type_name = type_name
    return proto


def _build_classes() -> dict[TelemetryKind, type[Message]]:
    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(_build_file().SerializeToString())
    return {
        kind: message_factory.GetMessageClass(pool.FindMessageTypeByName(f"{PACKAGE}.{message_name}"))
        for kind, (message_name, _fields) in _MESSAGES.items()
    }


MESSAGE_CLASSES: dict[TelemetryKind, type[Message]] = _build_classes()


def message_class(kind: TelemetryKind) -> type[Message]:
    return MESSAGE_CLASSES[kind]
