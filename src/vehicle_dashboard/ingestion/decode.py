"""Typed decoder: raw bus payload -> immutable telemetry record.

Decoding is stateless. Any failure, whether truncated bytes, a wire
type mismatch or a value outside the record schema, surfaces as
:class:`vehicle_dashboard.exceptions.DecodeError` and nothing else.
Unknown wire fields are ignored so newer publishers stay compatible.
"""

from __future__ import annotations

from google.protobuf.message import DecodeError as ProtobufDecodeError
from pydantic import ValidationError

from vehicle_dashboard._schema import message_class
from vehicle_dashboard.exceptions import DecodeError
from vehicle_dashboard.models.telemetry import RECORD_TYPES, TelemetryKind, TelemetryRecord, kind_of


def decode(kind: TelemetryKind, payload: bytes) -> TelemetryRecord:
    """Decode *payload* into the record type declared for *kind*."""
    if not isinstance(payload, (bytes, bytearray, memoryview)):
        raise DecodeError(f"{kind} payload is not bytes: {type(payload).__name__}", kind=kind)

    message = message_class(kind)()
    try:
        message.ParseFromString(bytes(payload))
    except ProtobufDecodeError as exc:
        raise DecodeError(f"Malformed {kind} payload: {exc}", kind=kind) from exc

    values = {field.name: getattr(message, field.name) for field in message.DESCRIPTOR.fields}
    try:
        return RECORD_TYPES[kind].model_validate(values)
    except ValidationError as exc:
        raise DecodeError(
            f"{kind} payload failed schema validation ({exc.error_count()} error(s))",
            kind=kind,
        ) from exc


def encode(record: TelemetryRecord) -> bytes:
    """Serialize *record* to its wire representation."""
    message = message_class(kind_of(record))(**record.to_wire())
    return message.SerializeToString()
