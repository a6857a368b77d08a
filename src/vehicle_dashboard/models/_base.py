"""Base model and enum for telemetry records.

Every telemetry record inherits from :class:`TelemetryRecord` which
provides:

* ``frozen=True`` so a record is an immutable value once decoded.
* ``populate_by_name=True`` so records can be built either from the
  Python field names or from the wire field names declared through
  ``validation_alias``.
* ``extra="ignore"`` so wire fields without a record counterpart
  are silently dropped.
* ``allow_inf_nan=False`` so NaN and infinite floats fail validation.

State enums inherit from :class:`TelemetryEnum` which adds an ``UNKNOWN``
member at ``-1`` and a ``_missing_`` hook that returns ``UNKNOWN``
for any value without a mapped member.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from vehicle_dashboard.ingestion.normalize import safe_int


class TelemetryEnum(enum.IntEnum):
    """Base for wire enums.

    Every subclass **must** define ``UNKNOWN = -1``.
    Wire values that have no mapped member automatically
    resolve to ``UNKNOWN`` instead of raising ``ValueError``.
    """

    @classmethod
    def _missing_(cls, value: object) -> TelemetryEnum:
        if hasattr(cls, "UNKNOWN"):
            unknown: TelemetryEnum = cls.UNKNOWN  # type: ignore[attr-defined]
            return unknown
        return next(iter(cls))

    @classmethod
    def coerce(cls, value: Any) -> Any:
        """``BeforeValidator`` hook mapping raw ints onto members."""
        if isinstance(value, cls):
            return value
        parsed = safe_int(value)
        if parsed is None:
            return value
        return cls(parsed)


class TelemetryRecord(BaseModel):
    """Base for decoded telemetry records."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        allow_inf_nan=False,
    )

    def to_wire(self) -> dict[str, Any]:
        """Dump the record keyed by wire field names."""
        return self.model_dump(by_alias=True)
