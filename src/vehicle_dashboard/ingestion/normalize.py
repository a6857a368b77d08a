"""Normalization helpers.

Centralizes defensive parsing of wire values.
"""

from __future__ import annotations

import math
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None or math.isinf(parsed):
        return None
    return int(parsed)


def payload_preview(payload: bytes, *, max_bytes: int = 16) -> str:
    """Return a short hex rendering of *payload* suitable for logs."""
    head = payload[:max_bytes].hex(" ")
    if len(payload) > max_bytes:
        return f"{head} …<{len(payload)}b>"
    return head or "<empty>"
