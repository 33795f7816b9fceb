"""Utility helpers shared across the package."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Callable, Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(now: Optional[Callable[[], datetime]] = None) -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision, e.g. 2025-01-15T12:34:56.789Z."""
    moment = (now or utc_now)()
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def describe_shape(value: Any) -> str:
    """Name the JSON shape of a parsed value (string, number, boolean, null, array, object).

    Values that look right but cannot be written back out get their own name:
    `non-finite number` for inf/nan and `string with unpaired surrogate`.
    """
    # bool first: it is a subclass of int
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, float) and not math.isfinite(value):
        return "non-finite number"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        try:
            value.encode("utf-8")
        except UnicodeEncodeError:
            return "string with unpaired surrogate"
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
