from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Any

from projection.errors import MalformedInput, MissingField

# fromisoformat() only takes up to microseconds; store timestamps can carry nanos.
_FRACTION = re.compile(r"(\.\d{6})\d+")


def parse_iso(value: str, path: str) -> datetime:
    s = value.strip()
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    s = _FRACTION.sub(r"\1", s)
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        raise MalformedInput(path, "unparseable_date")


def _epoch_ms(value: Any, path: str) -> float:
    if isinstance(value, bool):
        raise MalformedInput(path, "unsupported_date_type")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        value = parse_iso(value, path)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.timestamp() * 1000.0
    raise MalformedInput(path, "unsupported_date_type")


def to_epoch_seconds(value: Any, path: str = "date") -> int:
    """Unix-epoch seconds, rounded half-up from milliseconds.

    Numbers are read as epoch milliseconds. Naive datetimes and date-only
    strings are taken as UTC.
    """
    if value is None:
        raise MissingField(path)
    ms = _epoch_ms(value, path)
    if math.isnan(ms) or math.isinf(ms):
        raise MalformedInput(path, "non_finite_date")
    return int(math.floor(ms / 1000.0 + 0.5))
