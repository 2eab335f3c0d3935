from __future__ import annotations

import base64
from datetime import datetime
from typing import Any, Mapping

from projection.dates import to_epoch_seconds
from projection.errors import MalformedInput
from projection.geo import normalize_geo_point
from projection.references import document_id_of


def to_index_value(value: Any, path: str = "") -> Any:
    """Convert store-native values left in a record into JSON-ready ones.

    References become their document id, timestamps epoch seconds,
    geo-points ``{lat, lng}`` and bytes base64 text.
    """
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, Mapping):
        return {k: to_index_value(v, f"{path}.{k}" if path else k) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_index_value(v, f"{path}[{i}]") for i, v in enumerate(value)]
    if isinstance(value, datetime):
        return to_epoch_seconds(value, path)
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if hasattr(value, "latitude") and hasattr(value, "longitude"):
        return normalize_geo_point(value, path)
    if hasattr(value, "id") and hasattr(value, "path"):
        # DocumentReference / DocumentPointer
        return document_id_of(value, path)
    raise MalformedInput(path or "value", f"unsupported_value_type:{type(value).__name__}")
