"""Decode Firestore REST/Eventarc JSON ``Value`` objects into Python values.

Geo-points become ``GeoPoint``, references become ``DocumentPointer`` and
timestamps become aware datetimes, matching what a SDK snapshot's
``to_dict()`` hands the record builders.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from google.cloud.firestore import GeoPoint

from projection.dates import parse_iso
from projection.errors import MalformedInput


@dataclass(frozen=True)
class DocumentPointer:
    """A referenceValue; ``path`` is the full resource name as sent by the store."""

    path: str

    @property
    def id(self) -> str:
        return self.path.rstrip("/").rsplit("/", 1)[-1]


def _timestamp(raw: str, path: str) -> datetime:
    dt = parse_iso(raw, path)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def decode_value(value: Mapping[str, Any], path: str = "") -> Any:
    if not isinstance(value, Mapping) or len(value) != 1:
        raise MalformedInput(path or "value", "expected_single_typed_value")
    kind, raw = next(iter(value.items()))

    if kind == "nullValue":
        return None
    if kind == "booleanValue":
        return bool(raw)
    if kind == "integerValue":
        return int(raw)
    if kind == "doubleValue":
        # NaN/Infinity arrive as strings
        return float(raw)
    if kind == "stringValue":
        return raw
    if kind == "timestampValue":
        return _timestamp(raw, path)
    if kind == "bytesValue":
        return base64.b64decode(raw)
    if kind == "referenceValue":
        return DocumentPointer(raw)
    if kind == "geoPointValue":
        # proto3 JSON omits zero-valued coordinates
        raw = raw or {}
        return GeoPoint(float(raw.get("latitude", 0.0)), float(raw.get("longitude", 0.0)))
    if kind == "arrayValue":
        return [decode_value(v, f"{path}[{i}]") for i, v in enumerate((raw or {}).get("values") or [])]
    if kind == "mapValue":
        return decode_fields((raw or {}).get("fields") or {}, path)
    raise MalformedInput(path or "value", f"unknown_value_type:{kind}")


def decode_fields(fields: Mapping[str, Any], path: str = "") -> Dict[str, Any]:
    return {k: decode_value(v, f"{path}.{k}" if path else k) for k, v in fields.items()}


def decode_document(doc: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    """Decode a ``Document`` (``{"name", "fields", ...}``); None when the document is absent."""
    if not doc:
        return None
    return decode_fields(doc.get("fields") or {})
