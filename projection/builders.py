"""Record builders: source document snapshot -> search index record.

Every builder is pure. A required path that is absent raises MissingField
before any record is returned, so a partial record never reaches the index.
Values copied through verbatim are passed through to_index_value last, so
records hold only JSON types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from projection.dates import to_epoch_seconds
from projection.encode import to_index_value
from projection.errors import MalformedInput
from projection.fields import (
    MISSING,
    copy_optional,
    join_path,
    lookup,
    optional_fields,
    require,
    require_mapping,
)
from projection.geo import normalize_geo_point
from projection.references import resolve_reference

PACKAGE_CONTENT_OPTIONAL = optional_fields("cover_pic_url", "dropoff_message", "external_actions")

# Optional references on logistics; each is resolved as a whole when present.
PACKAGE_LOGISTICS_OPTIONAL_REFS = ("in_transit_by", "content_template_by")


def _object_id(document_id: str) -> str:
    if not isinstance(document_id, str) or not document_id:
        raise MalformedInput("objectID", "empty_document_id")
    return document_id


def build_topic_record(document_id: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    record = {
        "objectID": _object_id(document_id),
        "name": require(data, "name"),
        "description": require(data, "description"),
        "count": {
            "packages": require(data, "count.packages"),
            "templates": require(data, "count.templates"),
        },
    }
    return to_index_value(record)


def _place(source: Mapping[str, Any], path: str) -> Dict[str, Any]:
    place = require_mapping(source, path)
    return {
        "address": require(place, "address", path),
        "geo_point": normalize_geo_point(require(place, "geo_point", path), join_path(path, "geo_point")),
        "name": require(place, "name", path),
    }


def _content(data: Mapping[str, Any]) -> Dict[str, Any]:
    content = require_mapping(data, "content")
    out: Dict[str, Any] = {
        "category": require(content, "category", "content"),
        "description": require(content, "description", "content"),
        "destination": _place(data, "content.destination"),
        "due_date": to_epoch_seconds(require(content, "due_date", "content"), "content.due_date"),
        "headline": require(content, "headline", "content"),
        "topic": resolve_reference(require(content, "topic", "content"), "content.topic"),
        "recipient": resolve_reference(require(content, "recipient", "content"), "content.recipient"),
    }
    return copy_optional(content, out, PACKAGE_CONTENT_OPTIONAL)


def _logistics(data: Mapping[str, Any]) -> Dict[str, Any]:
    logistics = require_mapping(data, "logistics")
    out: Dict[str, Any] = {
        "created_date": to_epoch_seconds(require(logistics, "created_date", "logistics"), "logistics.created_date"),
        "status": require(logistics, "status", "logistics"),
        "origin": _place(data, "logistics.origin"),
        "author": resolve_reference(require(logistics, "author", "logistics"), "logistics.author"),
    }
    for key in PACKAGE_LOGISTICS_OPTIONAL_REFS:
        value = lookup(logistics, key)
        if value is MISSING:
            continue
        out[key] = resolve_reference(value, join_path("logistics", key))
    return out


def _relations(data: Mapping[str, Any]) -> Dict[str, Any]:
    relations = require_mapping(data, "relations")
    return {
        "count": {
            "followers": require(relations, "count.followers", "relations"),
            "movers": require(relations, "count.movers", "relations"),
        },
        "followers": require(relations, "followers", "relations"),
    }


def build_package_record(document_id: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    object_id = _object_id(document_id)
    record: Dict[str, Any] = {
        "content": _content(data),
        "logistics": _logistics(data),
        "relations": _relations(data),
        # Top-level _geoloc drives the index's geo-search.
        "_geoloc": normalize_geo_point(
            require(data, "logistics.current_location"), "logistics.current_location"
        ),
    }
    record["objectID"] = object_id
    return to_index_value(record)


@dataclass(frozen=True)
class LegislativeArea:
    """The single ``{key: value}`` pair a conversation is scoped to, e.g. ``state: CA``."""

    key: str
    value: Any

    @classmethod
    def from_mapping(cls, raw: Any, path: str = "legislative_area") -> "LegislativeArea":
        if not isinstance(raw, Mapping):
            raise MalformedInput(path, "expected_map")
        if len(raw) != 1:
            raise MalformedInput(path, f"expected_single_key:got_{len(raw)}")
        key, value = next(iter(raw.items()))
        if not isinstance(key, str) or not key:
            raise MalformedInput(path, "invalid_key")
        if key == "objectID":
            raise MalformedInput(path, "reserved_key")
        return cls(key=key, value=value)


def build_conversation_record(document_id: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    object_id = _object_id(document_id)
    area = LegislativeArea.from_mapping(require(data, "legislative_area"))
    return to_index_value({area.key: area.value, "objectID": object_id})
