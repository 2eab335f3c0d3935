from __future__ import annotations

from typing import Any, Dict, Mapping

from projection.errors import MalformedInput
from projection.fields import copy_optional, join_path, optional_fields, require

REFERENCE_OPTIONAL_FIELDS = optional_fields("pic_url", "twitter", "facebook", "phone", "type")


def document_id_of(pointer: Any, path: str = "reference") -> str:
    # DocumentReference exposes .id; string pointers are slash-separated document paths.
    if isinstance(pointer, str):
        doc_id = pointer.rstrip("/").rsplit("/", 1)[-1]
    else:
        doc_id = getattr(pointer, "id", None)
    if not isinstance(doc_id, str) or not doc_id:
        raise MalformedInput(path, "reference_without_id")
    return doc_id


def resolve_reference(value: Any, path: str) -> Dict[str, Any]:
    """Flatten a reference-shaped field into ``{name, documentID}`` plus any optional extras."""
    if not isinstance(value, Mapping):
        raise MalformedInput(path, "expected_map")
    out: Dict[str, Any] = {
        "name": require(value, "name", path),
        "documentID": document_id_of(require(value, "reference", path), join_path(path, "reference")),
    }
    return copy_optional(value, out, REFERENCE_OPTIONAL_FIELDS)
