from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from projection.errors import MalformedInput
from sync.decoder import decode_document

CE_TYPE_PREFIX = "google.cloud.firestore.document.v1."

_DOCUMENTS_ROOT = re.compile(r"^(?:projects/[^/]+/databases/[^/]+/)?documents/")


class ChangeKind(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass(frozen=True)
class ChangeEvent:
    kind: ChangeKind
    path: str  # relative document path, e.g. "packages/p1"
    data: Optional[Dict[str, Any]] = None  # after-image; None on delete
    event_id: str = ""


def relative_document_path(name: str) -> str:
    return _DOCUMENTS_ROOT.sub("", (name or "").strip().strip("/"))


@dataclass(frozen=True)
class DocumentPattern:
    """A trigger path such as ``topics/{topicID}/conversations/{conversationID}``."""

    template: str
    _segments: tuple = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_segments", tuple(self.template.strip("/").split("/")))

    def match(self, path: str) -> Optional[Dict[str, str]]:
        parts = relative_document_path(path).split("/")
        if len(parts) != len(self._segments):
            return None
        params: Dict[str, str] = {}
        for seg, part in zip(self._segments, parts):
            if not part:
                return None
            if seg.startswith("{") and seg.endswith("}"):
                params[seg[1:-1]] = part
            elif seg != part:
                return None
        return params


def _resolve_kind(ce_type: str, before: Optional[dict], after: Optional[dict]) -> ChangeKind:
    suffix = ce_type[len(CE_TYPE_PREFIX):] if ce_type.startswith(CE_TYPE_PREFIX) else ""
    if suffix == "written":
        if after is None:
            return ChangeKind.DELETED
        return ChangeKind.CREATED if before is None else ChangeKind.UPDATED
    try:
        return ChangeKind(suffix)
    except ValueError:
        raise MalformedInput("ce-type", f"unsupported_event_type:{ce_type}")


def change_event_from_cloudevent(
    ce_type: str,
    subject: str,
    body: Mapping[str, Any],
    event_id: str = "",
) -> ChangeEvent:
    """Build a ChangeEvent from an Eventarc Firestore event with a JSON payload."""
    value = body.get("value") or None
    old_value = body.get("oldValue") or None
    after = decode_document(value)
    before = decode_document(old_value)
    kind = _resolve_kind(ce_type or "", before, after)

    name = (value or {}).get("name") or (old_value or {}).get("name") or subject or ""
    path = relative_document_path(name)
    if not path:
        raise MalformedInput("subject", "missing_document_path")
    if kind is not ChangeKind.DELETED and after is None:
        raise MalformedInput("value", "missing_document_data")

    return ChangeEvent(
        kind=kind,
        path=path,
        data=after if kind is not ChangeKind.DELETED else None,
        event_id=event_id or "",
    )
