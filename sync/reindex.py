"""Rebuild an index from the document store.

Records are fully derived, so a reindex is every current source document
pushed through its builder and upserted. A document that no longer builds
has its record deleted, since a stale copy would outlive the source change.
Records whose source document is already gone are not touched: the index
is never browsed, and the delete reactors own that case.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from google.cloud.firestore import Client

from config.settings import settings
from models.schema import (
    COL_CONVERSATIONS,
    COL_PACKAGES,
    COL_TOPICS,
    KIND_CONVERSATIONS,
    KIND_PACKAGES,
    KIND_TOPICS,
    PATH_CONVERSATION,
)
from ops.metrics import Timer
from projection.builders import build_conversation_record, build_package_record, build_topic_record
from projection.errors import ProjectionError
from storage.firestore_client import get_firestore_client
from sync.events import DocumentPattern
from sync.reactors import ReactorContext

log = logging.getLogger("indexsync.reindex")

_CONVERSATION = DocumentPattern(PATH_CONVERSATION)

Builder = Callable[[str, Dict[str, Any]], Dict[str, Any]]


def _source(kind: str, db: Client, ctx: ReactorContext) -> Tuple[Iterable[Any], Builder, str]:
    if kind == KIND_TOPICS:
        return db.collection(COL_TOPICS).stream(), build_topic_record, ctx.topics_index
    if kind == KIND_PACKAGES:
        return db.collection(COL_PACKAGES).stream(), build_package_record, ctx.packages_index
    if kind == KIND_CONVERSATIONS:
        snaps = (
            s for s in db.collection_group(COL_CONVERSATIONS).stream()
            if _CONVERSATION.match(s.reference.path) is not None
        )
        return snaps, build_conversation_record, ctx.conversations_index
    raise KeyError(kind)


def reindex(kind: str, ctx: ReactorContext, db: Optional[Client] = None, max_docs: Optional[int] = None) -> Dict[str, Any]:
    t = Timer()
    run_id = str(uuid.uuid4())
    db = db or get_firestore_client()
    cap = max_docs if max_docs is not None else settings.REINDEX_MAX_DOCS
    snaps, build, index_name = _source(kind, db, ctx)

    processed = 0
    upserted = 0
    skipped = 0
    for snap in snaps:
        if processed >= cap:
            # Fail-closed
            log.error(
                "reindex_max_docs_exceeded",
                extra={"extra": {"run_id": run_id, "kind": kind, "processed": processed, "cap": cap}},
            )
            raise RuntimeError(f"reindex_max_docs_exceeded: processed={processed} cap={cap}")
        processed += 1
        try:
            record = build(snap.id, snap.to_dict() or {})
        except ProjectionError as e:
            skipped += 1
            log.warning(
                "reindex_skip",
                extra={
                    "extra": {
                        "run_id": run_id,
                        "kind": kind,
                        "objectID": snap.id,
                        "error": e.code,
                        "path": e.path,
                    }
                },
            )
            ctx.index.delete(index_name, snap.id)
            continue
        ctx.index.upsert(index_name, record)
        upserted += 1

    result = {
        "ok": True,
        "run_id": run_id,
        "kind": kind,
        "index": index_name,
        "processed": processed,
        "upserted": upserted,
        "skipped": skipped,
        "latency_ms": t.ms(),
    }
    log.info("reindex_metrics", extra={"extra": result})
    return result
