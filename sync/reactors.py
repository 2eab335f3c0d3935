from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from config.settings import Settings, settings as default_settings
from ops.metrics import Timer
from projection.builders import build_conversation_record, build_package_record, build_topic_record
from search.algolia_client import AlgoliaIndexClient
from sync.events import ChangeEvent

log = logging.getLogger("indexsync.reactors")


class IndexWriter(Protocol):
    def upsert(self, index_name: str, record: Dict[str, Any]) -> Dict[str, Any]: ...

    def delete(self, index_name: str, object_id: str) -> Dict[str, Any]: ...


@dataclass(frozen=True)
class ReactorContext:
    """Built once at process start and handed to every reactor."""

    index: IndexWriter
    packages_index: str = "packages"
    topics_index: str = "topics"
    conversations_index: str = "conversations"

    @classmethod
    def from_settings(cls, s: Optional[Settings] = None, index: Optional[IndexWriter] = None) -> "ReactorContext":
        s = s or default_settings
        if index is None:
            index = AlgoliaIndexClient(
                app_id=s.ALGOLIA_APP_ID,
                api_key=s.ALGOLIA_ADMIN_KEY,
                write_host=s.ALGOLIA_WRITE_HOST or None,
                timeout_s=s.ALGOLIA_TIMEOUT_S,
            )
        return cls(
            index=index,
            packages_index=s.PACKAGES_INDEX,
            topics_index=s.TOPICS_INDEX,
            conversations_index=s.CONVERSATIONS_INDEX,
        )


def _upsert(ctx: ReactorContext, index_name: str, record: Dict[str, Any], event: ChangeEvent) -> Dict[str, Any]:
    t = Timer()
    ctx.index.upsert(index_name, record)
    log.info(
        "record_upserted",
        extra={
            "extra": {
                "event": "record_upserted",
                "index": index_name,
                "objectID": record["objectID"],
                "change": event.kind.value,
                "event_id": event.event_id,
                "latency_ms": t.ms(),
            }
        },
    )
    return {"ok": True, "action": "upsert", "index": index_name, "objectID": record["objectID"]}


def _delete(ctx: ReactorContext, index_name: str, object_id: str, event: ChangeEvent) -> Dict[str, Any]:
    t = Timer()
    ctx.index.delete(index_name, object_id)
    log.info(
        "record_deleted",
        extra={
            "extra": {
                "event": "record_deleted",
                "index": index_name,
                "objectID": object_id,
                "change": event.kind.value,
                "event_id": event.event_id,
                "latency_ms": t.ms(),
            }
        },
    )
    return {"ok": True, "action": "delete", "index": index_name, "objectID": object_id}


# Builders run before any outbound call: a projection error means nothing is written.

def on_topic_written(event: ChangeEvent, params: Dict[str, str], ctx: ReactorContext) -> Dict[str, Any]:
    record = build_topic_record(params["topicID"], event.data or {})
    return _upsert(ctx, ctx.topics_index, record, event)


def on_topic_deleted(event: ChangeEvent, params: Dict[str, str], ctx: ReactorContext) -> Dict[str, Any]:
    return _delete(ctx, ctx.topics_index, params["topicID"], event)


def on_package_written(event: ChangeEvent, params: Dict[str, str], ctx: ReactorContext) -> Dict[str, Any]:
    record = build_package_record(params["packageID"], event.data or {})
    return _upsert(ctx, ctx.packages_index, record, event)


def on_package_deleted(event: ChangeEvent, params: Dict[str, str], ctx: ReactorContext) -> Dict[str, Any]:
    return _delete(ctx, ctx.packages_index, params["packageID"], event)


def on_conversation_created(event: ChangeEvent, params: Dict[str, str], ctx: ReactorContext) -> Dict[str, Any]:
    record = build_conversation_record(params["conversationID"], event.data or {})
    return _upsert(ctx, ctx.conversations_index, record, event)


def on_conversation_deleted(event: ChangeEvent, params: Dict[str, str], ctx: ReactorContext) -> Dict[str, Any]:
    return _delete(ctx, ctx.conversations_index, params["conversationID"], event)
