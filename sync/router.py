from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, Tuple

from models.schema import PATH_CONVERSATION, PATH_PACKAGE, PATH_TOPIC
from sync import reactors
from sync.events import ChangeEvent, ChangeKind, DocumentPattern
from sync.reactors import ReactorContext

log = logging.getLogger("indexsync.router")

Reactor = Callable[[ChangeEvent, Dict[str, str], ReactorContext], Dict[str, Any]]

_WRITES = frozenset({ChangeKind.CREATED, ChangeKind.UPDATED})
_CREATES = frozenset({ChangeKind.CREATED})
_DELETES = frozenset({ChangeKind.DELETED})


@dataclass(frozen=True)
class Route:
    pattern: DocumentPattern
    kinds: FrozenSet[ChangeKind]
    reactor: Reactor


ROUTES: Tuple[Route, ...] = (
    Route(DocumentPattern(PATH_TOPIC), _WRITES, reactors.on_topic_written),
    Route(DocumentPattern(PATH_TOPIC), _DELETES, reactors.on_topic_deleted),
    Route(DocumentPattern(PATH_PACKAGE), _WRITES, reactors.on_package_written),
    Route(DocumentPattern(PATH_PACKAGE), _DELETES, reactors.on_package_deleted),
    # Conversations are indexed on create only; later edits do not reach the index.
    Route(DocumentPattern(PATH_CONVERSATION), _CREATES, reactors.on_conversation_created),
    Route(DocumentPattern(PATH_CONVERSATION), _DELETES, reactors.on_conversation_deleted),
)


def dispatch(event: ChangeEvent, ctx: ReactorContext) -> Dict[str, Any]:
    for route in ROUTES:
        if event.kind not in route.kinds:
            continue
        params = route.pattern.match(event.path)
        if params is None:
            continue
        return route.reactor(event, params, ctx)

    log.info(
        "change_ignored",
        extra={"extra": {"event": "change_ignored", "path": event.path, "change": event.kind.value}},
    )
    return {"ok": True, "action": "ignored", "path": event.path}
