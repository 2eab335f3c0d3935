from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, ConfigDict, ValidationError

from app.dependencies import get_reactor_context
from projection.errors import MalformedInput
from sync.events import change_event_from_cloudevent
from sync.reactors import ReactorContext
from sync.router import dispatch
from utils.request_context import set_event_id

router = APIRouter()
log = logging.getLogger("indexsync.events")


class FirestoreEventData(BaseModel):
    """JSON payload of a Firestore DocumentEventData."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    value: Optional[Dict[str, Any]] = None
    oldValue: Optional[Dict[str, Any]] = None


@router.post("/events/firestore")
async def firestore_event(
    request: Request,
    ce_type: Optional[str] = Header(default=None),
    ce_subject: Optional[str] = Header(default=None),
    ce_id: Optional[str] = Header(default=None),
    ctx: ReactorContext = Depends(get_reactor_context),
):
    try:
        body = await request.json()
    except ValueError:
        # Eventarc must be configured for application/json; protobuf payloads land here.
        raise MalformedInput("body", "expected_json")
    if not ce_type and isinstance(body, dict) and "specversion" in body:
        # Structured mode: attributes and data share the body.
        ce_type = body.get("type")
        ce_subject = body.get("subject")
        ce_id = body.get("id")
        body = body.get("data") or {}

    try:
        data = FirestoreEventData.model_validate(body or {})
    except ValidationError:
        raise MalformedInput("body", "expected_document_event_data")
    set_event_id(ce_id or "")
    event = change_event_from_cloudevent(
        ce_type=ce_type or "",
        subject=ce_subject or "",
        body=data.model_dump(),
        event_id=ce_id or "",
    )
    log.info(
        "change_received",
        extra={"extra": {"event": "change_received", "path": event.path, "change": event.kind.value, "ce_type": ce_type}},
    )
    # Index calls are blocking httpx requests.
    return await run_in_threadpool(dispatch, event, ctx)
