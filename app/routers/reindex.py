from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from app.dependencies import get_reactor_context
from models.schema import KIND_CONVERSATIONS, KIND_PACKAGES, KIND_TOPICS
from security.operator_auth import OperatorClaims
from sync.reactors import ReactorContext
from sync.reindex import reindex

router = APIRouter()

_KINDS = {KIND_TOPICS, KIND_PACKAGES, KIND_CONVERSATIONS}


@router.post("/reindex/{kind}")
async def reindex_kind(kind: str, claims: dict = OperatorClaims, ctx: ReactorContext = Depends(get_reactor_context)):
    if kind not in _KINDS:
        raise HTTPException(status_code=404, detail=f"unknown_kind:{kind}")
    return await run_in_threadpool(reindex, kind, ctx)
