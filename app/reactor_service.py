from __future__ import annotations

import logging
import os
import uuid

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from config.settings import settings
from ops.structured_logger import setup_logging
from projection.errors import IndexWriteFailure, ProjectionError
from utils.request_context import clear_context, set_request_id

from app.routers.events import router as events_router
from app.routers.health import router as health_router
from app.routers.reindex import router as reindex_router
from app.routers.session import router as session_router

setup_logging(settings.LOG_LEVEL)

app = FastAPI(title="Index Sync", version="1.0.0")
log = logging.getLogger("indexsync.service")


def _get_request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or request.headers.get("x-request-id") or ""


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    rid = request.headers.get("x-request-id") or str(uuid.uuid4())
    request.state.request_id = rid
    set_request_id(rid)
    try:
        response = await call_next(request)
    finally:
        clear_context()
    response.headers["X-Request-Id"] = rid
    return response


@app.exception_handler(ProjectionError)
async def projection_error_handler(request: Request, exc: ProjectionError):
    # Builder rejected the document; nothing was written to the index.
    rid = _get_request_id(request)
    log.warning(
        "projection_error",
        extra={
            "extra": {
                "event": "projection_error",
                "error": exc.code,
                "field_path": exc.path,
                "message": str(exc),
                "path": request.url.path,
                "request_id": rid,
            }
        },
    )
    return JSONResponse(
        status_code=422,
        content={"error": exc.code, "path": exc.path, "request_id": rid, "revision": os.getenv("K_REVISION") or ""},
    )


@app.exception_handler(IndexWriteFailure)
async def index_write_failure_handler(request: Request, exc: IndexWriteFailure):
    # Non-2xx so the notification host redelivers.
    rid = _get_request_id(request)
    log.error(
        "index_write_failure",
        extra={
            "extra": {
                "event": "index_write_failure",
                "index": exc.index_name,
                "objectID": exc.object_id,
                "status_code": exc.status_code,
                "message": str(exc),
                "request_id": rid,
            }
        },
    )
    return JSONResponse(
        status_code=502,
        content={
            "error": "index_write_failure",
            "index": exc.index_name,
            "objectID": exc.object_id,
            "request_id": rid,
            "revision": os.getenv("K_REVISION") or "",
        },
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    rid = _get_request_id(request)
    log.warning(
        "http_exception",
        extra={
            "extra": {
                "event": "http_exception",
                "status_code": exc.status_code,
                "detail": exc.detail,
                "path": request.url.path,
                "method": request.method,
                "request_id": rid,
            }
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "request_id": rid, "revision": os.getenv("K_REVISION") or ""},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    rid = _get_request_id(request)
    log.warning(
        "validation_error",
        extra={
            "extra": {
                "event": "validation_error",
                "path": request.url.path,
                "method": request.method,
                "request_id": rid,
            }
        },
    )
    return JSONResponse(
        status_code=422,
        content={"detail": exc.errors(), "request_id": rid, "revision": os.getenv("K_REVISION") or ""},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    rid = _get_request_id(request)
    log.error(
        "internal_unhandled_exception",
        extra={
            "extra": {
                "event": "internal_unhandled_exception",
                "error_type": type(exc).__name__,
                "message": str(exc),
                "path": request.url.path,
                "method": request.method,
                "request_id": rid,
            }
        },
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"error": "internal_unhandled_exception", "request_id": rid, "revision": os.getenv("K_REVISION") or ""},
    )


app.include_router(health_router, tags=["health"])
app.include_router(events_router, tags=["events"])
app.include_router(reindex_router, tags=["reindex"])
app.include_router(session_router, tags=["session"])
