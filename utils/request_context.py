from __future__ import annotations

from contextvars import ContextVar

_request_id_var: ContextVar[str] = ContextVar("request_id", default="")
_event_id_var: ContextVar[str] = ContextVar("event_id", default="")


def set_request_id(rid: str) -> None:
    _request_id_var.set(rid or "")


def get_request_id() -> str:
    return _request_id_var.get() or ""


def set_event_id(event_id: str) -> None:
    # CloudEvent id of the change notification being handled.
    _event_id_var.set(event_id or "")


def get_event_id() -> str:
    return _event_id_var.get() or ""


def clear_context() -> None:
    _request_id_var.set("")
    _event_id_var.set("")
