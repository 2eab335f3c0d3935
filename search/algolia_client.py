from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from config.settings import settings
from ops.metrics import Timer
from projection.errors import IndexWriteFailure

log = logging.getLogger("indexsync.algolia")


def _segment(v: str) -> str:
    return quote(v, safe="")


class AlgoliaIndexClient:
    """Write-side client for the Algolia REST API.

    Only full-record replacement and delete-by-objectID are used. Failures are
    raised as IndexWriteFailure and never retried here.
    """

    def __init__(
        self,
        app_id: Optional[str] = None,
        api_key: Optional[str] = None,
        write_host: Optional[str] = None,
        timeout_s: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.app_id = app_id or settings.ALGOLIA_APP_ID
        api_key = api_key or settings.ALGOLIA_ADMIN_KEY
        if not self.app_id or not api_key:
            raise RuntimeError("ALGOLIA_APP_ID / ALGOLIA_ADMIN_KEY not configured")

        host = write_host or settings.ALGOLIA_WRITE_HOST or f"https://{self.app_id}.algolia.net"
        self._http = httpx.Client(
            base_url=host.rstrip("/"),
            headers={
                "X-Algolia-Application-Id": self.app_id,
                "X-Algolia-API-Key": api_key,
                "Content-Type": "application/json",
            },
            timeout=timeout_s if timeout_s is not None else settings.ALGOLIA_TIMEOUT_S,
            transport=transport,
        )

    def _send(self, method: str, index_name: str, object_id: str, body: Optional[Dict[str, Any]] = None) -> httpx.Response:
        url = f"/1/indexes/{_segment(index_name)}/{_segment(object_id)}"
        t = Timer()
        log.info(
            "index_write_attempt",
            extra={"extra": {"event": "index_write_attempt", "method": method, "index": index_name, "objectID": object_id}},
        )
        try:
            r = self._http.request(method, url, json=body)
        except httpx.HTTPError as e:
            log.error(
                "index_write_failed",
                extra={
                    "extra": {
                        "event": "index_write_failed",
                        "method": method,
                        "index": index_name,
                        "objectID": object_id,
                        "error_type": type(e).__name__,
                        "message": str(e),
                        "latency_ms": t.ms(),
                    }
                },
            )
            raise IndexWriteFailure(index_name, object_id, f"{type(e).__name__}: {e}") from e

        log.info(
            "index_write_result",
            extra={
                "extra": {
                    "event": "index_write_result",
                    "method": method,
                    "index": index_name,
                    "objectID": object_id,
                    "status_code": r.status_code,
                    "latency_ms": t.ms(),
                }
            },
        )
        return r

    def _fail(self, r: httpx.Response, index_name: str, object_id: str) -> IndexWriteFailure:
        try:
            message = (r.json() or {}).get("message") or ""
        except ValueError:
            message = (r.text or "")[:500]
        log.warning(
            "index_write_failed",
            extra={
                "extra": {
                    "event": "index_write_failed",
                    "index": index_name,
                    "objectID": object_id,
                    "status_code": r.status_code,
                    "message": message,
                }
            },
        )
        return IndexWriteFailure(index_name, object_id, message or f"http_{r.status_code}", status_code=r.status_code)

    def upsert(self, index_name: str, record: Dict[str, Any]) -> Dict[str, Any]:
        object_id = record.get("objectID")
        if not object_id:
            raise ValueError("record has no objectID")
        r = self._send("PUT", index_name, object_id, body=record)
        if not r.is_success:
            raise self._fail(r, index_name, object_id)
        return r.json()

    def delete(self, index_name: str, object_id: str) -> Dict[str, Any]:
        r = self._send("DELETE", index_name, object_id)
        if r.status_code == 404:
            # Never indexed or already removed.
            return {"objectID": object_id, "deleted": False}
        if not r.is_success:
            raise self._fail(r, index_name, object_id)
        return r.json()
