from __future__ import annotations

import os
import time
from typing import Any, Dict

from fastapi import APIRouter

from config.settings import settings
from models.schema import COL_SYSTEM, DOC_HEALTHZ

router = APIRouter()


def _firestore_probe(timeout_s: float = 0.20) -> Dict[str, Any]:
    """
    Read-only, bounded-time Firestore connectivity probe.
    - No writes
    - Uses a fixed doc path.
    """
    try:
        from storage.firestore_client import get_firestore_client

        t0 = time.time()
        get_firestore_client().collection(COL_SYSTEM).document(DOC_HEALTHZ).get(timeout=timeout_s)
        return {"ok": True, "latency_ms": int((time.time() - t0) * 1000)}
    except Exception as e:
        return {"ok": False, "error_type": type(e).__name__, "message": str(e)}


@router.get("/healthz")
def healthz():
    return {"ok": True, "service": "index-sync"}


@router.get("/health")
def health():
    fs = _firestore_probe()
    index_configured = bool(settings.ALGOLIA_APP_ID and settings.ALGOLIA_ADMIN_KEY)

    payload: Dict[str, Any] = {
        "ok": bool(fs.get("ok", False)) and index_configured,
        "service": "index-sync",
        "cloudrun_service": os.getenv("K_SERVICE") or "",
        "revision": os.getenv("K_REVISION") or "",
        "environment": settings.ENVIRONMENT,
        "firestore_ok": bool(fs.get("ok", False)),
        "firestore": fs,
        "index_credentials_configured": index_configured,
        "indices": {
            "packages": settings.PACKAGES_INDEX,
            "topics": settings.TOPICS_INDEX,
            "conversations": settings.CONVERSATIONS_INDEX,
        },
        "time_unix": time.time(),
    }
    return payload
