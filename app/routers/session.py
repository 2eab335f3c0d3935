from __future__ import annotations

from fastapi import APIRouter

router = APIRouter()


@router.post("/user_logout")
def user_logout():
    # Placeholder: session teardown (app_instance -> uid disassociation) is not implemented.
    return {"ok": True}
