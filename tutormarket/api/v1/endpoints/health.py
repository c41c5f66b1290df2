from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
def health(request: Request) -> dict[str, str]:
    constraints = getattr(request.app.state, "constraint_status", None)
    return {"status": "ok", "constraints": constraints or "not initialised"}
