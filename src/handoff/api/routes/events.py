"""Event intake endpoint."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from handoff.api.deps import get_session
from handoff.engine.session import EscalationSession

router = APIRouter(tags=["events"])


@router.post("/events")
def submit_event(
    payload: dict[str, Any] = Body(...),
    session: EscalationSession = Depends(get_session),
) -> dict[str, Any]:
    """Submit one action event; returns the escalation it caused, or null."""
    record = session.submit(payload)
    return {"escalation": record.model_dump(mode="json", by_alias=True) if record else None}
