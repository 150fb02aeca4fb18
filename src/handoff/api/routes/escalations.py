"""Escalation history endpoint."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from handoff.api.deps import get_session
from handoff.engine.session import EscalationSession

router = APIRouter(tags=["escalations"])


@router.get("/escalations")
def list_escalations(session: EscalationSession = Depends(get_session)) -> dict[str, Any]:
    return {
        "escalations": [r.model_dump(mode="json", by_alias=True) for r in session.escalations],
    }
