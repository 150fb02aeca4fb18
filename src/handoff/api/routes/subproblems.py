"""Sub-problem inspection and resolution endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from handoff.api.deps import get_session
from handoff.engine.session import EscalationSession

router = APIRouter(tags=["subproblems"])


@router.get("")
def list_subproblems(session: EscalationSession = Depends(get_session)) -> dict[str, Any]:
    return {
        "subproblems": [s.model_dump(mode="json", by_alias=True) for s in session.snapshots()],
    }


@router.get("/{subproblem_id}")
def get_subproblem(
    subproblem_id: str, session: EscalationSession = Depends(get_session)
) -> dict[str, Any]:
    return session.snapshot(subproblem_id).model_dump(mode="json", by_alias=True)


@router.post("/{subproblem_id}/resolve")
def resolve_subproblem(
    subproblem_id: str, session: EscalationSession = Depends(get_session)
) -> dict[str, Any]:
    """Force the sub-problem into RESOLVED."""
    return session.resolve(subproblem_id).model_dump(mode="json", by_alias=True)
