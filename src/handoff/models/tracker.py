"""Tracker state and the immutable snapshot rules are evaluated against."""

from __future__ import annotations

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TrackerState(StrEnum):
    ACTIVE = "ACTIVE"
    ESCALATING = "ESCALATING"
    COOLDOWN = "COOLDOWN"
    RESOLVED = "RESOLVED"


class TrackerSnapshot(BaseModel):
    """Point-in-time view of one sub-problem's counters."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    subproblem_id: str
    component: str = ""
    state: TrackerState = TrackerState.ACTIVE
    ordinal: int = 0
    consecutive_failed_attempts: int = 0
    tool_calls_since_progress: int = 0
    tool_calls_in_failure_run: int = 0
    repeated_fingerprint: Optional[str] = None  # set only for the pass that saw the repeat
    service_failure: bool = False
    escalations_since_progress: int = 0
    last_escalation_ordinal: Optional[int] = None
    recent_messages: tuple[str, ...] = ()
