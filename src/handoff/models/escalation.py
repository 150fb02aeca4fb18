"""Escalation records handed to the host."""

from __future__ import annotations

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TriggerKind(StrEnum):
    REPEATED_ERROR = "repeatedError"
    REPEATED_FAILURE = "repeatedFailure"
    TOOL_CALL_BUDGET_EXCEEDED = "toolCallBudgetExceeded"
    SUB_BUDGET_EXCEEDED = "subBudgetExceeded"
    COMBINED_THRESHOLD = "subBudgetExceeded"  # alias of SUB_BUDGET_EXCEEDED
    EXPLICIT_SERVICE_FAILURE = "explicitServiceFailure"


class TargetRole(StrEnum):
    TESTING = "testing"
    TROUBLESHOOTING = "troubleshooting"
    INTEGRATION = "integration"
    DEPLOYMENT = "deployment"
    SUPPORT = "support"
    HUMAN_CLARIFICATION = "humanClarification"


class EscalationContext(BaseModel):
    """Counters that caused the fire plus the most recent messages."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    component: str = ""
    consecutive_failed_attempts: int = 0
    tool_calls_since_progress: int = 0
    tool_calls_in_failure_run: int = 0
    repeated_fingerprint: Optional[str] = None
    escalation_streak: int = 1
    recent_messages: tuple[str, ...] = ()


class EscalationRecord(BaseModel):
    """A routing decision: hand this sub-problem to ``target_role``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    subproblem_id: str
    trigger_kind: TriggerKind
    target_role: TargetRole
    context: EscalationContext
    ordinal: int
