"""EscalationRouter — maps a fired trigger to a collaborator role and builds the record."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from handoff.core.config import EngineConfig
from handoff.engine.tracker import SubproblemTracker
from handoff.models.escalation import (
    EscalationContext,
    EscalationRecord,
    TargetRole,
    TriggerKind,
)
from handoff.models.tracker import TrackerSnapshot

DEFAULT_ROLES: Mapping[TriggerKind, TargetRole] = MappingProxyType({
    TriggerKind.REPEATED_ERROR: TargetRole.TROUBLESHOOTING,
    TriggerKind.REPEATED_FAILURE: TargetRole.TROUBLESHOOTING,
    TriggerKind.TOOL_CALL_BUDGET_EXCEEDED: TargetRole.TROUBLESHOOTING,
    TriggerKind.SUB_BUDGET_EXCEEDED: TargetRole.TROUBLESHOOTING,
    TriggerKind.EXPLICIT_SERVICE_FAILURE: TargetRole.TROUBLESHOOTING,
})


class EscalationRouter:
    """Stamps records with a target role and moves the tracker into COOLDOWN.

    Dispatch performs no I/O; invoking the collaborator is the host's job.
    A sub-problem that keeps escalating without any success or progress
    marker in between is handed to ``humanClarification`` once it reaches
    ``clarification_threshold`` prior escalations.
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config or EngineConfig()
        self._roles = {**DEFAULT_ROLES, **self._config.role_overrides}

    def role_for(self, trigger: TriggerKind, snapshot: TrackerSnapshot) -> TargetRole:
        threshold = self._config.clarification_threshold
        if threshold and snapshot.escalations_since_progress >= threshold:
            return TargetRole.HUMAN_CLARIFICATION
        return self._roles[trigger]

    def dispatch(self, tracker: SubproblemTracker, trigger: TriggerKind) -> EscalationRecord:
        snapshot = tracker.snapshot()
        tracker.begin_escalation()
        record = EscalationRecord(
            subproblem_id=snapshot.subproblem_id,
            trigger_kind=trigger,
            target_role=self.role_for(trigger, snapshot),
            context=self._build_context(snapshot),
            ordinal=snapshot.ordinal,
        )
        tracker.complete_escalation()
        return record

    def _build_context(self, snapshot: TrackerSnapshot) -> EscalationContext:
        return EscalationContext(
            component=snapshot.component,
            consecutive_failed_attempts=snapshot.consecutive_failed_attempts,
            tool_calls_since_progress=snapshot.tool_calls_since_progress,
            tool_calls_in_failure_run=snapshot.tool_calls_in_failure_run,
            repeated_fingerprint=snapshot.repeated_fingerprint,
            escalation_streak=snapshot.escalations_since_progress + 1,
            recent_messages=snapshot.recent_messages,
        )
