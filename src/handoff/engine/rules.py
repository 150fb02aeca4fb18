"""EscalationRuleEvaluator — priority-ordered predicates over a tracker snapshot.

Priority (first match wins, lower priorities are suppressed, not queued):
    1. repeatedError           same fingerprint seen ``repeat_count`` times
    2. repeatedFailure         consecutive failed attempts >= ``failure_threshold``
    3. toolCallBudgetExceeded  tool calls since progress >= ``tool_call_budget``
    4. subBudgetExceeded       tool calls during a failure run >= ``sub_budget``
    5. explicitServiceFailure  event tagged as a service/availability failure
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from handoff.core.config import EngineConfig
from handoff.models.escalation import TriggerKind
from handoff.models.tracker import TrackerSnapshot, TrackerState


class EscalationRule(Protocol):
    kind: TriggerKind

    def matches(self, snapshot: TrackerSnapshot) -> bool: ...


@dataclass(frozen=True)
class RepeatedErrorRule:
    kind: TriggerKind = TriggerKind.REPEATED_ERROR

    def matches(self, snapshot: TrackerSnapshot) -> bool:
        return snapshot.repeated_fingerprint is not None


@dataclass(frozen=True)
class RepeatedFailureRule:
    threshold: int
    kind: TriggerKind = TriggerKind.REPEATED_FAILURE

    def matches(self, snapshot: TrackerSnapshot) -> bool:
        return snapshot.consecutive_failed_attempts >= self.threshold


@dataclass(frozen=True)
class ToolCallBudgetRule:
    budget: int
    kind: TriggerKind = TriggerKind.TOOL_CALL_BUDGET_EXCEEDED

    def matches(self, snapshot: TrackerSnapshot) -> bool:
        return snapshot.tool_calls_since_progress >= self.budget


@dataclass(frozen=True)
class SubBudgetRule:
    """Tool calls keep piling up while the failure run has not been reset."""

    budget: int
    kind: TriggerKind = TriggerKind.SUB_BUDGET_EXCEEDED

    def matches(self, snapshot: TrackerSnapshot) -> bool:
        return (
            snapshot.consecutive_failed_attempts > 0
            and snapshot.tool_calls_in_failure_run >= self.budget
        )


@dataclass(frozen=True)
class ServiceFailureRule:
    kind: TriggerKind = TriggerKind.EXPLICIT_SERVICE_FAILURE

    def matches(self, snapshot: TrackerSnapshot) -> bool:
        return snapshot.service_failure


def default_rules(config: EngineConfig) -> tuple[EscalationRule, ...]:
    """Build the rule chain in priority order."""
    return (
        RepeatedErrorRule(),
        RepeatedFailureRule(threshold=config.failure_threshold),
        ToolCallBudgetRule(budget=config.tool_call_budget),
        SubBudgetRule(budget=config.sub_budget),
        ServiceFailureRule(),
    )


class EscalationRuleEvaluator:
    """Pure evaluator; fires at most one trigger per pass."""

    def __init__(
        self,
        config: EngineConfig | None = None,
        rules: Sequence[EscalationRule] | None = None,
    ) -> None:
        self._rules = tuple(rules) if rules is not None else default_rules(config or EngineConfig())

    @property
    def rules(self) -> tuple[EscalationRule, ...]:
        return self._rules

    def evaluate(self, snapshot: TrackerSnapshot) -> Optional[TriggerKind]:
        if snapshot.state is not TrackerState.ACTIVE:
            return None
        for rule in self._rules:
            if rule.matches(snapshot):
                return rule.kind
        return None
