"""Tests for EscalationRouter role selection and record assembly."""

from __future__ import annotations

from handoff.core.config import EngineConfig
from handoff.engine.router import DEFAULT_ROLES, EscalationRouter
from handoff.engine.tracker import SubproblemTracker
from handoff.models.escalation import TargetRole, TriggerKind
from handoff.models.events import ActionEvent, EventKind, Outcome
from handoff.models.tracker import TrackerSnapshot, TrackerState


def _failing_tracker(messages: list[str], context_window: int = 5) -> SubproblemTracker:
    tracker = SubproblemTracker("deploy:staging", context_window=context_window)
    for ts, message in enumerate(messages):
        tracker.apply(
            ActionEvent(
                subproblem_id="deploy:staging",
                component="deployment",
                kind=EventKind.ATTEMPT,
                outcome=Outcome.FAILURE,
                raw_message=message,
                timestamp=ts,
            )
        )
    return tracker


class TestDispatch:
    def test_record_carries_trigger_role_and_ordinal(self):
        tracker = _failing_tracker(["a", "b", "c"])
        record = EscalationRouter().dispatch(tracker, TriggerKind.REPEATED_FAILURE)

        assert record.subproblem_id == "deploy:staging"
        assert record.trigger_kind == TriggerKind.REPEATED_FAILURE
        assert record.target_role == TargetRole.TROUBLESHOOTING
        assert record.ordinal == 3
        assert record.context.consecutive_failed_attempts == 3
        assert record.context.component == "deployment"
        assert record.context.recent_messages == ("a", "b", "c")
        assert record.context.escalation_streak == 1

    def test_dispatch_moves_tracker_to_cooldown_and_resets(self):
        tracker = _failing_tracker(["a", "b", "c"])
        EscalationRouter().dispatch(tracker, TriggerKind.REPEATED_FAILURE)
        snap = tracker.snapshot()
        assert snap.state == TrackerState.COOLDOWN
        assert snap.consecutive_failed_attempts == 0
        assert snap.last_escalation_ordinal == 3

    def test_context_carries_the_tracker_window(self):
        tracker = _failing_tracker(["m1", "m2", "m3", "m4"], context_window=2)
        record = EscalationRouter().dispatch(tracker, TriggerKind.REPEATED_FAILURE)
        assert record.context.recent_messages == ("m3", "m4")

    def test_record_serializes_with_camel_case(self):
        record = EscalationRouter().dispatch(_failing_tracker(["x"]), TriggerKind.EXPLICIT_SERVICE_FAILURE)
        payload = record.model_dump(mode="json", by_alias=True)
        assert payload["subproblemId"] == "deploy:staging"
        assert payload["triggerKind"] == "explicitServiceFailure"
        assert payload["targetRole"] == "troubleshooting"
        assert payload["context"]["consecutiveFailedAttempts"] == 1


class TestRoles:
    def test_every_trigger_has_a_default_role(self):
        assert set(DEFAULT_ROLES) == set(TriggerKind)

    def test_role_overrides(self):
        router = EscalationRouter(
            EngineConfig(role_overrides={TriggerKind.REPEATED_FAILURE: TargetRole.TESTING})
        )
        snap = TrackerSnapshot(subproblem_id="x")
        assert router.role_for(TriggerKind.REPEATED_FAILURE, snap) == TargetRole.TESTING
        assert router.role_for(TriggerKind.REPEATED_ERROR, snap) == TargetRole.TROUBLESHOOTING

    def test_persistent_escalation_goes_to_human_clarification(self):
        router = EscalationRouter(EngineConfig(clarification_threshold=3))
        assert (
            router.role_for(TriggerKind.REPEATED_FAILURE, TrackerSnapshot(subproblem_id="x", escalations_since_progress=2))
            == TargetRole.TROUBLESHOOTING
        )
        assert (
            router.role_for(TriggerKind.REPEATED_FAILURE, TrackerSnapshot(subproblem_id="x", escalations_since_progress=3))
            == TargetRole.HUMAN_CLARIFICATION
        )

    def test_clarification_can_be_disabled(self):
        router = EscalationRouter(EngineConfig(clarification_threshold=0))
        snap = TrackerSnapshot(subproblem_id="x", escalations_since_progress=50)
        assert router.role_for(TriggerKind.REPEATED_FAILURE, snap) == TargetRole.TROUBLESHOOTING
