"""SubproblemTracker — isolated counters and state machine for one sub-problem."""

from __future__ import annotations

import threading
from collections import deque
from types import MappingProxyType
from typing import Mapping, Optional

from handoff.core.exceptions import (
    EventValidationError,
    InvalidTransitionError,
    TrackerResolvedError,
)
from handoff.core.types import Fingerprint, Ordinal, SubproblemId
from handoff.models.events import ActionEvent, EventKind, Outcome
from handoff.models.tracker import TrackerSnapshot, TrackerState


class SubproblemTracker:
    """Counts failures, tool calls and repeated fingerprints for one sub-problem.

    The tracker only records; it never evaluates escalation rules on itself.
    State machine::

        ACTIVE -> ESCALATING -> COOLDOWN -> ACTIVE   (next event)
        ACTIVE | COOLDOWN -> RESOLVED                 (explicit resolve)
    """

    def __init__(
        self,
        subproblem_id: SubproblemId,
        *,
        repeat_count: int = 2,
        context_window: int = 5,
    ) -> None:
        self._id = subproblem_id
        self._repeat_count = repeat_count
        self.lock = threading.Lock()

        self._state = TrackerState.ACTIVE
        self._ordinal: Ordinal = 0
        self._last_timestamp: Optional[int] = None
        self._component = ""

        self._consecutive_failed_attempts = 0
        self._tool_calls_since_progress = 0
        self._tool_calls_in_failure_run = 0
        self._seen_fingerprints: dict[Fingerprint, Ordinal] = {}
        self._fingerprint_counts: dict[Fingerprint, int] = {}
        self._recent_messages: deque[str] = deque(maxlen=context_window)

        self._escalations_since_progress = 0
        self._last_escalation_ordinal: Optional[Ordinal] = None

        # Per-pass flags, cleared at the start of every applied event
        self._repeated_fingerprint: Optional[Fingerprint] = None
        self._service_failure = False

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def subproblem_id(self) -> SubproblemId:
        return self._id

    @property
    def state(self) -> TrackerState:
        return self._state

    @property
    def ordinal(self) -> Ordinal:
        return self._ordinal

    @property
    def consecutive_failed_attempts(self) -> int:
        return self._consecutive_failed_attempts

    @property
    def tool_calls_since_progress(self) -> int:
        return self._tool_calls_since_progress

    @property
    def seen_fingerprints(self) -> Mapping[Fingerprint, Ordinal]:
        return MappingProxyType(dict(self._seen_fingerprints))

    def snapshot(self) -> TrackerSnapshot:
        return TrackerSnapshot(
            subproblem_id=self._id,
            component=self._component,
            state=self._state,
            ordinal=self._ordinal,
            consecutive_failed_attempts=self._consecutive_failed_attempts,
            tool_calls_since_progress=self._tool_calls_since_progress,
            tool_calls_in_failure_run=self._tool_calls_in_failure_run,
            repeated_fingerprint=self._repeated_fingerprint,
            service_failure=self._service_failure,
            escalations_since_progress=self._escalations_since_progress,
            last_escalation_ordinal=self._last_escalation_ordinal,
            recent_messages=tuple(self._recent_messages),
        )

    # ------------------------------------------------------------------
    # Event intake
    # ------------------------------------------------------------------

    def validate(self, event: ActionEvent) -> None:
        """Reject events this tracker cannot accept, without touching state."""
        if event.subproblem_id != self._id:
            raise EventValidationError(
                f"Event for {event.subproblem_id!r} routed to tracker {self._id!r}",
                subproblem_id=event.subproblem_id,
            )
        if self._state is TrackerState.RESOLVED:
            raise TrackerResolvedError(self._id)
        if self._last_timestamp is not None and event.timestamp < self._last_timestamp:
            raise EventValidationError(
                f"Out-of-order event for {self._id!r}: timestamp {event.timestamp} "
                f"precedes {self._last_timestamp}",
                subproblem_id=self._id,
            )

    def apply(self, event: ActionEvent, fingerprint: Optional[Fingerprint] = None) -> None:
        """Record one event. ``fingerprint`` is the normalized failure message, if any."""
        self.validate(event)
        if self._state is TrackerState.COOLDOWN:
            self._state = TrackerState.ACTIVE
        elif self._state is not TrackerState.ACTIVE:
            raise InvalidTransitionError(self._id, self._state, TrackerState.ACTIVE)

        self._ordinal += 1
        self._last_timestamp = event.timestamp
        if event.component:
            self._component = event.component
        self._repeated_fingerprint = None
        self._service_failure = event.service_failure

        if event.kind is EventKind.ATTEMPT:
            self.record_attempt(event.outcome)
        elif event.kind is EventKind.TOOL_CALL:
            self.record_tool_call()
        else:
            self.record_progress_marker()

        if event.raw_message is not None:
            self._recent_messages.append(event.raw_message)
        if event.is_failure and fingerprint is not None:
            self.record_message(fingerprint)

    def record_attempt(self, outcome: Outcome) -> None:
        if outcome is Outcome.FAILURE:
            self._consecutive_failed_attempts += 1
        else:
            self._reset_counters()
            self._escalations_since_progress = 0

    def record_tool_call(self) -> None:
        self._tool_calls_since_progress += 1
        if self._consecutive_failed_attempts > 0:
            self._tool_calls_in_failure_run += 1

    def record_progress_marker(self) -> None:
        self._reset_counters()
        self._escalations_since_progress = 0

    def record_message(self, fingerprint: Fingerprint) -> None:
        """Track a failure fingerprint; flag the pass once it hits the repeat count."""
        if fingerprint in self._seen_fingerprints:
            self._fingerprint_counts[fingerprint] += 1
            if self._fingerprint_counts[fingerprint] >= self._repeat_count:
                self._repeated_fingerprint = fingerprint
        else:
            self._seen_fingerprints[fingerprint] = self._ordinal
            self._fingerprint_counts[fingerprint] = 1

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def begin_escalation(self) -> None:
        self._transition(TrackerState.ACTIVE, TrackerState.ESCALATING)

    def complete_escalation(self) -> Ordinal:
        """Enter COOLDOWN after the record was dispatched; returns its ordinal."""
        self._transition(TrackerState.ESCALATING, TrackerState.COOLDOWN)
        self._last_escalation_ordinal = self._ordinal
        self._escalations_since_progress += 1
        self._reset_counters()
        self._repeated_fingerprint = None
        self._service_failure = False
        return self._ordinal

    def resolve(self) -> None:
        if self._state is TrackerState.RESOLVED:
            return
        if self._state is TrackerState.ESCALATING:
            raise InvalidTransitionError(self._id, self._state, TrackerState.RESOLVED)
        self._state = TrackerState.RESOLVED

    def _transition(self, expected: TrackerState, target: TrackerState) -> None:
        if self._state is not expected:
            raise InvalidTransitionError(self._id, self._state, target)
        self._state = target

    def _reset_counters(self) -> None:
        self._consecutive_failed_attempts = 0
        self._tool_calls_since_progress = 0
        self._tool_calls_in_failure_run = 0
        self._seen_fingerprints.clear()
        self._fingerprint_counts.clear()
        self._recent_messages.clear()
