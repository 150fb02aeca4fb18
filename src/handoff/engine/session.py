"""EscalationSession — tracker registry and the host-facing submit/resolve surface."""

from __future__ import annotations

import threading
from typing import Any, Iterable, Mapping, Optional, Union

import structlog
from pydantic import ValidationError

from handoff.core.config import EngineConfig
from handoff.core.exceptions import (
    EventValidationError,
    SinkError,
    UnknownSubproblemError,
)
from handoff.core.protocols import IEscalationSink, IFingerprinter
from handoff.core.types import SubproblemId
from handoff.engine.fingerprint import Fingerprinter
from handoff.engine.router import EscalationRouter
from handoff.engine.rules import EscalationRuleEvaluator
from handoff.engine.tracker import SubproblemTracker
from handoff.models.escalation import EscalationRecord
from handoff.models.events import ActionEvent
from handoff.models.tracker import TrackerSnapshot

logger = structlog.get_logger(__name__)

EventInput = Union[ActionEvent, Mapping[str, Any]]


class EscalationSession:
    """Routes action events to per-sub-problem trackers and emits escalations.

    Events for one sub-problem are processed strictly in submission order
    under that tracker's lock; different sub-problems only contend on the
    brief insert-if-absent of a new tracker.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        fingerprinter: IFingerprinter | None = None,
        evaluator: EscalationRuleEvaluator | None = None,
        router: EscalationRouter | None = None,
        sinks: Iterable[IEscalationSink] = (),
    ) -> None:
        self._config = config or EngineConfig()
        self._fingerprinter = fingerprinter or Fingerprinter()
        self._evaluator = evaluator or EscalationRuleEvaluator(self._config)
        self._router = router or EscalationRouter(self._config)
        self._sinks = tuple(sinks)

        self._lock = threading.Lock()
        self._trackers: dict[SubproblemId, SubproblemTracker] = {}
        self._escalations: list[EscalationRecord] = []

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def escalations(self) -> tuple[EscalationRecord, ...]:
        with self._lock:
            return tuple(self._escalations)

    def subproblem_ids(self) -> list[SubproblemId]:
        with self._lock:
            return list(self._trackers)

    # ------------------------------------------------------------------
    # Host operations
    # ------------------------------------------------------------------

    def submit(self, event: EventInput) -> Optional[EscalationRecord]:
        """Process one action event; return the escalation it caused, if any.

        A sink that raises :class:`SinkError` is logged and skipped; the
        remaining sinks still receive the record and it is still returned.

        Raises:
            EventValidationError: malformed event, out-of-order timestamp, or
                an event for a resolved sub-problem. Nothing is recorded.
        """
        event = self._coerce(event)
        tracker = self._get_or_create(event.subproblem_id)

        with tracker.lock:
            try:
                tracker.validate(event)
            except EventValidationError as exc:
                logger.warning("event.rejected", subproblem_id=event.subproblem_id, reason=str(exc))
                raise

            fingerprint = None
            if event.is_failure and event.raw_message is not None:
                fingerprint = self._fingerprinter.fingerprint(event.raw_message)
            tracker.apply(event, fingerprint)

            trigger = self._evaluator.evaluate(tracker.snapshot())
            if trigger is None:
                return None

            record = self._router.dispatch(tracker, trigger)
            with self._lock:
                self._escalations.append(record)
            logger.info(
                "escalation.emitted",
                subproblem_id=record.subproblem_id,
                trigger_kind=str(record.trigger_kind),
                target_role=str(record.target_role),
                ordinal=record.ordinal,
            )
            self._publish(record)
        return record

    def resolve(self, subproblem_id: SubproblemId) -> TrackerSnapshot:
        """Force a sub-problem into RESOLVED; it stays addressable for audit."""
        tracker = self._get(subproblem_id)
        with tracker.lock:
            tracker.resolve()
            snapshot = tracker.snapshot()
        logger.info("tracker.resolved", subproblem_id=subproblem_id, ordinal=snapshot.ordinal)
        return snapshot

    def snapshot(self, subproblem_id: SubproblemId) -> TrackerSnapshot:
        tracker = self._get(subproblem_id)
        with tracker.lock:
            return tracker.snapshot()

    def snapshots(self) -> list[TrackerSnapshot]:
        return [self.snapshot(sid) for sid in self.subproblem_ids()]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _coerce(self, event: EventInput) -> ActionEvent:
        if isinstance(event, ActionEvent):
            return event
        try:
            return ActionEvent.model_validate(event)
        except ValidationError as exc:
            subproblem_id = None
            if isinstance(event, Mapping):
                subproblem_id = event.get("subproblemId", event.get("subproblem_id"))
            logger.warning("event.rejected", subproblem_id=subproblem_id, reason="malformed")
            raise EventValidationError(
                f"Malformed action event: {exc.error_count()} validation error(s)",
                subproblem_id=subproblem_id,
                errors=exc.errors(include_url=False, include_context=False, include_input=False),
            ) from exc

    def _get_or_create(self, subproblem_id: SubproblemId) -> SubproblemTracker:
        with self._lock:
            tracker = self._trackers.get(subproblem_id)
            if tracker is None:
                tracker = SubproblemTracker(
                    subproblem_id,
                    repeat_count=self._config.repeat_count,
                    context_window=self._config.context_window,
                )
                self._trackers[subproblem_id] = tracker
                logger.debug("tracker.created", subproblem_id=subproblem_id)
            return tracker

    def _get(self, subproblem_id: SubproblemId) -> SubproblemTracker:
        with self._lock:
            tracker = self._trackers.get(subproblem_id)
        if tracker is None:
            raise UnknownSubproblemError(subproblem_id)
        return tracker

    def _publish(self, record: EscalationRecord) -> None:
        for sink in self._sinks:
            try:
                sink.publish(record)
            except SinkError as exc:
                logger.error(
                    "sink.publish_failed",
                    sink=type(sink).__name__,
                    subproblem_id=record.subproblem_id,
                    ordinal=record.ordinal,
                    error=str(exc),
                )
