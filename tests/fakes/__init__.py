"""Shared test doubles: memory sink plus a sink that always fails."""

from __future__ import annotations

from handoff.core.exceptions import SinkError
from handoff.models.escalation import EscalationRecord
from handoff.persistence.memory_backend import MemoryEscalationSink


class FailingSink:
    """IEscalationSink whose publish always raises SinkError."""

    def __init__(self) -> None:
        self.attempts = 0

    def publish(self, record: EscalationRecord) -> None:
        self.attempts += 1
        raise SinkError(f"sink unavailable for {record.subproblem_id}")


__all__ = ["FailingSink", "MemoryEscalationSink"]
