"""In-memory escalation sink, list-backed, for tests and embedding."""

from __future__ import annotations

from handoff.models.escalation import EscalationRecord


class MemoryEscalationSink:
    """List-backed IEscalationSink."""

    def __init__(self) -> None:
        self._records: list[EscalationRecord] = []

    @property
    def records(self) -> list[EscalationRecord]:
        return list(self._records)

    def publish(self, record: EscalationRecord) -> None:
        self._records.append(record)

    def latest(self, subproblem_id: str) -> EscalationRecord | None:
        for record in reversed(self._records):
            if record.subproblem_id == subproblem_id:
                return record
        return None

    def clear(self) -> None:
        self._records.clear()
