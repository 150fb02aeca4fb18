"""Redis escalation sink implementing IEscalationSink."""

from __future__ import annotations

import redis

from handoff.core.exceptions import SinkError
from handoff.models.escalation import EscalationRecord


class RedisEscalationSink:
    """Appends every record to ``{prefix}:escalations`` and keeps the latest per sub-problem.

    The latest-record keys expire after ``ttl_seconds``; the history list does not.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        key_prefix: str = "handoff",
        ttl_seconds: int = 4 * 60 * 60,
    ) -> None:
        self._prefix = key_prefix
        self._ttl = ttl_seconds
        self._client = redis.Redis(
            host=host, port=port, db=db, decode_responses=True,
        )

    @property
    def history_key(self) -> str:
        return f"{self._prefix}:escalations"

    def latest_key(self, subproblem_id: str) -> str:
        return f"{self._prefix}:latest:{subproblem_id}"

    def publish(self, record: EscalationRecord) -> None:
        payload = record.model_dump_json(by_alias=True)
        try:
            self._client.rpush(self.history_key, payload)
            self._client.setex(self.latest_key(record.subproblem_id), self._ttl, payload)
        except Exception as exc:
            raise SinkError(
                f"Redis publish failed for subproblem={record.subproblem_id!r}: {exc}"
            ) from exc

    def history(self) -> list[EscalationRecord]:
        try:
            raw = self._client.lrange(self.history_key, 0, -1)
        except Exception as exc:
            raise SinkError(f"Redis LRANGE failed for key={self.history_key!r}: {exc}") from exc
        return [EscalationRecord.model_validate_json(item) for item in raw]

    def latest(self, subproblem_id: str) -> EscalationRecord | None:
        key = self.latest_key(subproblem_id)
        try:
            raw = self._client.get(key)
        except Exception as exc:
            raise SinkError(f"Redis GET failed for key={key!r}: {exc}") from exc
        if raw is None:
            return None
        return EscalationRecord.model_validate_json(raw)
