"""Pluggable escalation sinks behind the IEscalationSink protocol."""

from __future__ import annotations

from handoff.core.config import AppSettings
from handoff.core.protocols import IEscalationSink
from handoff.persistence.memory_backend import MemoryEscalationSink
from handoff.persistence.redis_backend import RedisEscalationSink


def create_sink(settings: AppSettings | None = None) -> IEscalationSink:
    """Create the escalation sink selected by ``settings.sink``."""
    if settings is None:
        settings = AppSettings()

    if settings.sink == "redis":
        return RedisEscalationSink(
            host=settings.redis.host,
            port=settings.redis.port,
            db=settings.redis.db,
            key_prefix=settings.redis.key_prefix,
            ttl_seconds=settings.redis.ttl_seconds,
        )
    return MemoryEscalationSink()


__all__ = ["MemoryEscalationSink", "RedisEscalationSink", "create_sink"]
