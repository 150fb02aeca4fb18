"""Integration test fixtures for a real Redis server."""

from __future__ import annotations

import os
import uuid

import pytest
import redis

REDIS_HOST = os.environ.get("HANDOFF_REDIS_HOST", "localhost")
REDIS_PORT = int(os.environ.get("HANDOFF_REDIS_PORT", "6379"))


def _redis_available() -> bool:
    """Check if Redis is reachable."""
    try:
        return bool(redis.Redis(host=REDIS_HOST, port=REDIS_PORT, socket_connect_timeout=0.5).ping())
    except redis.RedisError:
        return False


skip_no_redis = pytest.mark.skipif(
    not _redis_available(),
    reason="Redis not available",
)


@pytest.fixture
def key_prefix():
    """Unique key prefix per test; keys are removed afterwards."""
    prefix = f"handoff-inttest-{uuid.uuid4().hex[:8]}"
    yield prefix
    client = redis.Redis(host=REDIS_HOST, port=REDIS_PORT)
    keys = list(client.scan_iter(f"{prefix}:*"))
    if keys:
        client.delete(*keys)
