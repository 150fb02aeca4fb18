"""Type aliases used across the Handoff engine."""

from __future__ import annotations

SubproblemId = str
Fingerprint = str
Ordinal = int
