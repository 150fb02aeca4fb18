"""Protocol interfaces for Handoff's pluggable seams.

Structural typing, no inheritance required, easy to test with isinstance().
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from handoff.models.escalation import EscalationRecord


# ---------------------------------------------------------------------------
# Fingerprinting
# ---------------------------------------------------------------------------

@runtime_checkable
class IFingerprinter(Protocol):
    """Normalizes raw outcome text into a comparable signature."""

    def fingerprint(self, raw_message: str) -> str: ...


# ---------------------------------------------------------------------------
# Escalation sinks
# ---------------------------------------------------------------------------

@runtime_checkable
class IEscalationSink(Protocol):
    """Receives every escalation record the session emits."""

    def publish(self, record: EscalationRecord) -> None: ...
