"""Handoff: escalation policy engine for coding-assistant action streams."""

from __future__ import annotations

from handoff.core.config import EngineConfig
from handoff.engine.session import EscalationSession
from handoff.models.escalation import EscalationRecord, TargetRole, TriggerKind
from handoff.models.events import ActionEvent, EventKind, Outcome

__all__ = [
    "ActionEvent",
    "EngineConfig",
    "EscalationRecord",
    "EscalationSession",
    "EventKind",
    "Outcome",
    "TargetRole",
    "TriggerKind",
]

__version__ = "0.1.0"
