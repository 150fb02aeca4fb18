"""Handoff exception hierarchy."""

from __future__ import annotations

from typing import Any


class HandoffError(Exception):
    """Base exception for all Handoff errors."""


class EventValidationError(HandoffError):
    """An action event was rejected at the session boundary."""

    def __init__(
        self,
        message: str,
        subproblem_id: str | None = None,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        self.subproblem_id = subproblem_id
        self.errors = errors or []
        super().__init__(message)


class TrackerResolvedError(EventValidationError):
    """Event submitted for a sub-problem that was already resolved."""

    def __init__(self, subproblem_id: str) -> None:
        super().__init__(
            f"Sub-problem {subproblem_id!r} is resolved and accepts no further events",
            subproblem_id=subproblem_id,
        )


class UnknownSubproblemError(HandoffError):
    """No tracker exists for the requested sub-problem."""

    def __init__(self, subproblem_id: str) -> None:
        self.subproblem_id = subproblem_id
        super().__init__(f"Unknown sub-problem {subproblem_id!r}")


class InvalidTransitionError(HandoffError):
    """Tracker state machine was asked for a transition it does not allow."""

    def __init__(self, subproblem_id: str, current: str, target: str) -> None:
        self.subproblem_id = subproblem_id
        self.current = current
        self.target = target
        super().__init__(f"Sub-problem {subproblem_id!r}: cannot move {current} -> {target}")


class ConfigurationError(HandoffError):
    """Unknown or invalid engine configuration option."""


class SinkError(HandoffError):
    """An escalation sink failed to publish a record."""
