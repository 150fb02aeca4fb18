"""Request-scoped access to the application's session."""

from __future__ import annotations

from fastapi import Request

from handoff.engine.session import EscalationSession


def get_session(request: Request) -> EscalationSession:
    return request.app.state.session
