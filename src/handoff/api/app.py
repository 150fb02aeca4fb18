"""FastAPI application with lifespan and router mounting."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from handoff import __version__
from handoff.api.routes import escalations, events, health, subproblems
from handoff.core.config import AppSettings
from handoff.core.exceptions import (
    EventValidationError,
    TrackerResolvedError,
    UnknownSubproblemError,
)
from handoff.core.logging import configure_logging
from handoff.engine.session import EscalationSession
from handoff.persistence import create_sink


def create_app(settings: AppSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application around one session."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Initialize and tear down application resources."""
        app_settings = settings or AppSettings()
        configure_logging(app_settings.log_level, json=app_settings.log_json)
        app.state.settings = app_settings
        app.state.session = EscalationSession(
            app_settings.engine,
            sinks=[create_sink(app_settings)],
        )
        yield

    app = FastAPI(
        title="Handoff Escalation Policy Engine",
        version=__version__,
        lifespan=lifespan,
    )
    app.include_router(health.router)
    app.include_router(events.router)
    app.include_router(subproblems.router, prefix="/subproblems")
    app.include_router(escalations.router)

    @app.exception_handler(TrackerResolvedError)
    async def _resolved(request: Request, exc: TrackerResolvedError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(EventValidationError)
    async def _invalid(request: Request, exc: EventValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc), "errors": exc.errors})

    @app.exception_handler(UnknownSubproblemError)
    async def _unknown(request: Request, exc: UnknownSubproblemError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    return app
