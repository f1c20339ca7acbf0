"""FastAPI HTTP server exposing the state of a watch session.

Serves the latest status message and extracted text from a StatusBoard
so another device (or a browser) can follow the session. It renders
nothing itself.
"""

from __future__ import annotations

import logging
from datetime import datetime

import uvicorn
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from docsnap.domain.models import CaptureState
from docsnap.watcher.machine import CaptureStateMachine
from docsnap.watcher.reporter import StatusBoard, StatusEntry

logger = logging.getLogger(__name__)


class EndpointStatus(BaseModel):
    status: str = "ok"
    session_active: bool = False


class SessionStatus(BaseModel):
    state: CaptureState | None = Field(default=None, description="Current capture state, if a machine is attached")
    last_score: float | None = None
    status: str | None = Field(default=None, description="Most recent status message")
    text: str | None = Field(default=None, description="Most recently extracted text")
    captures: int = 0
    failed_captures: int = 0
    history: list[StatusEntry] = Field(default_factory=list)


class ExtractedText(BaseModel):
    text: str
    retrieved_at: datetime = Field(default_factory=datetime.now)


def create_app(board: StatusBoard, machine: CaptureStateMachine | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="docsnap Status",
        description="Read-only status endpoint for a docsnap watch session",
        version="0.1.0",
    )
    app.state.board = board
    app.state.machine = machine

    @app.get("/health")
    async def health_check() -> EndpointStatus:
        return EndpointStatus(status="ok", session_active=app.state.machine is not None)

    @app.get("/status")
    async def get_status() -> SessionStatus:
        b: StatusBoard = app.state.board
        m: CaptureStateMachine | None = app.state.machine
        return SessionStatus(
            state=m.state if m is not None else None,
            last_score=m.last_score if m is not None else None,
            status=b.latest_status,
            text=b.latest_text,
            captures=b.captures,
            failed_captures=b.failed_captures,
            history=b.history,
        )

    @app.get("/text")
    async def get_text() -> ExtractedText:
        b: StatusBoard = app.state.board
        if b.latest_text is None:
            raise HTTPException(status_code=404, detail="No text extracted yet")
        return ExtractedText(text=b.latest_text)

    return app


def build_server(app: FastAPI, host: str = "127.0.0.1", port: int = 8080) -> uvicorn.Server:
    """Build a uvicorn server that can run as a task beside the watch loop."""
    config = uvicorn.Config(app, host=host, port=port, log_level="warning")
    server = uvicorn.Server(config)
    logger.info("Status endpoint configured on http://%s:%d", host, port)
    return server
