"""Status sinks for a watch session.

The state machine and capture invoker push human-readable status
strings, extracted text, and capture results into a StatusReporter.
Delivery is fire-and-forget; reporters never acknowledge.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import deque
from datetime import datetime

from pydantic import BaseModel, Field

from docsnap.domain.models import CaptureResult

logger = logging.getLogger(__name__)

STATUS_CAMERA_READY = "Camera ready. Watching for paper…"
STATUS_PAPER_DETECTED = "Paper detected! Capturing…"
STATUS_PROCESSING = "Processing OCR… Please wait."
STATUS_COMPLETE = "OCR complete."
STATUS_WATCHING_NEXT = "Watching for next paper…"
STATUS_CAMERA_ERROR = "Camera error: {error}"
STATUS_OCR_FAILED = "OCR failed: {error}"


class StatusReporter(ABC):
    """Sink for session status transitions and extraction output."""

    @abstractmethod
    def status(self, message: str) -> None:
        """Receive a status transition message."""
        ...

    @abstractmethod
    def text(self, text: str) -> None:
        """Receive the text extracted by a completed capture."""
        ...

    def result(self, result: CaptureResult) -> None:
        """Receive the final result of a capture. Optional for sinks."""


class ConsoleStatusReporter(StatusReporter):
    """Prints status lines and extracted text to stdout."""

    def status(self, message: str) -> None:
        ts = datetime.now().strftime("%H:%M:%S")
        print(f"[{ts}] {message}")

    def text(self, text: str) -> None:
        print("-" * 40)
        print(text if text.strip() else "(no text found)")
        print("-" * 40)

    def result(self, result: CaptureResult) -> None:
        if result.succeeded:
            print(f"  Captured frame {result.frame_number} in {result.duration_seconds:.1f}s")


class StatusEntry(BaseModel):
    message: str
    timestamp: datetime = Field(default_factory=datetime.now)


class StatusBoard(StatusReporter):
    """Keeps the latest status and text in memory.

    Backs the HTTP status endpoint. History is bounded so a long
    session does not grow without limit.
    """

    def __init__(self, history_size: int = 50) -> None:
        self._history: deque[StatusEntry] = deque(maxlen=history_size)
        self._text: str | None = None
        self._captures = 0
        self._failed_captures = 0

    @property
    def latest_status(self) -> str | None:
        return self._history[-1].message if self._history else None

    @property
    def latest_text(self) -> str | None:
        return self._text

    @property
    def history(self) -> list[StatusEntry]:
        return list(self._history)

    @property
    def captures(self) -> int:
        return self._captures

    @property
    def failed_captures(self) -> int:
        return self._failed_captures

    def status(self, message: str) -> None:
        self._history.append(StatusEntry(message=message))

    def text(self, text: str) -> None:
        self._text = text

    def result(self, result: CaptureResult) -> None:
        self._captures += 1
        if not result.succeeded:
            self._failed_captures += 1


class FanOutReporter(StatusReporter):
    """Broadcasts every notification to several reporters.

    A failing sink is logged and skipped so the others still receive
    the notification.
    """

    def __init__(self, *reporters: StatusReporter) -> None:
        self._reporters = list(reporters)

    def status(self, message: str) -> None:
        self._broadcast("status", message)

    def text(self, text: str) -> None:
        self._broadcast("text", text)

    def result(self, result: CaptureResult) -> None:
        self._broadcast("result", result)

    def _broadcast(self, method: str, payload: object) -> None:
        for reporter in self._reporters:
            try:
                getattr(reporter, method)(payload)
            except Exception as e:
                logger.error("Reporter %s failed on %s: %s", type(reporter).__name__, method, e)
