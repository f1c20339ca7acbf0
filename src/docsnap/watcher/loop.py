"""Watch loop orchestrator for a motion-triggered capture session."""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime

from docsnap.capture.base import CaptureError, CaptureSource
from docsnap.domain.models import WatchSession
from docsnap.watcher.machine import CaptureStateMachine
from docsnap.watcher.reporter import STATUS_CAMERA_ERROR, STATUS_CAMERA_READY, StatusReporter

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL = 1 / 30


class WatchLoop:
    """Drives the state machine one tick at a time until stopped.

    The capture device is opened once when the session starts and is
    released on every exit path. While the machine is capturing or
    cooling down the loop waits instead of ticking.
    """

    def __init__(
        self,
        capture: CaptureSource,
        machine: CaptureStateMachine,
        reporter: StatusReporter,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        max_consecutive_errors: int = 5,
    ) -> None:
        self._capture = capture
        self._machine = machine
        self._reporter = reporter
        self._tick_interval = tick_interval
        self._max_consecutive_errors = max_consecutive_errors
        self._stopped = False
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def stop(self) -> None:
        """Signal the watch loop to stop."""
        self._stopped = True
        self._machine.shutdown()
        logger.info("Watch loop stop requested")

    async def run(self, session_id: str | None = None) -> WatchSession:
        """Run the session until ``stop()`` or a fatal camera error.

        Args:
            session_id: Optional session identifier. Auto-generated if not provided.

        Returns:
            A WatchSession summarizing the run.
        """
        session_id = session_id or uuid.uuid4().hex[:12]
        started_at = datetime.now()
        error: str | None = None

        try:
            await self._capture.open()
        except CaptureError as e:
            logger.error("Could not open capture source: %s", e)
            self._reporter.status(STATUS_CAMERA_ERROR.format(error=e))
            return self._summary(session_id, started_at, error=str(e))

        logger.info("Watch session %s started", session_id)
        self._running = True
        try:
            self._reporter.status(STATUS_CAMERA_READY)
            error = await self._tick_forever()
        finally:
            self._running = False
            self._machine.shutdown()
            await self._capture.close()

        session = self._summary(session_id, started_at, error=error)
        logger.info(
            "Watch session %s finished: %d captures (%d failed), %d frames sampled",
            session_id, session.captures, session.failed_captures, session.frames_sampled,
        )
        return session

    async def _tick_forever(self) -> str | None:
        """Tick until stopped. Returns the fatal error message, if any."""
        consecutive_errors = 0
        while not self._stopped:
            await self._machine.wait_armed()
            if self._stopped:
                break

            try:
                await self._machine.tick()
                consecutive_errors = 0
            except asyncio.CancelledError:
                raise
            except Exception as e:
                consecutive_errors += 1
                logger.error(
                    "Error in watch loop (attempt %d/%d): %s",
                    consecutive_errors, self._max_consecutive_errors, e,
                )
                if consecutive_errors >= self._max_consecutive_errors:
                    logger.error("Too many consecutive errors, ending session")
                    message = str(e) or type(e).__name__
                    if isinstance(e, CaptureError):
                        self._reporter.status(STATUS_CAMERA_ERROR.format(error=message))
                    else:
                        self._reporter.status(f"Session error: {message}")
                    return message

            await asyncio.sleep(self._tick_interval)
        return None

    def _summary(self, session_id: str, started_at: datetime, error: str | None) -> WatchSession:
        ended_at = datetime.now()
        duration = (ended_at - started_at).total_seconds() / 60.0
        return WatchSession(
            session_id=session_id,
            started_at=started_at,
            ended_at=ended_at,
            duration_minutes=round(duration, 2),
            frames_sampled=self._machine.frames_sampled,
            captures=self._machine.captures,
            failed_captures=self._machine.failed_captures,
            error=error,
        )
