"""The motion-triggered capture state machine.

Owns the session's CaptureState and the previous-frame reference.
Each tick samples a frame, scores it against the previous one and
either keeps watching or fires exactly one capture, then cools down
and re-arms with the previous frame cleared.

    WATCHING --change detected--> CAPTURING --capture finished--> COOLDOWN
        ^                                                            |
        +----------------------- cooldown elapsed -------------------+
"""

from __future__ import annotations

import asyncio
import logging

from docsnap.capture.sampler import FrameSampler
from docsnap.domain.models import CaptureResult, CaptureState, Frame
from docsnap.watcher.change import frame_difference, same_dimensions
from docsnap.watcher.invoker import CaptureInvoker
from docsnap.watcher.reporter import (
    STATUS_PAPER_DETECTED,
    STATUS_WATCHING_NEXT,
    StatusReporter,
)
from docsnap.watcher.state import CaptureEvent, next_state, should_trigger

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 15.0
DEFAULT_COOLDOWN_DELAY = 3.0


class CaptureStateMachine:
    """Decides, tick by tick, when a new document has appeared.

    All mutation happens on the event loop thread, from ``tick()`` or
    from the re-arm callback, so no locking is needed.
    """

    def __init__(
        self,
        sampler: FrameSampler,
        invoker: CaptureInvoker,
        reporter: StatusReporter,
        threshold: float = DEFAULT_THRESHOLD,
        cooldown_delay: float = DEFAULT_COOLDOWN_DELAY,
        channel: int = 2,
        stride: int = 1,
    ) -> None:
        self._sampler = sampler
        self._invoker = invoker
        self._reporter = reporter
        self._threshold = threshold
        self._cooldown_delay = cooldown_delay
        self._channel = channel
        self._stride = stride

        self._state = CaptureState.WATCHING
        self._previous: Frame | None = None
        self._last_score = 0.0
        self._armed = asyncio.Event()
        self._armed.set()
        self._rearm_handle: asyncio.TimerHandle | None = None
        self._shut_down = False

        self._captures = 0
        self._failed_captures = 0

    @property
    def state(self) -> CaptureState:
        return self._state

    @property
    def previous_frame(self) -> Frame | None:
        return self._previous

    @property
    def last_score(self) -> float:
        return self._last_score

    @property
    def threshold(self) -> float:
        return self._threshold

    @property
    def is_armed(self) -> bool:
        return self._state is CaptureState.WATCHING

    @property
    def frames_sampled(self) -> int:
        return self._sampler.frames_sampled

    @property
    def captures(self) -> int:
        return self._captures

    @property
    def failed_captures(self) -> int:
        return self._failed_captures

    async def tick(self) -> CaptureState:
        """Run one sampling tick and return the resulting state."""
        if self._state is not CaptureState.WATCHING:
            logger.debug("Tick ignored while %s", self._state.value)
            return self._state

        frame = await self._sampler.sample()
        if frame is None:
            return self._state

        if self._previous is not None and not same_dimensions(frame, self._previous):
            logger.warning(
                "Source resolution changed from %dx%d to %dx%d, restarting comparison",
                self._previous.width, self._previous.height, frame.width, frame.height,
            )
            self._previous = None

        score = frame_difference(frame, self._previous, self._channel, self._stride)
        self._last_score = score

        if should_trigger(self._state, score, self._previous is not None, self._threshold):
            logger.info(
                "Change detected on frame %d (score=%.2f > %.2f)",
                frame.frame_number, score, self._threshold,
            )
            await self._capture(frame, score)
        else:
            self._previous = frame
        return self._state

    async def wait_armed(self) -> None:
        """Block until the machine is watching again (or shut down)."""
        await self._armed.wait()

    def rearm(self) -> None:
        """Leave cooldown and start watching for the next document."""
        self._rearm_handle = None
        self._transition(CaptureEvent.COOLDOWN_ELAPSED)
        self._previous = None
        self._sampler.resume()
        self._reporter.status(STATUS_WATCHING_NEXT)
        self._armed.set()

    def shutdown(self) -> None:
        """Cancel a pending re-arm and release anyone waiting on the machine."""
        self._shut_down = True
        if self._rearm_handle is not None:
            self._rearm_handle.cancel()
            self._rearm_handle = None
        self._armed.set()

    async def _capture(self, frame: Frame, score: float) -> CaptureResult | None:
        self._transition(CaptureEvent.CHANGE_DETECTED)
        self._sampler.pause()
        self._armed.clear()
        self._captures += 1
        self._reporter.status(STATUS_PAPER_DETECTED)

        result = None
        try:
            result = await self._invoker.invoke(frame, score)
        finally:
            if result is None or not result.succeeded:
                self._failed_captures += 1
            self._transition(CaptureEvent.CAPTURE_FINISHED)
            self._schedule_rearm()
        return result

    def _schedule_rearm(self) -> None:
        if self._shut_down:
            return
        loop = asyncio.get_running_loop()
        self._rearm_handle = loop.call_later(self._cooldown_delay, self.rearm)
        logger.debug("Re-arming in %.1fs", self._cooldown_delay)

    def _transition(self, event: CaptureEvent) -> None:
        new_state = next_state(self._state, event)
        logger.debug("%s --%s--> %s", self._state.value, event.value, new_state.value)
        self._state = new_state
