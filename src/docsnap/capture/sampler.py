"""Per-tick frame sampling from a live capture source."""

from __future__ import annotations

import logging
from datetime import datetime

import numpy as np

from docsnap.capture.base import CaptureSource
from docsnap.domain.models import Frame

logger = logging.getLogger(__name__)


class FrameSampler:
    """Pulls the current frame from a capture source on demand.

    Keeps one scratch buffer sized to the source's current dimensions
    and hands out read-only copies of it, so a sampled frame is never
    mutated by a later read.

    The sampler can be paused. The capture state machine pauses it for
    the whole capture and cooldown window, and sampling while paused is
    treated as a programming error.
    """

    def __init__(self, source: CaptureSource) -> None:
        self._source = source
        self._scratch: np.ndarray | None = None
        self._frame_counter: int = 0
        self._paused: bool = False

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def frames_sampled(self) -> int:
        return self._frame_counter

    def pause(self) -> None:
        self._paused = True
        logger.debug("Sampler paused")

    def resume(self) -> None:
        self._paused = False
        logger.debug("Sampler resumed")

    async def sample(self) -> Frame | None:
        """Sample the source's current frame.

        Returns:
            A new Frame, or None when the source reports a zero width or
            height (not ready yet). The caller retries on the next tick.

        Raises:
            RuntimeError: If the sampler is paused.
            CaptureError: If the source fails to read.
        """
        if self._paused:
            raise RuntimeError("Frame sampler is paused")

        width, height = self._source.frame_size
        if width == 0 or height == 0:
            logger.debug("Source not ready (%dx%d), skipping tick", width, height)
            return None

        self._ensure_scratch(width, height)
        image = await self._source.grab(self._scratch)
        if image is self._scratch:
            image = image.copy()
        else:
            # Source could not decode into the scratch buffer (e.g. the
            # reported size was stale); adopt whatever shape it produced.
            image = np.array(image, dtype=np.uint8, copy=True)
        image.setflags(write=False)

        frame = Frame(
            image=image,
            timestamp=datetime.now(),
            frame_number=self._frame_counter,
            source_device=self._source.device_name,
        )
        self._frame_counter += 1
        return frame

    def _ensure_scratch(self, width: int, height: int) -> None:
        """Resize the scratch buffer when the source dimensions change."""
        shape = (height, width, 3)
        if self._scratch is None or self._scratch.shape != shape:
            logger.debug("Allocating %dx%d scratch buffer", width, height)
            self._scratch = np.zeros(shape, dtype=np.uint8)
