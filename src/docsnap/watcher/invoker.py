"""Hands a triggered frame to the text extractor and reports the outcome."""

from __future__ import annotations

import logging
import time
from datetime import datetime

from docsnap.domain.models import CaptureResult, CaptureStatus, Frame
from docsnap.extractor.base import TextExtractor
from docsnap.watcher.reporter import (
    STATUS_COMPLETE,
    STATUS_OCR_FAILED,
    STATUS_PROCESSING,
    StatusReporter,
)

logger = logging.getLogger(__name__)


class CaptureInvoker:
    """Runs one extraction per trigger.

    Any failure of the extractor is terminal for that capture: it comes
    back as a FAILED result and is never retried here.
    """

    def __init__(self, extractor: TextExtractor, reporter: StatusReporter) -> None:
        self._extractor = extractor
        self._reporter = reporter

    async def invoke(self, frame: Frame, score: float = 0.0) -> CaptureResult:
        started_at = datetime.now()
        start = time.monotonic()
        self._reporter.status(STATUS_PROCESSING)

        try:
            text = await self._extractor.extract(frame)
        except Exception as e:
            logger.error("Extraction of frame %d failed: %s", frame.frame_number, e)
            result = CaptureResult(
                status=CaptureStatus.FAILED,
                error=str(e) or type(e).__name__,
                frame_number=frame.frame_number,
                score=score,
                started_at=started_at,
                duration_seconds=time.monotonic() - start,
            )
            self._reporter.status(STATUS_OCR_FAILED.format(error=result.error))
            self._reporter.result(result)
            return result

        result = CaptureResult(
            status=CaptureStatus.COMPLETE,
            text=text,
            frame_number=frame.frame_number,
            score=score,
            started_at=started_at,
            duration_seconds=time.monotonic() - start,
        )
        logger.info(
            "Extracted %d characters from frame %d in %.2fs",
            len(text), frame.frame_number, result.duration_seconds,
        )
        self._reporter.text(text)
        self._reporter.status(STATUS_COMPLETE)
        self._reporter.result(result)
        return result
