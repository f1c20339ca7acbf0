"""Local OCR extractor using Tesseract.

Tesseract must be installed on the system:
  Ubuntu/Debian: sudo apt install tesseract-ocr
  macOS:         brew install tesseract
"""

from __future__ import annotations

import asyncio
import logging

import pytesseract

from docsnap.domain.models import Frame
from docsnap.extractor.base import ExtractionError, TextExtractor
from docsnap.utils.imaging import numpy_to_pil

logger = logging.getLogger(__name__)


class TesseractExtractor(TextExtractor):
    """Runs pytesseract on the captured frame in a worker thread."""

    backend = "tesseract"

    def __init__(self, language: str = "eng", tesseract_cmd: str | None = None) -> None:
        self._language = language
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    @property
    def language(self) -> str:
        return self._language

    async def extract(self, frame: Frame) -> str:
        loop = asyncio.get_running_loop()
        image = numpy_to_pil(frame.image)
        try:
            text = await loop.run_in_executor(
                None, lambda: pytesseract.image_to_string(image, lang=self._language)
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, OSError) as e:
            raise ExtractionError(f"Tesseract failed: {e}", backend=self.backend) from e
        logger.debug("Tesseract read %d characters from frame %d", len(text), frame.frame_number)
        return text.strip()

    async def health_check(self) -> bool:
        """Check that the tesseract binary can be found."""
        loop = asyncio.get_running_loop()
        try:
            version = await loop.run_in_executor(None, pytesseract.get_tesseract_version)
        except (pytesseract.TesseractNotFoundError, OSError) as e:
            logger.warning("Health check failed: %s", e)
            return False
        logger.info("Found tesseract %s", version)
        return True
