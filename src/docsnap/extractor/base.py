"""Abstract base class for text extraction backends.

All extractor implementations must conform to this interface, enabling
the capture invoker to swap between local OCR and a vision model
without changing the rest of the pipeline.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from docsnap.domain.models import Frame

logger = logging.getLogger(__name__)


class TextExtractor(ABC):
    """Abstract interface for turning a captured frame into text.

    Extraction may take several seconds. Implementations must not block
    the event loop while they work.
    """

    backend: str = "unknown"

    @abstractmethod
    async def extract(self, frame: Frame) -> str:
        """Extract the text visible in a captured frame.

        Raises:
            ExtractionError: If the backend fails.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the backend is installed / reachable."""
        ...


class ExtractionError(Exception):
    """Raised when text extraction fails."""

    def __init__(self, message: str, backend: str = "", raw_response: str = "") -> None:
        super().__init__(message)
        self.backend = backend
        self.raw_response = raw_response
