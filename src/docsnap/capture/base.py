"""Abstract base class for live video sources.

All capture implementations must conform to this interface, enabling
the watch session to swap between a webcam, a video file, or a fake
test source without changing the rest of the pipeline.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import numpy as np

logger = logging.getLogger(__name__)


class CaptureSource(ABC):
    """Abstract interface for a live visual source.

    The source is acquired once per session and released when the
    session ends. Frames are pulled on demand into a caller-owned
    buffer, so the sampler controls allocation.

    Example usage::

        async with WebcamCapture(device=0) as source:
            width, height = source.frame_size
            image = await source.grab()
    """

    def __init__(self) -> None:
        self._is_open: bool = False

    @property
    def is_open(self) -> bool:
        """Whether the capture device is currently open and ready."""
        return self._is_open

    @property
    def device_name(self) -> str:
        """Identifier recorded on every frame taken from this source."""
        return type(self).__name__

    @property
    @abstractmethod
    def frame_size(self) -> tuple[int, int]:
        """Current presentation size as ``(width, height)``.

        Either dimension may be zero while the source is warming up or
        closed. Callers treat that as "not ready yet", not as an error.
        """
        ...

    @abstractmethod
    async def open(self) -> None:
        """Open and initialize the capture device.

        Raises:
            CaptureError: If the device cannot be opened (missing device,
                permission denied).
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the capture device. Safe to call multiple times."""
        ...

    @abstractmethod
    async def grab(self, buffer: np.ndarray | None = None) -> np.ndarray:
        """Read the current visual content.

        Args:
            buffer: Optional scratch array of shape ``(height, width, 3)``
                to decode into. Implementations may return a different
                array if the buffer cannot be used.

        Returns:
            The image as a uint8 BGR array.

        Raises:
            CaptureError: If the read fails.
        """
        ...

    async def __aenter__(self) -> CaptureSource:
        """Async context manager entry -- opens the capture device."""
        await self.open()
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        """Async context manager exit -- closes the capture device."""
        await self.close()


class CaptureError(Exception):
    """Raised when the capture device cannot be opened or read."""
