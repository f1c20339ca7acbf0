"""Webcam capture implementation using OpenCV.

Reads frames from a local camera device. Anything else
``cv2.VideoCapture`` accepts (a video file path, an RTSP URL) works
too, which is handy for replaying a recorded session.
"""

from __future__ import annotations

import asyncio
import logging

import cv2
import numpy as np

from docsnap.capture.base import CaptureError, CaptureSource

logger = logging.getLogger(__name__)


class WebcamCapture(CaptureSource):
    """Captures frames from a webcam using OpenCV.

    Runs OpenCV's blocking calls in a thread pool executor to avoid
    blocking the async event loop.
    """

    def __init__(
        self,
        device: int | str = 0,
        resolution: tuple[int, int] | None = None,
    ) -> None:
        super().__init__()
        self._device = device
        self._resolution = resolution
        self._cap: cv2.VideoCapture | None = None

    @property
    def device_name(self) -> str:
        return f"webcam:{self._device}"

    @property
    def frame_size(self) -> tuple[int, int]:
        if not self._is_open or self._cap is None:
            return 0, 0
        width = int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        height = int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        return width, height

    async def open(self) -> None:
        """Open the webcam device."""
        loop = asyncio.get_running_loop()
        self._cap = await loop.run_in_executor(None, cv2.VideoCapture, self._device)
        if not self._cap.isOpened():
            self._cap = None
            raise CaptureError(f"Failed to open camera device {self._device}")
        if self._resolution:
            w, h = self._resolution
            self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, w)
            self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, h)
        self._is_open = True
        actual_w, actual_h = self.frame_size
        logger.info("Opened camera device %s (%dx%d)", self._device, actual_w, actual_h)

    async def close(self) -> None:
        """Release the webcam device."""
        if self._cap is not None and self._cap.isOpened():
            self._cap.release()
            logger.info("Released camera device %s", self._device)
        self._cap = None
        self._is_open = False

    async def grab(self, buffer: np.ndarray | None = None) -> np.ndarray:
        """Read the current frame from the webcam."""
        if not self._is_open or self._cap is None:
            raise CaptureError("Camera is not open")
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._read_sync, buffer)

    def _read_sync(self, buffer: np.ndarray | None) -> np.ndarray:
        """Synchronous frame read (runs in thread pool)."""
        if buffer is not None:
            ret, frame = self._cap.read(buffer)
        else:
            ret, frame = self._cap.read()
        if not ret or frame is None:
            raise CaptureError(f"Failed to read frame from camera device {self._device}")
        return frame
