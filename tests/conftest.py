"""Shared test fixtures for the docsnap test suite.

Provides common fixtures used across unit tests: frame factories, a
scripted fake capture source, a recording status reporter, and a mock
extractor.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable
from unittest.mock import AsyncMock

import numpy as np
import pytest

from docsnap.capture.base import CaptureError, CaptureSource
from docsnap.domain.models import CaptureResult, Frame
from docsnap.watcher.reporter import StatusReporter


# ---------------------------------------------------------------------------
# Frame / Image Fixtures
# ---------------------------------------------------------------------------


def _solid_image(value: int, width: int = 8, height: int = 6) -> np.ndarray:
    """A BGR image whose red channel is ``value`` and the rest zero."""
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[:, :, 2] = value
    return image


@pytest.fixture
def solid_image() -> Callable[..., np.ndarray]:
    """Factory for uniform test images keyed by their red-channel value."""
    return _solid_image


@pytest.fixture
def make_frame() -> Callable[..., Frame]:
    """Factory for Frames whose red channel is filled with one value."""

    def _make(value: int, frame_number: int = 0, width: int = 8, height: int = 6) -> Frame:
        return Frame(
            image=_solid_image(value, width, height),
            timestamp=datetime(2025, 1, 1, 12, 0, 0),
            frame_number=frame_number,
            source_device="test",
        )

    return _make


@pytest.fixture
def sample_frame(make_frame: Callable[..., Frame]) -> Frame:
    """A black 8x6 frame."""
    return make_frame(0)


# ---------------------------------------------------------------------------
# Capture Source Fixtures
# ---------------------------------------------------------------------------


class ScriptedCapture(CaptureSource):
    """A fake source that plays back a list of script entries, one per tick.

    Entries are numpy images, ``None`` (the source reports a zero frame
    size for that tick), or an exception instance (raised from
    ``grab()``). The last entry repeats once the script runs out.
    """

    def __init__(self, script: list, fail_open: bool = False) -> None:
        super().__init__()
        self._script = list(script)
        self._index = 0
        self._fail_open = fail_open
        self.open_calls = 0
        self.close_calls = 0
        self.grab_calls = 0

    @property
    def device_name(self) -> str:
        return "scripted"

    @property
    def frame_size(self) -> tuple[int, int]:
        item = self._current()
        if item is None:
            # A not-ready tick never reaches grab(), so consume it here.
            self._advance()
            return 0, 0
        if isinstance(item, Exception):
            return 8, 6
        return item.shape[1], item.shape[0]

    async def open(self) -> None:
        self.open_calls += 1
        if self._fail_open:
            raise CaptureError("Permission denied")
        self._is_open = True

    async def close(self) -> None:
        self.close_calls += 1
        self._is_open = False

    async def grab(self, buffer: np.ndarray | None = None) -> np.ndarray:
        self.grab_calls += 1
        item = self._current()
        self._advance()
        if isinstance(item, Exception):
            raise item
        if buffer is not None and buffer.shape == item.shape:
            buffer[...] = item
            return buffer
        return item.copy()

    def _current(self):
        if not self._script:
            return None
        return self._script[min(self._index, len(self._script) - 1)]

    def _advance(self) -> None:
        if self._index < len(self._script) - 1:
            self._index += 1


@pytest.fixture
def scripted_capture() -> Callable[..., ScriptedCapture]:
    """Factory for ScriptedCapture sources."""
    return ScriptedCapture


# ---------------------------------------------------------------------------
# Reporter / Extractor Fixtures
# ---------------------------------------------------------------------------


class RecordingReporter(StatusReporter):
    """Collects every notification for assertions."""

    def __init__(self) -> None:
        self.statuses: list[str] = []
        self.texts: list[str] = []
        self.results: list[CaptureResult] = []

    def status(self, message: str) -> None:
        self.statuses.append(message)

    def text(self, text: str) -> None:
        self.texts.append(text)

    def result(self, result: CaptureResult) -> None:
        self.results.append(result)


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def mock_extractor() -> AsyncMock:
    """A mock TextExtractor that returns fixed text."""
    mock = AsyncMock()
    mock.backend = "mock"
    mock.extract.return_value = "INVOICE #42"
    mock.health_check.return_value = True
    return mock
