"""Core domain models for the docsnap system.

These models represent the data flowing through a watch session:
sampled frames from the camera, the capture state of the session,
and the outcome of each triggered text extraction.
"""

from __future__ import annotations

import enum
from datetime import datetime

import numpy as np
from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class CaptureState(str, enum.Enum):
    """Lifecycle state of the motion-triggered capture session."""

    WATCHING = "watching"  # Sampling frames, armed to trigger
    CAPTURING = "capturing"  # Extraction in flight, sampling paused
    COOLDOWN = "cooldown"  # Waiting to re-arm after a capture


class CaptureStatus(str, enum.Enum):
    """Terminal outcome of a single triggered capture."""

    COMPLETE = "complete"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Vision / Capture Models
# ---------------------------------------------------------------------------


class Frame(BaseModel):
    """A single frame sampled from the video source.

    The image is kept at full color fidelity so the same frame can be
    handed to the text extractor when it triggers a capture. Change
    detection only looks at one channel of it.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    image: np.ndarray = Field(description="Pixel data as a uint8 numpy array (BGR, OpenCV format)")
    timestamp: datetime = Field(default_factory=datetime.now, description="When the frame was sampled")
    frame_number: int = Field(ge=0, description="Sequential sample counter")
    source_device: str = Field(default="webcam", description="Identifier for the capture device")

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        return int(self.image.shape[0])

    @property
    def pixel_count(self) -> int:
        return self.width * self.height


# ---------------------------------------------------------------------------
# Capture Outcome Models
# ---------------------------------------------------------------------------


class CaptureResult(BaseModel):
    """The outcome of one triggered capture-and-extract operation."""

    model_config = ConfigDict(frozen=True)

    status: CaptureStatus
    text: str | None = Field(default=None, description="Extracted text, None when the capture failed")
    error: str | None = Field(default=None, description="Failure description, None on success")
    frame_number: int = Field(ge=0, description="Which sampled frame was captured")
    score: float = Field(default=0.0, ge=0.0, description="Difference score that triggered the capture")
    started_at: datetime = Field(default_factory=datetime.now)
    duration_seconds: float = Field(default=0.0, ge=0.0)

    @property
    def succeeded(self) -> bool:
        return self.status is CaptureStatus.COMPLETE


class WatchSession(BaseModel):
    """Summary of a complete watch session."""

    session_id: str
    started_at: datetime
    ended_at: datetime | None = None
    duration_minutes: float = 0.0
    frames_sampled: int = 0
    captures: int = 0
    failed_captures: int = 0
    error: str | None = Field(
        default=None,
        description="Fatal error that ended the session, e.g. the camera could not be opened",
    )
