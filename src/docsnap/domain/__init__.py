"""Domain models for docsnap.

This package contains the core data structures and enumerations used
throughout the system. All models use Pydantic v2 for validation and
serialization.
"""

from docsnap.domain.models import (
    CaptureResult,
    CaptureState,
    CaptureStatus,
    Frame,
    WatchSession,
)

__all__ = [
    "CaptureResult",
    "CaptureState",
    "CaptureStatus",
    "Frame",
    "WatchSession",
]
