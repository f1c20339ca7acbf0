"""Vision Capture module for docsnap.

Provides live frame acquisition and per-tick sampling. The abstract
base class allows alternative sources (video files, fakes in tests).

Public API:
    CaptureSource -- Abstract base class
    CaptureError -- Raised on device open/read failure
    FrameSampler -- Per-tick sampler with a pausable state
    WebcamCapture -- OpenCV webcam implementation
"""

from docsnap.capture.base import CaptureError, CaptureSource
from docsnap.capture.sampler import FrameSampler

__all__ = ["CaptureSource", "CaptureError", "FrameSampler", "WebcamCapture"]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations that require external deps."""
    if name == "WebcamCapture":
        from docsnap.capture.webcam import WebcamCapture
        return WebcamCapture
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
