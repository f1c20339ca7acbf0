"""Frame change detection.

Provides a cheap local difference score used to decide when a new
document has entered the frame. Only one channel is inspected: the
trigger needs a signal for "something changed a lot", not a
perceptual comparison.
"""

from __future__ import annotations

import numpy as np

from docsnap.domain.models import Frame


def frame_difference(
    current: Frame,
    previous: Frame | None,
    channel: int = 2,
    stride: int = 1,
) -> float:
    """Mean absolute difference of one channel between two frames.

    Args:
        current: The frame sampled this tick.
        previous: The frame sampled on the previous tick, or None right
            after a session start or re-arm.
        channel: Channel index to compare (2 is red in OpenCV's BGR
            order). Ignored for single-channel images.
        stride: Compare every ``stride``-th row and column only.

    Returns:
        Score on the 0-255 scale. 0.0 when ``previous`` is None.

    Raises:
        ValueError: If the frames have different dimensions.
    """
    if previous is None:
        return 0.0
    if not same_dimensions(current, previous):
        raise ValueError(
            f"Cannot compare frames of different sizes: "
            f"{current.width}x{current.height} vs {previous.width}x{previous.height}"
        )
    if stride < 1:
        raise ValueError(f"stride must be >= 1, got {stride}")

    a = _channel_plane(current.image, channel)[::stride, ::stride]
    b = _channel_plane(previous.image, channel)[::stride, ::stride]
    diff = np.abs(a.astype(np.int16) - b.astype(np.int16))
    return float(diff.mean())


def _channel_plane(image: np.ndarray, channel: int) -> np.ndarray:
    if image.ndim == 2:
        return image
    return image[:, :, channel]


def same_dimensions(a: Frame, b: Frame) -> bool:
    """True when two frames can be compared pixel for pixel."""
    return a.image.shape[:2] == b.image.shape[:2]
