"""Image processing utilities for docsnap.

Shared image encoding and conversion functions used by the capture
command and the extractor backends.
"""

from __future__ import annotations

import base64
import logging

import cv2
import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


def numpy_to_base64_png(image: np.ndarray) -> str:
    """Convert a numpy image array (BGR, OpenCV format) to base64 PNG."""
    success, buffer = cv2.imencode(".png", image)
    if not success:
        raise ValueError("Failed to encode image to PNG")
    return base64.b64encode(buffer.tobytes()).decode("utf-8")


def numpy_to_pil(image: np.ndarray) -> Image.Image:
    """Convert a numpy image array (BGR or grayscale) to a PIL Image."""
    if image.ndim == 2:
        return Image.fromarray(image)
    rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
    return Image.fromarray(rgb)


def fit_for_vision_model(
    image: np.ndarray,
    longest_side: int = 1568,
    shortest_longest_side: int = 1024,
) -> np.ndarray:
    """Scale a document photo so its longest side lies in the given band.

    Large photos are shrunk to keep the request small; small ones are
    enlarged so printed text stays legible to the model.
    """
    h, w = image.shape[:2]
    largest = max(h, w)
    target = min(max(largest, shortest_longest_side), longest_side)
    if target == largest:
        return image

    scale = target / largest
    interpolation = cv2.INTER_AREA if scale < 1 else cv2.INTER_CUBIC
    size = (max(1, round(w * scale)), max(1, round(h * scale)))
    return cv2.resize(image, size, interpolation=interpolation)
