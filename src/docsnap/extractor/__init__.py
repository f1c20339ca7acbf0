"""Text Extractor module for docsnap.

Provides a backend-agnostic interface for turning a captured document
frame into text.

Public API:
    TextExtractor -- Abstract base class
    ExtractionError -- Raised when a backend fails
    TesseractExtractor -- Local Tesseract OCR implementation
    OpenAIExtractor -- OpenAI / OpenRouter vision implementation
"""

from docsnap.extractor.base import ExtractionError, TextExtractor

__all__ = ["TextExtractor", "ExtractionError", "TesseractExtractor", "OpenAIExtractor"]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations that require external deps."""
    if name == "TesseractExtractor":
        from docsnap.extractor.tesseract import TesseractExtractor
        return TesseractExtractor
    if name == "OpenAIExtractor":
        from docsnap.extractor.openai import OpenAIExtractor
        return OpenAIExtractor
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
