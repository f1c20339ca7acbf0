"""Tests for the TesseractExtractor (pytesseract mocked)."""

from __future__ import annotations

from unittest.mock import patch

import pytesseract
import pytest
from PIL import Image

from docsnap.extractor.base import ExtractionError
from docsnap.extractor.tesseract import TesseractExtractor


class TestTesseractExtractor:
    def test_defaults(self) -> None:
        assert TesseractExtractor().language == "eng"

    def test_custom_binary_path(self) -> None:
        original = pytesseract.pytesseract.tesseract_cmd
        try:
            TesseractExtractor(tesseract_cmd="/opt/tesseract/bin/tesseract")
            assert pytesseract.pytesseract.tesseract_cmd == "/opt/tesseract/bin/tesseract"
        finally:
            pytesseract.pytesseract.tesseract_cmd = original

    @pytest.mark.asyncio
    async def test_extract_passes_rgb_image_and_language(self, make_frame) -> None:
        with patch(
            "docsnap.extractor.tesseract.pytesseract.image_to_string",
            return_value="  Hello\nWorld \n",
        ) as ocr:
            text = await TesseractExtractor(language="deu").extract(make_frame(30))

        assert text == "Hello\nWorld"
        image = ocr.call_args.args[0]
        assert isinstance(image, Image.Image)
        assert image.mode == "RGB"
        assert ocr.call_args.kwargs["lang"] == "deu"

    @pytest.mark.asyncio
    async def test_tesseract_error_is_wrapped(self, make_frame) -> None:
        with patch(
            "docsnap.extractor.tesseract.pytesseract.image_to_string",
            side_effect=pytesseract.TesseractError(1, "bad image"),
        ):
            with pytest.raises(ExtractionError, match="Tesseract failed") as excinfo:
                await TesseractExtractor().extract(make_frame(0))
        assert excinfo.value.backend == "tesseract"

    @pytest.mark.asyncio
    async def test_missing_binary_is_wrapped(self, make_frame) -> None:
        with patch(
            "docsnap.extractor.tesseract.pytesseract.image_to_string",
            side_effect=pytesseract.TesseractNotFoundError(),
        ):
            with pytest.raises(ExtractionError):
                await TesseractExtractor().extract(make_frame(0))

    @pytest.mark.asyncio
    async def test_health_check(self) -> None:
        with patch(
            "docsnap.extractor.tesseract.pytesseract.get_tesseract_version",
            return_value="5.3.0",
        ):
            assert await TesseractExtractor().health_check() is True
        with patch(
            "docsnap.extractor.tesseract.pytesseract.get_tesseract_version",
            side_effect=pytesseract.TesseractNotFoundError(),
        ):
            assert await TesseractExtractor().health_check() is False
