"""Tests for the command-line interface."""

from __future__ import annotations

from pathlib import Path

from pydantic import SecretStr

from docsnap.cli import _build_extractor, parse_args
from docsnap.config.settings import Settings
from docsnap.extractor.openai import OpenAIExtractor
from docsnap.extractor.tesseract import TesseractExtractor


class TestParseArgs:
    def test_watch_options(self) -> None:
        args = parse_args(["-v", "watch", "--serve", "--threshold", "20", "--cooldown", "1.5"])
        assert args.verbose
        assert args.command == "watch"
        assert args.serve
        assert args.threshold == 20.0
        assert args.cooldown == 1.5

    def test_watch_defaults(self) -> None:
        args = parse_args(["watch"])
        assert not args.serve
        assert args.threshold is None
        assert args.cooldown is None

    def test_extract_and_capture_test(self) -> None:
        assert parse_args(["extract", "page.png"]).image == Path("page.png")
        assert parse_args(["capture-test"]).output == Path("capture_test.png")

    def test_no_command(self) -> None:
        assert parse_args([]).command is None


class TestBuildExtractor:
    def test_tesseract_backend(self) -> None:
        settings = Settings()
        assert isinstance(_build_extractor(settings), TesseractExtractor)

    def test_openai_backend(self) -> None:
        settings = Settings(openai_api_key=SecretStr("sk-1"))
        settings.extractor.backend = "openai"
        extractor = _build_extractor(settings)
        assert isinstance(extractor, OpenAIExtractor)
        assert extractor._api_key == "sk-1"
        assert extractor._base_url is None

    def test_openrouter_key_wins(self) -> None:
        settings = Settings(openai_api_key=SecretStr("sk-1"), openrouter_api_key=SecretStr("or-2"))
        settings.extractor.backend = "openai"
        extractor = _build_extractor(settings)
        assert extractor._api_key == "or-2"
        assert extractor._base_url == "https://openrouter.ai/api/v1"
