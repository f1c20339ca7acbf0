"""Configuration management for docsnap.

Loads settings from a YAML configuration file with environment variable
overrides for sensitive values (API keys). Supports .env files.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal, Mapping

import yaml
from dotenv import dotenv_values
from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/docsnap.yaml")


class CaptureConfig(BaseModel):
    device: int | str = Field(default=0, description="OpenCV camera index, video file path or stream URL")
    resolution_width: int | None = Field(default=None, gt=0)
    resolution_height: int | None = Field(default=None, gt=0)
    tick_interval: float = Field(default=1 / 30, gt=0, description="Seconds between sampling ticks")
    max_consecutive_errors: int = Field(default=5, gt=0)


class DetectionConfig(BaseModel):
    threshold: float = Field(default=15.0, ge=0, description="Difference score that triggers a capture")
    cooldown_delay: float = Field(default=3.0, ge=0, description="Seconds before re-arming after a capture")
    channel: int = Field(default=2, ge=0, le=2, description="BGR channel compared between frames (2 is red)")
    stride: int = Field(default=1, ge=1, description="Compare every Nth row and column")


class ExtractorConfig(BaseModel):
    backend: Literal["tesseract", "openai"] = Field(default="tesseract")
    language: str = Field(default="eng", description="Tesseract language code")
    tesseract_cmd: str | None = Field(default=None, description="Path to the tesseract binary")
    model: str = Field(default="gpt-4o")
    base_url: str | None = Field(default=None)
    max_tokens: int = Field(default=2048, gt=0)


class EndpointConfig(BaseModel):
    enabled: bool = Field(default=False)
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8080, ge=1, le=65535)
    history_size: int = Field(default=50, gt=0)


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for the docsnap system.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "DOCSNAP_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    # API Keys
    openai_api_key: SecretStr = Field(default=SecretStr(""))
    openrouter_api_key: SecretStr = Field(default=SecretStr(""))

    # Configuration sections
    capture: CaptureConfig = Field(default_factory=CaptureConfig)
    detection: DetectionConfig = Field(default_factory=DetectionConfig)
    extractor: ExtractorConfig = Field(default_factory=ExtractorConfig)
    endpoint: EndpointConfig = Field(default_factory=EndpointConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # load_settings() passes the YAML file as init kwargs; the
        # environment must still win over it, nested keys merged.
        return env_settings, dotenv_settings, init_settings, file_secret_settings


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: env vars > .env file > YAML file > defaults. Prefixed
    ``DOCSNAP_*`` variables are handled by pydantic-settings itself;
    the unprefixed OpenRouter variables are mapped in here.
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    data: dict = {}
    if path.exists():
        data = yaml.safe_load(path.read_text()) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.warning("Config file %s not found, using defaults + env vars", path)

    env = {**dotenv_values(".env"), **os.environ}
    _apply_openrouter_env(data, env)
    return Settings(**data)


def _apply_openrouter_env(data: dict, env: Mapping[str, str | None]) -> None:
    """Map the unprefixed OpenRouter variables onto the settings tree.

    Values already present in the YAML file win over the environment,
    except for the API key.
    """
    api_key = env.get("OPENROUTER_API_KEY")
    if api_key:
        data["openrouter_api_key"] = api_key

    extractor = data.setdefault("extractor", {})
    for var, field in (("OPENROUTER_BASE_URL", "base_url"), ("VISION_MODEL", "model")):
        value = env.get(var)
        if value and not extractor.get(field):
            extractor[field] = value
