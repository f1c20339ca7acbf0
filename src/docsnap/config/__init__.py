"""Configuration management for docsnap.

Loads and validates YAML-based configuration with Pydantic models.
Supports environment variable overrides for sensitive values like
API keys.
"""

from docsnap.config.settings import Settings, load_settings

__all__ = ["Settings", "load_settings"]
