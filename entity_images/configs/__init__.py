"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from entity_images.configs.images import FileConfig, ImageSettings, RuleConfig
from entity_images.configs.settings import Settings, get_settings

__all__ = ["FileConfig", "ImageSettings", "RuleConfig", "Settings", "get_settings"]
