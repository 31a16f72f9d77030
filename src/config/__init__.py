"""Configuration loading."""

from .config_manager import Config, ConfigManager

__all__ = ["Config", "ConfigManager"]
