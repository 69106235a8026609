"""Configuration module for CampusHub."""

from campushub.config.settings import SearchConfig, Settings, get_settings

__all__ = ["SearchConfig", "Settings", "get_settings"]
