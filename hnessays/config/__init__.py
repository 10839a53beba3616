"""Configuration module -- exports Settings and load_settings."""

from hnessays.config.loader import load_settings
from hnessays.config.settings import Settings

__all__ = ["Settings", "load_settings"]
