"""Configuration module: exports Settings and load_settings."""

from codechunk.config.loader import load_settings
from codechunk.config.settings import Settings

__all__ = ["Settings", "load_settings"]
