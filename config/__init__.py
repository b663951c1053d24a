"""Configuration module for the lending risk engine."""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
