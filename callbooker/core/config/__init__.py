"""Configuration subpackage."""

from .settings import BookerSettings, get_settings, reset_settings

__all__ = ["BookerSettings", "get_settings", "reset_settings"]
