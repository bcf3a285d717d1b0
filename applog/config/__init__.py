"""Configuration Package

Purpose: Environment-driven settings for the applog logging engine.
"""

from .settings import LogFormat, LogStream, LoggingSettings, get_settings, reset_settings

__all__ = [
    "LogFormat",
    "LogStream",
    "LoggingSettings",
    "get_settings",
    "reset_settings",
]
