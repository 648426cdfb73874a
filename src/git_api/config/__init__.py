"""Configuration management module."""

from .settings import (
    Settings,
    AppConfig,
    HttpConfig,
    RetryConfig,
    GitConfig,
    LoggingConfig,
    get_settings,
    reload_settings,
)

__all__ = [
    "Settings",
    "AppConfig",
    "HttpConfig",
    "RetryConfig",
    "GitConfig",
    "LoggingConfig",
    "get_settings",
    "reload_settings",
]
