"""Utility modules for the Git provider API."""

from .logger import get_logger, LoggerSetup

__all__ = [
    "get_logger",
    "LoggerSetup",
]
