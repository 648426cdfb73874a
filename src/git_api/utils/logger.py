"""
Logging utilities for the Git provider API.
"""
import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Optional

from git_api.config import get_settings


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds colors to console output."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        formatted = super().format(record)

        if getattr(record, 'console_output', False):
            color = self.COLORS.get(record.levelname, '')
            return f"{color}{formatted}{self.RESET}"

        return formatted


class _ConsoleFilter(logging.Filter):
    """Marks records headed for the console so they get coloured."""

    def filter(self, record):
        record.console_output = True
        return True


class LoggerSetup:
    """Handles logger setup and configuration."""

    _loggers_configured = False
    _file_handler = None
    _console_handler = None

    @classmethod
    def setup_logging(cls, force_reconfigure: bool = False) -> None:
        """Set up logging configuration based on settings."""
        if cls._loggers_configured and not force_reconfigure:
            return

        settings = get_settings()

        log_file_path = Path(settings.logging.file)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)

        root_logger = logging.getLogger()

        if force_reconfigure:
            for handler in (cls._file_handler, cls._console_handler):
                if handler is not None:
                    root_logger.removeHandler(handler)
                    handler.close()
            cls._file_handler = None
            cls._console_handler = None

        log_level = getattr(logging, settings.app.log_level.upper(), logging.INFO)
        root_logger.setLevel(log_level)

        file_formatter = logging.Formatter(
            fmt=settings.logging.format,
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        console_formatter = ColoredFormatter(
            fmt='%(levelname)-8s | %(name)-20s | %(message)s',
            datefmt='%H:%M:%S'
        )

        if cls._file_handler is None:
            cls._file_handler = logging.handlers.RotatingFileHandler(
                filename=settings.logging.file,
                maxBytes=settings.logging.max_size_mb * 1024 * 1024,
                backupCount=settings.logging.backup_count,
                encoding='utf-8'
            )
            cls._file_handler.setFormatter(file_formatter)
            cls._file_handler.setLevel(log_level)
            root_logger.addHandler(cls._file_handler)

        if cls._console_handler is None:
            cls._console_handler = logging.StreamHandler(sys.stderr)
            cls._console_handler.setFormatter(console_formatter)

            # Debug output on the console only when asked for
            verbose = settings.app.debug or os.getenv("VERBOSE_LOGGING") == "true"
            cls._console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
            cls._console_handler.addFilter(_ConsoleFilter())
            root_logger.addHandler(cls._console_handler)

        cls._setup_third_party_loggers(log_level)

        cls._loggers_configured = True

        logger = logging.getLogger(__name__)
        logger.debug(f"Logging configured - Level: {settings.app.log_level}, File: {settings.logging.file}")

    @classmethod
    def _setup_third_party_loggers(cls, our_level: int) -> None:
        """Configure logging levels for third-party libraries."""
        logging.getLogger("requests").setLevel(logging.WARNING)
        logging.getLogger("urllib3").setLevel(logging.WARNING)

        for module in ("git_api", "__main__"):
            logging.getLogger(module).setLevel(our_level)

    @classmethod
    def set_verbose(cls, verbose: bool = True) -> None:
        """Switch debug output on or off for this package and the console."""
        cls.setup_logging()

        level = logging.DEBUG if verbose else logging.INFO
        logging.getLogger("git_api").setLevel(level)
        if cls._console_handler is not None:
            cls._console_handler.setLevel(level)
        if cls._file_handler is not None:
            cls._file_handler.setLevel(level)

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get a logger instance with automatic setup."""
        cls.setup_logging()
        return logging.getLogger(name)

    @classmethod
    def reconfigure(cls) -> None:
        """Reconfigure logging (useful when settings change)."""
        cls._loggers_configured = False
        cls.setup_logging(force_reconfigure=True)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Convenience function to get a logger instance.

    Args:
        name: Logger name. If None, uses the calling module's name.

    Returns:
        Configured logger instance.
    """
    if name is None:
        import inspect
        frame = inspect.currentframe().f_back
        name = frame.f_globals.get('__name__', 'unknown')

    return LoggerSetup.get_logger(name)


# Initialize logging when module is imported
LoggerSetup.setup_logging()
