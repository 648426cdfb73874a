"""Custom exceptions for the Git provider API."""

from git_api.utils import get_logger
from typing import Optional

logger = get_logger(__name__)


class GitApiError(Exception):
    """Base exception for the Git provider API."""

    def __init__(self, message: str, details: str = None):
        super().__init__(message)
        self.message = message
        self.details = details

        logger.debug(f"{self.__class__.__name__} raised: {message}")
        if details:
            logger.debug(f"Exception details: {details}")


class ConfigurationError(GitApiError):
    """Raised when there's a configuration problem."""
    pass


class UnsupportedHostError(GitApiError):
    """Raised when no adapter is registered for a host type."""
    pass


class OperationNotImplemented(GitApiError, NotImplementedError):
    """Raised when the selected provider does not support an operation."""

    def __init__(self, operation: str):
        super().__init__(f"Method not implemented: {operation}")
        self.operation = operation


class UnsupportedWebhookEvent(GitApiError):
    """Raised when a canonical header or event has no provider equivalent."""
    pass


class WebhookError(GitApiError):
    """Base class for webhook creation failures."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message, details=str(cause) if cause is not None else None)
        self.cause = cause


class WebhookAlreadyExists(WebhookError):
    """Raised when the repository already has the webhook."""
    pass


class UnknownWebhookError(WebhookError):
    """Raised for any other webhook creation failure."""
    pass
