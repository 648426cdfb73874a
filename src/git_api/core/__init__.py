"""Core types for the Git provider API."""

from .models import (
    GitHost,
    GitHeader,
    GitEvent,
    RepoConfig,
    FileDescriptor,
    PullRequest,
    CreatePullRequestOptions,
    MergePullRequestOptions,
    CreateWebhookOptions,
)

from .exceptions import (
    GitApiError,
    ConfigurationError,
    UnsupportedHostError,
    OperationNotImplemented,
    UnsupportedWebhookEvent,
    WebhookError,
    WebhookAlreadyExists,
    UnknownWebhookError,
)

__all__ = [
    # Enums
    "GitHost",
    "GitHeader",
    "GitEvent",
    # Models
    "RepoConfig",
    "FileDescriptor",
    "PullRequest",
    "CreatePullRequestOptions",
    "MergePullRequestOptions",
    "CreateWebhookOptions",
    # Exceptions
    "GitApiError",
    "ConfigurationError",
    "UnsupportedHostError",
    "OperationNotImplemented",
    "UnsupportedWebhookEvent",
    "WebhookError",
    "WebhookAlreadyExists",
    "UnknownWebhookError",
]
