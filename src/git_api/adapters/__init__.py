"""Adapters for Git hosting provider APIs."""

from .base import GitApi, GitBase
from .github import (
    GitHubAdapter,
    GITHUB_BASE_URL,
    GITHUB_ENTERPRISE_BASE_URL,
    github_adapter,
    github_enterprise_adapter,
)
from .gitlab import GitLabAdapter
from .bitbucket import BitbucketAdapter
from .retry import (
    is_secondary_rate_limit,
    compute_backoff_delay,
    retry_on_secondary_rate_limit,
)
from .webhooks import classify_webhook_error
from .factory import AdapterFactory

__all__ = [
    "GitApi",
    "GitBase",
    "GitHubAdapter",
    "GITHUB_BASE_URL",
    "GITHUB_ENTERPRISE_BASE_URL",
    "github_adapter",
    "github_enterprise_adapter",
    "GitLabAdapter",
    "BitbucketAdapter",
    "is_secondary_rate_limit",
    "compute_backoff_delay",
    "retry_on_secondary_rate_limit",
    "classify_webhook_error",
    "AdapterFactory",
]
