"""
Factory for creating provider-specific adapters.
"""
from typing import Callable, Dict, Optional

from git_api.utils import get_logger
from git_api.config import get_settings
from git_api.core.models import GitHost, RepoConfig
from git_api.core.exceptions import UnsupportedHostError
from .base import GitApi

logger = get_logger(__name__)

AdapterBuilder = Callable[..., GitApi]


class AdapterFactory:
    """Factory for creating provider adapters."""

    _adapters: Dict[GitHost, AdapterBuilder] = {}  # Registry of available adapters

    @classmethod
    def register_adapter(cls, host_type: GitHost, builder: AdapterBuilder):
        """
        Register an adapter class or constructor function for a host type.

        Args:
            host_type: Host type
            builder: Callable taking a RepoConfig and keyword options
        """
        cls._adapters[host_type] = builder
        logger.debug(f"Registered adapter for {host_type.value}: {getattr(builder, '__name__', builder)}")

    @classmethod
    def create_adapter(
        cls,
        config: RepoConfig,
        host_type: Optional[GitHost] = None,
        **kwargs
    ) -> GitApi:
        """
        Create an adapter instance for a repository.

        Args:
            config: Repository configuration
            host_type: Host type, detected from ``config.host`` when omitted
            **kwargs: Passed to the adapter (logger, timeout, session, ...)

        Returns:
            Configured adapter instance

        Raises:
            UnsupportedHostError: If no adapter is registered for the host type
        """
        if host_type is None:
            host_type = cls.detect_host_type(config)

        if host_type not in cls._adapters:
            available = ", ".join(h.value for h in cls._adapters.keys())
            raise UnsupportedHostError(
                f"Unsupported host type: {host_type.value}. "
                f"Available host types: {available}"
            )

        adapter = cls._adapters[host_type](config, **kwargs)

        logger.info(f"Created {host_type.value} adapter for {config.full_name}")
        return adapter

    @classmethod
    def create_from_settings(cls, **kwargs) -> GitApi:
        """Create the adapter described by the ``git`` settings section."""
        settings = get_settings()

        config = settings.repo_config()
        host_type = GitHost(settings.git.host_type) if settings.git.host_type else None

        return cls.create_adapter(config, host_type=host_type, **kwargs)

    @staticmethod
    def detect_host_type(config: RepoConfig) -> GitHost:
        """
        Guess the host type from the configured host.

        Unknown hosts are assumed to be GitHub Enterprise servers.
        """
        host = (config.host or "github.com").lower()

        if host in ("github.com", "api.github.com"):
            return GitHost.GITHUB
        if "gitlab" in host:
            return GitHost.GITLAB
        if host in ("bitbucket.org", "api.bitbucket.org"):
            return GitHost.BITBUCKET
        return GitHost.GITHUB_ENTERPRISE

    @classmethod
    def list_available_host_types(cls) -> list[str]:
        """Get list of available host types."""
        return [host_type.value for host_type in cls._adapters.keys()]


def _auto_register_adapters():
    """Register the bundled adapters."""
    from .github import github_adapter, github_enterprise_adapter
    from .gitlab import GitLabAdapter
    from .bitbucket import BitbucketAdapter

    AdapterFactory.register_adapter(GitHost.GITHUB, github_adapter)
    AdapterFactory.register_adapter(GitHost.GITHUB_ENTERPRISE, github_enterprise_adapter)
    AdapterFactory.register_adapter(GitHost.GITLAB, GitLabAdapter)
    AdapterFactory.register_adapter(GitHost.BITBUCKET, BitbucketAdapter)


# Register adapters on module import
_auto_register_adapters()
