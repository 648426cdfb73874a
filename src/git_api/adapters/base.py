"""
Common contract and base class for Git provider adapters.
"""
import base64
import logging
from abc import ABC, abstractmethod
from typing import List, Mapping, Optional

import requests

from git_api.config import get_settings
from git_api.core.models import (
    RepoConfig,
    FileDescriptor,
    PullRequest,
    CreatePullRequestOptions,
    MergePullRequestOptions,
    CreateWebhookOptions,
    GitHeader,
    GitEvent,
)
from git_api.core.exceptions import OperationNotImplemented, UnsupportedWebhookEvent
from git_api.utils import get_logger


def decode_content(content: str, encoding: str) -> bytes:
    """Undo the transfer encoding a provider applied to file contents."""
    if encoding == "base64":
        return base64.b64decode(content)
    return content.encode("utf-8")


class GitApi(ABC):
    """
    Operations every Git provider adapter supports.

    Pull request operations may be unsupported by a provider, in which case
    they raise ``OperationNotImplemented``. HTTP failures surface as
    ``requests.HTTPError`` except for webhook creation, which raises
    ``WebhookAlreadyExists`` or ``UnknownWebhookError``.
    """

    @abstractmethod
    def get_base_url(self) -> str:
        """API root of the repository."""
        pass

    @abstractmethod
    def list_files(self) -> List[FileDescriptor]:
        """
        List the files at the root of the configured branch.

        Only the first page the provider returns is read; directories are
        left out.
        """
        pass

    @abstractmethod
    def get_file_contents(self, file_descriptor: FileDescriptor) -> bytes:
        """
        Fetch the decoded contents of a file.

        Args:
            file_descriptor: Descriptor returned by ``list_files`` of this adapter

        Returns:
            Raw file bytes
        """
        pass

    @abstractmethod
    def get_default_branch(self) -> Optional[str]:
        """Name of the repository's default branch."""
        pass

    @abstractmethod
    def get_pull_request(self, pull_number: int) -> PullRequest:
        pass

    @abstractmethod
    def create_pull_request(self, options: CreatePullRequestOptions) -> PullRequest:
        pass

    @abstractmethod
    def merge_pull_request(self, options: MergePullRequestOptions) -> str:
        """
        Merge a pull request.

        Returns:
            Status message from the provider
        """
        pass

    @abstractmethod
    def update_pull_request_branch(self, pull_number: int) -> str:
        """
        Bring the pull request branch up to date with its base.

        Returns:
            Status message from the provider
        """
        pass

    @abstractmethod
    def create_webhook(self, options: CreateWebhookOptions) -> str:
        """
        Register a push webhook on the repository.

        Returns:
            Id of the created hook

        Raises:
            WebhookAlreadyExists: If the hook is already registered
            UnknownWebhookError: For any other failure
        """
        pass

    @abstractmethod
    def get_ref_path(self) -> str:
        pass

    @abstractmethod
    def get_ref(self) -> str:
        """
        Ref a push payload carries for the configured branch.

        Unlike the other webhook getters this may hit the network: without a
        configured branch it looks up the default branch, so it can raise
        ``requests.HTTPError``.
        """
        pass

    @abstractmethod
    def get_revision_path(self) -> str:
        pass

    @abstractmethod
    def get_repository_url_path(self) -> str:
        pass

    @abstractmethod
    def get_repository_name_path(self) -> str:
        pass

    @abstractmethod
    def get_header(self, header: GitHeader) -> str:
        pass

    @abstractmethod
    def get_event_name(self, event: GitEvent) -> str:
        pass


class GitBase(GitApi):
    """
    Shared state for adapters: the repository config, a logger and an HTTP session.

    Subclasses provide ``HEADERS`` and ``EVENTS`` tables mapping the canonical
    webhook identifiers to the provider's names.
    """

    HEADERS: Mapping[GitHeader, str] = {}
    EVENTS: Mapping[GitEvent, str] = {}

    def __init__(
        self,
        config: RepoConfig,
        logger: Optional[logging.Logger] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the adapter.

        Args:
            config: Repository configuration
            logger: Logger to use, defaults to one named after the adapter class
            timeout: Request timeout in seconds, defaults to ``http.timeout``
            session: HTTP session, a new one is created when omitted
        """
        settings = get_settings()

        self.config = config
        self.logger = logger or get_logger(f"git_api.adapters.{self.__class__.__name__}")
        self.timeout = timeout if timeout is not None else settings.http.timeout
        self.session = session or requests.Session()
        self._user_agent = f"{config.username} {settings.http.user_agent_suffix}"

    @property
    def user_agent(self) -> str:
        return self._user_agent

    def _branch(self) -> Optional[str]:
        """Configured branch, falling back to the repository default."""
        return self.config.branch or self.get_default_branch()

    def _not_implemented(self, operation: str):
        self.logger.debug(f"{operation} is not supported by {self.__class__.__name__}")
        return OperationNotImplemented(operation)

    def get_header(self, header: GitHeader) -> str:
        try:
            return self.HEADERS[header]
        except KeyError:
            raise UnsupportedWebhookEvent(
                f"{self.__class__.__name__} has no header for {header.value}"
            ) from None

    def get_event_name(self, event: GitEvent) -> str:
        try:
            return self.EVENTS[event]
        except KeyError:
            raise UnsupportedWebhookEvent(
                f"{self.__class__.__name__} has no event for {event.value}"
            ) from None

    def __repr__(self) -> str:
        """String representation of adapter."""
        return (
            f"{self.__class__.__name__}("
            f"repository={self.config.full_name}, "
            f"base_url={self.get_base_url()})"
        )
