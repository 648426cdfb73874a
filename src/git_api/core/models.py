"""
Core data models for the Git provider API.
"""
import re
from dataclasses import dataclass, field
from typing import Optional
from enum import Enum

from git_api.utils import get_logger

logger = get_logger(__name__)


class GitHost(Enum):
    """Supported Git hosting providers."""
    GITHUB = "github"
    GITHUB_ENTERPRISE = "github_enterprise"
    GITLAB = "gitlab"
    BITBUCKET = "bitbucket"


class GitHeader(Enum):
    """Provider-agnostic webhook header identifiers."""
    EVENT = "event"


class GitEvent(Enum):
    """Provider-agnostic webhook event identifiers."""
    PUSH = "push"
    PULL_REQUEST = "pullRequest"


_REPO_URL_PATTERN = re.compile(
    r"^(?P<protocol>https?)://(?:[^@/]+@)?(?P<host>[^/]+)/(?P<owner>.+)/(?P<repo>[^/]+?)(?:\.git)?/?$"
)


@dataclass(frozen=True)
class RepoConfig:
    """
    Immutable description of the repository an adapter talks to.

    Attributes:
        owner: Repository owner, organization or group path
        repo: Repository name
        username: User the credential belongs to
        password: Password or access token
        protocol: Protocol used for self-hosted endpoints
        host: Host name, only meaningful for self-hosted endpoints
        branch: Branch to operate on; None means the provider's default branch
    """
    owner: str
    repo: str
    username: str
    password: str = field(repr=False)
    protocol: str = "https"
    host: Optional[str] = None
    branch: Optional[str] = None

    @classmethod
    def from_url(
        cls,
        url: str,
        username: str,
        password: str,
        branch: Optional[str] = None
    ) -> "RepoConfig":
        """
        Build a config from a repository URL such as ``https://github.com/org/repo.git``.

        Raises:
            ValueError: If the URL is not a http(s) repository URL
        """
        match = _REPO_URL_PATTERN.match(url.strip())
        if not match:
            raise ValueError(
                f"Invalid repository url: {url}. "
                "Expected format: 'https://host/owner/repo'"
            )

        return cls(
            owner=match.group("owner"),
            repo=match.group("repo"),
            username=username,
            password=password,
            protocol=match.group("protocol"),
            host=match.group("host"),
            branch=branch,
        )

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def repo_url(self) -> Optional[str]:
        """Browser url of the repository, when the host is known."""
        if not self.host:
            return None
        return f"{self.protocol}://{self.host}/{self.owner}/{self.repo}"


@dataclass(frozen=True)
class FileDescriptor:
    """
    Handle to a file returned by ``list_files``.

    ``url`` is used verbatim by ``get_file_contents`` when present.
    """
    path: str
    url: Optional[str] = None


@dataclass(frozen=True)
class PullRequest:
    """Snapshot of a pull request."""
    pull_number: int
    source_branch: str
    target_branch: str


@dataclass
class CreatePullRequestOptions:
    """Options for opening a pull request."""
    title: str
    source_branch: str
    target_branch: str
    maintainer_can_modify: bool = False
    draft: bool = False

    def __post_init__(self):
        if not self.title or not self.title.strip():
            raise ValueError("Pull request title cannot be empty")


@dataclass
class MergePullRequestOptions:
    """
    Options for merging a pull request.

    ``method`` is the provider's merge strategy token (merge, squash, rebase)
    and is passed through as is.
    """
    pull_number: int
    title: Optional[str] = None
    message: Optional[str] = None
    method: Optional[str] = None


@dataclass
class CreateWebhookOptions:
    """
    Options for registering a webhook.

    ``webhook_url`` always wins. Otherwise each adapter derives the hook url
    from the Jenkins fields.
    """
    webhook_url: Optional[str] = None
    jenkins_url: Optional[str] = None
    jenkins_user: Optional[str] = None
    jenkins_password: Optional[str] = field(default=None, repr=False)
    job_name: Optional[str] = None
