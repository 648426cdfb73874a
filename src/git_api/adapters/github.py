"""
GitHub and GitHub Enterprise adapter.

Both flavours share every operation and differ only in the API root, so a
single adapter takes the base url template as a parameter.
"""
import logging
import random
import time
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Optional

import requests

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
from .base import GitBase, decode_content
from .retry import retry_on_secondary_rate_limit
from .webhooks import classify_webhook_error

GITHUB_BASE_URL = "https://api.github.com/repos/{owner}/{repo}"
GITHUB_ENTERPRISE_BASE_URL = "{protocol}://{host}/api/v3/repos/{owner}/{repo}"

GITHUB_MEDIA_TYPE = "application/vnd.github.v3+json"


class GitHubAdapter(GitBase):
    """
    Adapter for the GitHub REST API v3.

    Pull request operations retry on the secondary rate limit. ``sleep`` and
    ``jitter`` are the hooks that policy uses to wait.
    """

    HEADERS = MappingProxyType({
        GitHeader.EVENT: "X-GitHub-Event",
    })

    EVENTS = MappingProxyType({
        GitEvent.PUSH: "push",
        GitEvent.PULL_REQUEST: "pull_request",
    })

    def __init__(
        self,
        config: RepoConfig,
        base_url_template: str = GITHUB_BASE_URL,
        logger: Optional[logging.Logger] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
        jitter: Callable[[], float] = random.random
    ):
        super().__init__(config, logger=logger, timeout=timeout, session=session)
        self.base_url_template = base_url_template
        self._sleep = sleep
        self._jitter = jitter

    def get_base_url(self) -> str:
        return self.base_url_template.format(
            protocol=self.config.protocol,
            host=self.config.host,
            owner=self.config.owner,
            repo=self.config.repo,
        )

    def list_files(self) -> List[FileDescriptor]:
        response = self._get(f"/git/trees/{self._branch()}")

        tree = response.json().get("tree", [])

        return [
            FileDescriptor(path=entry["path"], url=entry.get("url"))
            for entry in tree
            if entry.get("type") == "blob"
        ]

    def get_file_contents(self, file_descriptor: FileDescriptor) -> bytes:
        response = self._get(file_descriptor.url or f"/contents/{file_descriptor.path}")

        body = response.json()

        return decode_content(body.get("content", ""), body.get("encoding", "base64"))

    def get_default_branch(self) -> Optional[str]:
        response = self._get()

        return response.json().get("default_branch")

    def get_pull_request(self, pull_number: int) -> PullRequest:

        def call() -> PullRequest:
            body = self._get(f"/pulls/{pull_number}").json()

            return PullRequest(
                pull_number=body["number"],
                source_branch=body["head"]["ref"],
                target_branch=body["base"]["ref"],
            )

        return self._exec(call, "getPullRequest")

    def create_pull_request(self, options: CreatePullRequestOptions) -> PullRequest:

        def call() -> PullRequest:
            body = self._post("/pulls", {
                "title": options.title,
                "head": options.source_branch,
                "base": options.target_branch,
                "maintainer_can_modify": options.maintainer_can_modify,
                "draft": options.draft,
            }).json()

            return PullRequest(
                pull_number=body["number"],
                source_branch=options.source_branch,
                target_branch=options.target_branch,
            )

        return self._exec(call, "createPullRequest")

    def merge_pull_request(self, options: MergePullRequestOptions) -> str:

        def call() -> str:
            data = {
                "commit_title": options.title,
                "commit_message": options.message,
                "merge_method": options.method,
            }
            response = self._put(
                f"/pulls/{options.pull_number}/merge",
                {k: v for k, v in data.items() if v is not None},
            )

            return response.json().get("message")

        return self._exec(call, "mergePullRequest")

    def update_pull_request_branch(self, pull_number: int) -> str:

        def call() -> str:
            return self._put(f"/pulls/{pull_number}/update-branch").json().get("message")

        return self._exec(call, "updatePullRequestBranch")

    def create_webhook(self, options: CreateWebhookOptions) -> str:
        try:
            response = self._post("/hooks", self.build_webhook_data(options))
        except requests.RequestException as e:
            raise classify_webhook_error(e) from e

        hook_id = str(response.json().get("id"))
        self.logger.info(f"Created webhook {hook_id} on {self.config.full_name}")
        return hook_id

    def build_webhook_data(self, options: CreateWebhookOptions) -> Dict[str, Any]:
        """Request body registering a push hook."""
        url = options.webhook_url or f"{(options.jenkins_url or '').rstrip('/')}/github-webhook/"

        return {
            "name": "web",
            "active": True,
            "events": [self.EVENTS[GitEvent.PUSH]],
            "config": {
                "url": url,
                "content_type": "json",
                # "0" means the hook url's certificate is verified
                "insecure_ssl": "0",
            },
        }

    def get_ref_path(self) -> str:
        return "body.ref"

    def get_ref(self) -> str:
        return f"refs/heads/{self._branch()}"

    def get_revision_path(self) -> str:
        return "body.head_commit.id"

    def get_repository_url_path(self) -> str:
        return "body.repository.url"

    def get_repository_name_path(self) -> str:
        return "body.repository.full_name"

    def _exec(self, call: Callable[[], Any], name: str) -> Any:
        return retry_on_secondary_rate_limit(
            call,
            name,
            self.logger,
            sleep=self._sleep,
            jitter=self._jitter,
        )

    def _request_options(self) -> Dict[str, Any]:
        return {
            "auth": (self.config.username, self.config.password),
            "headers": {
                "User-Agent": self.user_agent,
                "Accept": GITHUB_MEDIA_TYPE,
            },
            "timeout": self.timeout,
        }

    def _url(self, uri: str) -> str:
        return uri if uri.startswith("http") else self.get_base_url() + uri

    def _get(self, uri: str = "") -> requests.Response:
        response = self.session.get(self._url(uri), **self._request_options())
        response.raise_for_status()
        return response

    def _post(self, uri: str, data: Dict[str, Any]) -> requests.Response:
        response = self.session.post(self._url(uri), json=data, **self._request_options())
        response.raise_for_status()
        return response

    def _put(self, uri: str, data: Optional[Dict[str, Any]] = None) -> requests.Response:
        response = self.session.put(self._url(uri), json=data or {}, **self._request_options())
        response.raise_for_status()
        return response


def github_adapter(config: RepoConfig, **kwargs) -> GitHubAdapter:
    """Adapter for repositories on github.com."""
    return GitHubAdapter(config, base_url_template=GITHUB_BASE_URL, **kwargs)


def github_enterprise_adapter(config: RepoConfig, **kwargs) -> GitHubAdapter:
    """Adapter for repositories on a GitHub Enterprise server."""
    return GitHubAdapter(config, base_url_template=GITHUB_ENTERPRISE_BASE_URL, **kwargs)
