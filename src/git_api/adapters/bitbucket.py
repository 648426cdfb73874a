"""
Bitbucket Cloud adapter (API 2.0).
"""
from types import MappingProxyType
from typing import Any, Dict, List, Optional

import requests

from git_api.core.models import (
    FileDescriptor,
    PullRequest,
    CreatePullRequestOptions,
    MergePullRequestOptions,
    CreateWebhookOptions,
    GitHeader,
    GitEvent,
)
from .base import GitBase
from .webhooks import classify_webhook_error

SRC_PAGE_SIZE = 100


class BitbucketAdapter(GitBase):
    """
    Adapter for Bitbucket repositories.

    Push payloads carry the bare branch name as the ref. Pull request
    operations are not supported.
    """

    HEADERS = MappingProxyType({
        GitHeader.EVENT: "X-Event-Key",
    })

    EVENTS = MappingProxyType({
        GitEvent.PUSH: "repo:push",
    })

    def get_base_url(self) -> str:
        return (
            f"{self.config.protocol}://api.bitbucket.org/2.0/repositories/"
            f"{self.config.owner}/{self.config.repo}"
        )

    def list_files(self) -> List[FileDescriptor]:
        # Bare /src lists the main branch root
        uri = f"/src/{self.config.branch}/" if self.config.branch else "/src"
        response = self._get(uri, params={"pagelen": SRC_PAGE_SIZE})

        return [
            FileDescriptor(path=entry["path"], url=entry["links"]["self"]["href"])
            for entry in response.json().get("values", [])
            if entry.get("type") == "commit_file"
        ]

    def get_file_contents(self, file_descriptor: FileDescriptor) -> bytes:
        url = file_descriptor.url or f"/src/{self._branch()}/{file_descriptor.path}"

        # The src endpoint serves raw file contents
        return self._get(url, accept=None).content

    def get_default_branch(self) -> Optional[str]:
        body = self._get("/branches/default").json()

        return body.get("displayId") or body.get("name")

    def get_pull_request(self, pull_number: int) -> PullRequest:
        raise self._not_implemented("getPullRequest")

    def create_pull_request(self, options: CreatePullRequestOptions) -> PullRequest:
        raise self._not_implemented("createPullRequest")

    def merge_pull_request(self, options: MergePullRequestOptions) -> str:
        raise self._not_implemented("mergePullRequest")

    def update_pull_request_branch(self, pull_number: int) -> str:
        raise self._not_implemented("updatePullRequestBranch")

    def create_webhook(self, options: CreateWebhookOptions) -> str:
        try:
            response = self._post("/hooks", self.build_webhook_data(options))
        except requests.RequestException as e:
            raise classify_webhook_error(e) from e

        body = response.json()
        hook_id = str(body.get("uuid") or body.get("id"))
        self.logger.info(f"Created webhook {hook_id} on {self.config.full_name}")
        return hook_id

    def build_webhook_data(self, options: CreateWebhookOptions) -> Dict[str, Any]:
        """Request body registering a push hook."""
        url = options.webhook_url
        if not url and options.jenkins_url:
            url = f"{options.jenkins_url.rstrip('/')}/bitbucket-hook/"

        return {
            "description": "Webhook",
            "url": url,
            "active": True,
            "events": [self.EVENTS[GitEvent.PUSH]],
        }

    def get_ref_path(self) -> str:
        return "body.push.changes[0].new.name"

    def get_ref(self) -> str:
        return self._branch()

    def get_revision_path(self) -> str:
        return "body.push.changes[0].new.target.hash"

    def get_repository_url_path(self) -> str:
        return "body.repository.links.html.href"

    def get_repository_name_path(self) -> str:
        return "body.repository.full_name"

    def _headers(self, accept: Optional[str] = "application/json") -> Dict[str, str]:
        headers = {"User-Agent": self.user_agent}
        if accept:
            headers["Accept"] = accept
        return headers

    def _get(
        self,
        uri: str,
        params: Optional[Dict[str, Any]] = None,
        accept: Optional[str] = "application/json"
    ) -> requests.Response:
        url = uri if uri.startswith("http") else self.get_base_url() + uri
        response = self.session.get(
            url,
            params=params,
            auth=(self.config.username, self.config.password),
            headers=self._headers(accept),
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response

    def _post(self, uri: str, data: Dict[str, Any]) -> requests.Response:
        response = self.session.post(
            self.get_base_url() + uri,
            json=data,
            auth=(self.config.username, self.config.password),
            headers=self._headers(),
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response
