"""
GitLab adapter (API v4).
"""
import re
from types import MappingProxyType
from typing import Any, Dict, List, Optional
from urllib.parse import quote

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
from .base import GitBase, decode_content
from .webhooks import classify_webhook_error

DEFAULT_JENKINS_URL = "https://jenkins.local/"

TREE_PAGE_SIZE = 1000

_JENKINS_URL_PATTERN = re.compile(r"(.*)://(.*?)/*$")


class GitLabAdapter(GitBase):
    """
    Adapter for gitlab.com and self-hosted GitLab.

    Authenticates with a ``Private-Token`` header. Pull request operations
    are not supported.
    """

    HEADERS = MappingProxyType({
        GitHeader.EVENT: "X-GitLab-Event",
    })

    EVENTS = MappingProxyType({
        GitEvent.PUSH: "Push Hook",
        GitEvent.PULL_REQUEST: "Merge Request Hook",
    })

    @property
    def project_id(self) -> str:
        """Owner and repo encoded into a single path segment."""
        return quote(f"{self.config.owner}/{self.config.repo}", safe="")

    def get_base_url(self) -> str:
        return f"{self.config.protocol}://{self.config.host}/api/v4/projects/{self.project_id}"

    def list_files(self) -> List[FileDescriptor]:
        ref = self._branch()

        params = {"per_page": TREE_PAGE_SIZE}
        if ref:
            params["ref"] = ref
        response = self._get("/repository/tree", params=params)

        files = []
        for entry in response.json():
            if entry.get("type") != "blob":
                continue

            # The tree endpoint can report paths under a "files/" prefix that
            # the files endpoint does not accept
            path = _strip_prefix(entry["path"], "files/")
            files.append(FileDescriptor(path=path, url=self._file_url(path, ref)))

        return files

    def get_file_contents(self, file_descriptor: FileDescriptor) -> bytes:
        url = file_descriptor.url or self._file_url(file_descriptor.path, self._branch())
        response = self._get(url)

        body = response.json()

        return decode_content(body.get("content", ""), body.get("encoding", "base64"))

    def get_default_branch(self) -> Optional[str]:
        response = self._get("/repository/branches")

        for branch in response.json():
            if branch.get("default"):
                return branch.get("name")

        self.logger.warning(f"No default branch reported for {self.config.full_name}")
        return None

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
        except (requests.RequestException, ValueError) as e:
            raise classify_webhook_error(e) from e

        hook_id = str(response.json().get("id"))
        self.logger.info(f"Created webhook {hook_id} on {self.config.full_name}")
        return hook_id

    def build_webhook_data(self, options: CreateWebhookOptions) -> Dict[str, Any]:
        """
        Request body registering a push hook.

        Without an explicit ``webhook_url`` the hook points at the Jenkins
        job's project endpoint, with Jenkins credentials embedded when both
        user and password are given.
        """
        if options.webhook_url:
            return self._hook_body(options.webhook_url, options.webhook_url.startswith("https:"))

        jenkins_url = options.jenkins_url or DEFAULT_JENKINS_URL

        match = _JENKINS_URL_PATTERN.match(jenkins_url)
        if not match:
            raise ValueError(f"Invalid Jenkins url: {jenkins_url}")
        protocol, host = match.group(1), match.group(2)

        credentials = ""
        if options.jenkins_user and options.jenkins_password:
            credentials = f"{options.jenkins_user}:{options.jenkins_password}@"

        url = f"{protocol}://{credentials}{host}/project/{options.job_name}"

        return self._hook_body(url, protocol == "https")

    def _hook_body(self, url: str, verify_ssl: bool) -> Dict[str, Any]:
        return {
            "id": self.project_id,
            "url": url,
            "push_events": True,
            "enable_ssl_verification": verify_ssl,
        }

    def get_ref_path(self) -> str:
        return "body.ref"

    def get_ref(self) -> str:
        return f"refs/heads/{self._branch()}"

    def get_revision_path(self) -> str:
        return "body.checkout_sha"

    def get_repository_url_path(self) -> str:
        return "body.repository.git_http_url"

    def get_repository_name_path(self) -> str:
        return "body.project.path_with_namespace"

    def _file_url(self, path: str, ref: Optional[str]) -> str:
        url = f"{self.get_base_url()}/repository/files/{quote(path, safe='')}"
        if ref:
            url += f"?ref={quote(ref, safe='')}"
        return url

    def _headers(self) -> Dict[str, str]:
        return {
            "Private-Token": self.config.password,
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }

    def _get(self, uri: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        url = uri if uri.startswith("http") else self.get_base_url() + uri
        response = self.session.get(url, params=params, headers=self._headers(), timeout=self.timeout)
        response.raise_for_status()
        return response

    def _post(self, uri: str, data: Dict[str, Any]) -> requests.Response:
        response = self.session.post(
            self.get_base_url() + uri,
            json=data,
            headers=self._headers(),
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response


def _strip_prefix(value: str, prefix: str) -> str:
    return value[len(prefix):] if value.startswith(prefix) else value
