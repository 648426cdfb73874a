"""Tests for Bitbucket adapter."""

import pytest

from git_api.adapters import BitbucketAdapter
from git_api.core import (
    RepoConfig,
    FileDescriptor,
    CreatePullRequestOptions,
    MergePullRequestOptions,
    CreateWebhookOptions,
    GitHeader,
    GitEvent,
    OperationNotImplemented,
    UnsupportedWebhookEvent,
    WebhookAlreadyExists,
    UnknownWebhookError,
)
from utils import make_response

BASE = "https://api.bitbucket.org/2.0/repositories/team/repo"


def _entry(path, entry_type):
    return {
        "path": path,
        "type": entry_type,
        "links": {
            "self": {"href": f"{BASE}/src/abc123/{path}"},
            "meta": {"href": f"{BASE}/src/abc123/{path}?format=meta"},
        },
    }


class TestBitbucketAdapterFiles:
    """Test repository introspection."""

    def test_base_url(self, bitbucket):
        assert bitbucket.get_base_url() == BASE

    def test_list_files_excludes_directories(self, bitbucket, session):
        session.get.return_value = make_response(body={
            "page": 1,
            "pagelen": 100,
            "values": [
                _entry("README.md", "commit_file"),
                _entry("src", "commit_directory"),
                _entry("Jenkinsfile", "commit_file"),
            ],
        })

        files = bitbucket.list_files()

        assert files == [
            FileDescriptor(path="README.md", url=f"{BASE}/src/abc123/README.md"),
            FileDescriptor(path="Jenkinsfile", url=f"{BASE}/src/abc123/Jenkinsfile"),
        ]
        args, kwargs = session.get.call_args
        assert args[0] == f"{BASE}/src/main/"
        assert kwargs["params"] == {"pagelen": 100}
        assert kwargs["auth"] == ("bucket", "app-password")

    def test_only_first_page_is_read(self, bitbucket, session):
        session.get.return_value = make_response(body={
            "values": [_entry("a", "commit_file")],
            "next": f"{BASE}/src?page=2",
        })

        assert len(bitbucket.list_files()) == 1
        session.get.assert_called_once()

    def test_list_files_on_configured_branch(self, session):
        config = RepoConfig(owner="team", repo="repo", username="u", password="p", branch="dev")
        adapter = BitbucketAdapter(config, session=session)
        session.get.return_value = make_response(body={"values": [_entry("a.txt", "commit_file")]})

        adapter.list_files()
        adapter.get_file_contents(FileDescriptor(path="a.txt"))

        listed, read = session.get.call_args_list
        assert listed[0][0] == f"{BASE}/src/dev/"
        assert read[0][0] == f"{BASE}/src/dev/a.txt"

    def test_list_files_without_branch_uses_main_branch_root(self, session):
        config = RepoConfig(owner="team", repo="repo", username="u", password="p")
        adapter = BitbucketAdapter(config, session=session)
        session.get.return_value = make_response(body={"values": []})

        assert adapter.list_files() == []
        session.get.assert_called_once()
        assert session.get.call_args[0][0] == f"{BASE}/src"

    def test_get_file_contents_returns_raw_bytes(self, bitbucket, session):
        session.get.return_value = make_response(text="hello")

        contents = bitbucket.get_file_contents(FileDescriptor(path="a.txt", url=f"{BASE}/src/abc123/a.txt"))

        assert contents == b"hello"
        assert session.get.call_args[0][0] == f"{BASE}/src/abc123/a.txt"
        assert "Accept" not in session.get.call_args[1]["headers"]

    def test_get_file_contents_by_path(self, bitbucket, session):
        session.get.return_value = make_response(text="hello")

        bitbucket.get_file_contents(FileDescriptor(path="a.txt"))

        assert session.get.call_args[0][0] == f"{BASE}/src/main/a.txt"

    def test_get_default_branch(self, bitbucket, session):
        session.get.return_value = make_response(body={"id": "refs/heads/master", "displayId": "master", "isDefault": True})

        assert bitbucket.get_default_branch() == "master"
        assert session.get.call_args[0][0] == f"{BASE}/branches/default"

    def test_get_default_branch_falls_back_to_name(self, bitbucket, session):
        session.get.return_value = make_response(body={"name": "main", "type": "branch"})

        assert bitbucket.get_default_branch() == "main"


class TestBitbucketAdapterPullRequests:
    """Pull requests are not supported."""

    @pytest.mark.parametrize("operation, call", [
        ("getPullRequest", lambda a: a.get_pull_request(1)),
        ("createPullRequest", lambda a: a.create_pull_request(
            CreatePullRequestOptions(title="t", source_branch="a", target_branch="b"))),
        ("mergePullRequest", lambda a: a.merge_pull_request(MergePullRequestOptions(pull_number=1))),
        ("updatePullRequestBranch", lambda a: a.update_pull_request_branch(1)),
    ])
    def test_not_implemented(self, bitbucket, operation, call):
        with pytest.raises(OperationNotImplemented, match=operation):
            call(bitbucket)


class TestBitbucketAdapterWebhooks:
    """Test webhook creation."""

    def test_create_webhook(self, bitbucket, session):
        session.post.return_value = make_response(201, body={"uuid": "{hook-uuid}"})

        hook_id = bitbucket.create_webhook(CreateWebhookOptions(webhook_url="https://hooks.example.com/in"))

        assert hook_id == "{hook-uuid}"
        args, kwargs = session.post.call_args
        assert args[0] == f"{BASE}/hooks"
        assert kwargs["json"] == {
            "description": "Webhook",
            "url": "https://hooks.example.com/in",
            "active": True,
            "events": ["repo:push"],
        }

    def test_webhook_url_from_jenkins(self, bitbucket):
        data = bitbucket.build_webhook_data(CreateWebhookOptions(jenkins_url="https://jenkins.example.com/"))

        assert data["url"] == "https://jenkins.example.com/bitbucket-hook/"

    def test_hook_already_exists(self, bitbucket, session):
        session.post.return_value = make_response(400, text="Hook already exists")

        with pytest.raises(WebhookAlreadyExists):
            bitbucket.create_webhook(CreateWebhookOptions(webhook_url="https://hooks.example.com/in"))

    def test_unknown_error_keeps_cause(self, bitbucket, session):
        session.post.return_value = make_response(403, text="Forbidden")

        with pytest.raises(UnknownWebhookError) as exc_info:
            bitbucket.create_webhook(CreateWebhookOptions(webhook_url="https://hooks.example.com/in"))

        assert exc_info.value.cause.response.status_code == 403


class TestBitbucketAdapterWebhookMapping:
    """Test webhook header, event and payload path mapping."""

    def test_paths(self, bitbucket):
        assert bitbucket.get_ref_path() == "body.push.changes[0].new.name"
        assert bitbucket.get_revision_path() == "body.push.changes[0].new.target.hash"
        assert bitbucket.get_repository_url_path() == "body.repository.links.html.href"
        assert bitbucket.get_repository_name_path() == "body.repository.full_name"

    def test_ref_is_bare_branch(self, bitbucket):
        assert bitbucket.get_ref() == "main"

    def test_paths_do_not_depend_on_config(self, session):
        other = BitbucketAdapter(
            RepoConfig(owner="x", repo="y", username="u", password="p", branch="dev"),
            session=session,
        )

        assert other.get_revision_path() == "body.push.changes[0].new.target.hash"
        assert other.get_ref() == "dev"

    def test_header_and_events(self, bitbucket):
        assert bitbucket.get_header(GitHeader.EVENT) == "X-Event-Key"
        assert bitbucket.get_event_name(GitEvent.PUSH) == "repo:push"

    def test_pull_request_event_unsupported(self, bitbucket):
        with pytest.raises(UnsupportedWebhookEvent):
            bitbucket.get_event_name(GitEvent.PULL_REQUEST)
