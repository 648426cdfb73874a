"""
Shared test fixtures and configuration for pytest.
This file is automatically discovered by pytest.
"""

import logging
from unittest.mock import Mock

import pytest
import requests

from git_api.core import RepoConfig
from git_api.config import Settings
from git_api.adapters import (
    GitHubAdapter,
    GitLabAdapter,
    BitbucketAdapter,
    GITHUB_ENTERPRISE_BASE_URL,
)


@pytest.fixture
def repo_config():
    """Config for a repository on github.com."""
    return RepoConfig(
        owner="org",
        repo="repo",
        username="octocat",
        password="secret",
        branch="main",
    )


@pytest.fixture
def enterprise_config():
    """Config for a repository on a GitHub Enterprise server."""
    return RepoConfig(
        owner="org",
        repo="repo",
        username="octocat",
        password="secret",
        protocol="https",
        host="github.example.com",
        branch="main",
    )


@pytest.fixture
def gitlab_config():
    """Config for a repository on a GitLab server."""
    return RepoConfig(
        owner="group",
        repo="project",
        username="tanuki",
        password="glpat-token",
        protocol="https",
        host="gitlab.example.com",
        branch="main",
    )


@pytest.fixture
def bitbucket_config():
    """Config for a repository on bitbucket.org."""
    return RepoConfig(
        owner="team",
        repo="repo",
        username="bucket",
        password="app-password",
        protocol="https",
        host="bitbucket.org",
        branch="main",
    )


@pytest.fixture
def session():
    """Stand-in for requests.Session."""
    return Mock(spec=requests.Session)


@pytest.fixture
def sleep():
    """Records backoff delays instead of waiting."""
    return Mock()


@pytest.fixture
def test_logger():
    return logging.getLogger("git_api.tests")


@pytest.fixture
def github(repo_config, session, sleep, test_logger):
    return GitHubAdapter(
        repo_config,
        logger=test_logger,
        session=session,
        sleep=sleep,
        jitter=lambda: 0.5,
    )


@pytest.fixture
def github_enterprise(enterprise_config, session, sleep):
    return GitHubAdapter(
        enterprise_config,
        base_url_template=GITHUB_ENTERPRISE_BASE_URL,
        session=session,
        sleep=sleep,
        jitter=lambda: 0.5,
    )


@pytest.fixture
def gitlab(gitlab_config, session):
    return GitLabAdapter(gitlab_config, session=session)


@pytest.fixture
def bitbucket(bitbucket_config, session):
    return BitbucketAdapter(bitbucket_config, session=session)


@pytest.fixture
def temp_config_file(tmp_path):
    """Create a temporary config file for testing."""
    config_content = """
app:
  debug: true
  log_level: "DEBUG"

http:
  timeout: 10

retry:
  default_retry_after: 5

git:
  host_type: "gitlab"
  url: "https://gitlab.example.com/group/project.git"
  username: "tanuki"
"""
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text(config_content)
    return config_file


@pytest.fixture
def mock_settings():
    """Create a default Settings object for testing."""
    return Settings()


@pytest.fixture
def clean_git_env(monkeypatch):
    """Remove environment variables that override the git settings."""
    for name in ("GIT_URL", "GIT_HOST_TYPE", "GIT_USERNAME", "GIT_TOKEN", "GIT_BRANCH", "DEBUG", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("git_api.config.settings.load_dotenv", lambda: None)


# Pytest configuration hooks
def pytest_configure(config):
    """Configure pytest with custom settings."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers automatically."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
