"""
Configuration management for the Git provider API.
"""
import os
from pathlib import Path
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field
import yaml
from dotenv import load_dotenv


@dataclass
class AppConfig:
    """Application-level configuration."""
    name: str = "Git Provider API"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"


@dataclass
class HttpConfig:
    """Outbound HTTP configuration shared by all adapters."""
    timeout: int = 30
    user_agent_suffix: str = "via ibm-garage-cloud cli"


@dataclass
class RetryConfig:
    """Secondary rate limit backoff configuration."""
    default_retry_after: int = 30


@dataclass
class GitConfig:
    """Repository the CLI operates on."""
    host_type: Optional[str] = None
    url: Optional[str] = None
    owner: Optional[str] = None
    repo: Optional[str] = None
    protocol: str = "https"
    host: Optional[str] = None
    username: Optional[str] = None
    token: Optional[str] = None
    branch: Optional[str] = None


@dataclass
class LoggingConfig:
    """Logging configuration."""
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str = "logs/git_api.log"
    max_size_mb: int = 10
    backup_count: int = 5


@dataclass
class Settings:
    """Main configuration class."""
    app: AppConfig = field(default_factory=AppConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    git: GitConfig = field(default_factory=GitConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load_from_file(cls, config_path: Optional[str] = None) -> "Settings":
        """Load settings from YAML file and environment variables."""
        load_dotenv()

        if config_path is None:
            config_path = os.getenv("CONFIG_FILE", "config/config.yaml")

        config_path = Path(config_path)

        config_data = {}
        if config_path.exists():
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f) or {}

        settings = cls()

        if config_data:
            settings._update_from_dict(config_data)

        # Environment wins over the file
        settings._update_from_env()

        return settings

    def _update_from_dict(self, data: Dict[str, Any]) -> None:
        """Update settings from dictionary."""
        for section in ("app", "http", "retry", "git", "logging"):
            if section in data and isinstance(data[section], dict):
                self._update_dataclass(getattr(self, section), data[section])

    def _update_from_env(self) -> None:
        """Update settings from environment variables"""
        env_map = {
            "GIT_URL": "url",
            "GIT_HOST_TYPE": "host_type",
            "GIT_USERNAME": "username",
            "GIT_TOKEN": "token",
            "GIT_BRANCH": "branch",
        }
        for env_name, attr in env_map.items():
            if os.getenv(env_name):
                setattr(self.git, attr, os.getenv(env_name))

        if os.getenv("DEBUG"):
            self.app.debug = os.getenv("DEBUG").lower() in ("true", "1", "yes")

        if os.getenv("LOG_LEVEL"):
            self.app.log_level = os.getenv("LOG_LEVEL")

    @staticmethod
    def _update_dataclass(instance: Any, data: Dict[str, Any]) -> None:
        """Update a dataclass instance with dictionary data."""
        for key, value in data.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.git.url and not (self.git.owner and self.git.repo):
            errors.append("Repository is required (set GIT_URL or git.owner and git.repo)")

        if not self.git.username:
            errors.append("Git username is required (set GIT_USERNAME environment variable)")

        if not self.git.token:
            errors.append("Git token is required (set GIT_TOKEN environment variable)")

        if self.git.host_type:
            valid_hosts = ["github", "github_enterprise", "gitlab", "bitbucket"]
            if self.git.host_type not in valid_hosts:
                errors.append(f"Host type must be one of: {valid_hosts}")

        if self.http.timeout <= 0:
            errors.append("HTTP timeout must be positive")

        return errors

    def repo_config(self):
        """Build the RepoConfig described by the ``git`` section."""
        from git_api.core.models import RepoConfig
        from git_api.core.exceptions import ConfigurationError

        errors = self.validate()
        if errors:
            raise ConfigurationError("Invalid git configuration", "; ".join(errors))

        if self.git.url:
            return RepoConfig.from_url(
                self.git.url,
                username=self.git.username,
                password=self.git.token,
                branch=self.git.branch,
            )

        return RepoConfig(
            owner=self.git.owner,
            repo=self.git.repo,
            username=self.git.username,
            password=self.git.token,
            protocol=self.git.protocol,
            host=self.git.host,
            branch=self.git.branch,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary for serialization."""
        return {
            "app": self.app.__dict__,
            "http": self.http.__dict__,
            "retry": self.retry.__dict__,
            "git": {k: v for k, v in self.git.__dict__.items() if k != "token"},
            "logging": self.logging.__dict__,
        }


# Global settings instance
_settings: Optional[Settings] = None


def get_settings(config_path: Optional[str] = None, reload: bool = False) -> Settings:
    """Get the global settings instance."""
    global _settings

    if _settings is None or reload:
        _settings = Settings.load_from_file(config_path)

    return _settings


def reload_settings(config_path: Optional[str] = None) -> Settings:
    """Reload settings from file."""
    return get_settings(config_path, reload=True)
