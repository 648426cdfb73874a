"""Uniform API over GitHub, GitHub Enterprise, GitLab and Bitbucket."""

# Initialize logging when package is imported
from .utils.logger import LoggerSetup

LoggerSetup.setup_logging()

__version__ = "0.1.0"
