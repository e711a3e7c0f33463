"""
Infrastructure layer for ghsemver.

Contains abstractions for external systems:
- GitClient: Git command execution
- GitHubClient: GitHub API access
- LocalSource / RemoteSource: The two VersionSource variants built on them

These provide clean interfaces that can be mocked for testing.
"""

from .git_client import GitClient
from .github_client import GitHubClient, RateLimitStatus
from .sources import VersionSource, LocalSource, RemoteSource

__all__ = [
    'GitClient',
    'GitHubClient',
    'RateLimitStatus',
    'VersionSource',
    'LocalSource',
    'RemoteSource',
]
