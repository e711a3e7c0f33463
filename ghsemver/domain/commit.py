"""
Commit, ref and tag domain objects for ghsemver.

These are read-only views of repository history. Both the local git
source and the GitHub API source produce the same objects.
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Dict, Any


@dataclass(frozen=True)
class Ref:
    """
    A commit identifier with an optional symbolic name.

    Identity is the hash: Ref("abc", "main") == Ref("abc", "v1.0.0").
    """
    sha: str
    name: Optional[str] = field(default=None, compare=False)

    @property
    def short_sha(self) -> str:
        return self.sha[:7]


@dataclass(frozen=True)
class Commit:
    """A commit with its full message and author timestamp."""
    sha: str
    message: str
    date: str = ""

    @property
    def subject(self) -> str:
        """First line of the commit message."""
        return self.message.split('\n', 1)[0]

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'Commit':
        """Create from a GitHub API commit object."""
        commit = data.get('commit') or {}
        author = commit.get('author') or {}
        return cls(
            sha=data.get('sha', ''),
            message=commit.get('message', ''),
            date=author.get('date') or '',
        )


@dataclass(frozen=True)
class VersionTag:
    """A version tag bound to exactly one commit."""
    name: str
    sha: str

    @property
    def ref(self) -> Ref:
        return Ref(self.sha, self.name)

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'VersionTag':
        """Create from a GitHub API tag listing entry."""
        commit = data.get('commit') or {}
        return cls(name=data.get('name', ''), sha=commit.get('sha', ''))


# SSH: git@github.com:owner/repo.git
# HTTPS: https://github.com/owner/repo.git
_GITHUB_REMOTE_RE = re.compile(r'github\.com[:/]([^/]+)/(.+?)(?:\.git)?/?$')


@dataclass(frozen=True)
class RepoInfo:
    """GitHub owner and repository name."""
    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @classmethod
    def from_remote_url(cls, url: Optional[str]) -> Optional['RepoInfo']:
        """
        Parse owner/repo from a git remote URL.

        Args:
            url: Remote URL in SSH or HTTPS form

        Returns:
            RepoInfo, or None if the URL does not point at github.com
        """
        if not url:
            return None
        match = _GITHUB_REMOTE_RE.search(url.strip())
        if not match:
            return None
        return cls(owner=match.group(1), repo=match.group(2))
