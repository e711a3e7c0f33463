"""
Version sources for ghsemver.

A version source answers the handful of repository questions the
version engine asks. There are two variants:
- LocalSource: the local checkout, through GitClient (cheap, may be shallow)
- RemoteSource: the GitHub API, through GitHubClient (authoritative, slow)

Sources return None or an empty list when they have no usable answer and
raise SourceUnavailableError when they cannot answer at all. They never
decide which source wins; that is the job of SourceChain.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, List

from ..domain.commit import Commit
from ..domain.version import is_version_tag
from ..exit_codes import SourceUnavailableError
from .git_client import GitClient
from .github_client import GitHubClient

logger = logging.getLogger(__name__)


class VersionSource(ABC):
    """Read-only repository capability used by the lookup services."""

    name: str = "source"

    @abstractmethod
    def current_branch(self) -> Optional[str]:
        """Name of the branch being built."""

    @abstractmethod
    def main_branch(self) -> Optional[str]:
        """Name of the repository's default branch."""

    @abstractmethod
    def branch_head(self, branch: str) -> Optional[str]:
        """Head commit hash of a branch."""

    @abstractmethod
    def version_tags(self, branch: str) -> List[str]:
        """Version tags reachable from a branch, newest first."""

    @abstractmethod
    def tag_commit(self, tag: str) -> Optional[str]:
        """Commit hash of a tag."""

    @abstractmethod
    def commits_between(self, base: Optional[str], head: str) -> Optional[List[Commit]]:
        """Commits in (base, head], or None when this source cannot vouch for them."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class LocalSource(VersionSource):
    """
    Version source backed by the local git checkout.

    Args:
        path: Path inside the repository
        git_client: GitClient to run commands with
        remote: Remote used for remote-tracking branches and origin/HEAD
    """

    name = "local git"

    def __init__(self, path: str = ".", git_client: Optional[GitClient] = None, remote: str = "origin"):
        self.path = path
        self.git = git_client or GitClient()
        self.remote = remote
        self._is_repo: Optional[bool] = None

    def _require_repo(self) -> None:
        if self._is_repo is None:
            self._is_repo = self.git.is_git_repo(self.path)
        if not self._is_repo:
            raise SourceUnavailableError(self.name, f"{self.path} is not a git repository")

    def current_sha(self) -> Optional[str]:
        self._require_repo()
        return self.git.current_sha(self.path)

    def current_branch(self) -> Optional[str]:
        self._require_repo()
        return self.git.current_branch(self.path)

    def main_branch(self) -> Optional[str]:
        self._require_repo()
        return self.git.default_branch(self.path, self.remote)

    def remote_url(self) -> Optional[str]:
        self._require_repo()
        return self.git.remote_url(self.path, self.remote)

    def _branch_ref(self, branch: str) -> Optional[str]:
        """
        Find a local ref for a branch name.

        A detached HEAD (the usual CI checkout) is taken to be the
        requested branch when no branch ref exists.
        """
        checked_out = self.git.current_branch(self.path)
        if checked_out == branch:
            return 'HEAD'

        for ref in (f'refs/heads/{branch}', f'refs/remotes/{self.remote}/{branch}'):
            if self.git.resolve_ref(self.path, ref):
                return ref

        if checked_out is None:
            return 'HEAD'
        return None

    def branch_head(self, branch: str) -> Optional[str]:
        self._require_repo()
        ref = self._branch_ref(branch)
        return self.git.resolve_ref(self.path, ref) if ref else None

    def version_tags(self, branch: str) -> List[str]:
        self._require_repo()
        ref = self._branch_ref(branch)
        if not ref:
            return []
        return [t for t in self.git.tags(self.path, merged=ref) if is_version_tag(t)]

    def tag_commit(self, tag: str) -> Optional[str]:
        self._require_repo()
        return self.git.tag_commit(self.path, tag)

    def commit_exists(self, sha: str) -> bool:
        self._require_repo()
        return self.git.commit_exists(self.path, sha)

    def commits_between(self, base: Optional[str], head: str) -> Optional[List[Commit]]:
        self._require_repo()

        # A shallow or partial clone may lack either end of the range
        if base and not self.commit_exists(base):
            logger.debug(f"Base commit {base[:7]} not found locally")
            return None
        if not self.commit_exists(head):
            logger.debug(f"Head commit {head[:7]} not found locally")
            return None

        commits = self.git.log(self.path, base, head)
        if not commits:
            return None
        return commits


class RemoteSource(VersionSource):
    """
    Version source backed by the GitHub API.

    Args:
        client: GitHubClient for the repository, or None when the
            repository could not be identified
        head_sha: Locally checked-out commit, used to find the current branch
    """

    name = "GitHub API"

    def __init__(self, client: Optional[GitHubClient], head_sha: Optional[str] = None):
        self.client = client
        self.head_sha = head_sha

    def _require_client(self) -> GitHubClient:
        if self.client is None:
            raise SourceUnavailableError(self.name, "no GitHub repository configured")
        return self.client

    def current_branch(self) -> Optional[str]:
        client = self._require_client()
        if not self.head_sha:
            return None
        branches = client.branches_for_commit(self.head_sha)
        return branches[0] if branches else None

    def main_branch(self) -> Optional[str]:
        return self._require_client().get_default_branch()

    def branch_head(self, branch: str) -> Optional[str]:
        return self._require_client().get_branch_head(branch)

    def version_tags(self, branch: str) -> List[str]:
        client = self._require_client()
        branch_shas = {c.sha for c in client.list_commits(branch)}
        if not branch_shas:
            return []
        return [
            tag.name for tag in client.list_tags()
            if is_version_tag(tag.name) and tag.sha in branch_shas
        ]

    def tag_commit(self, tag: str) -> Optional[str]:
        return self._require_client().get_tag_commit(tag)

    def commits_between(self, base: Optional[str], head: str) -> Optional[List[Commit]]:
        client = self._require_client()
        if base:
            return client.compare(base, head)
        return client.list_commits(head)
