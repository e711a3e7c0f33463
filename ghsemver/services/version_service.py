"""
Version resolution service for ghsemver.

Orchestrates the lookup services and the version arithmetic:
branch -> tag -> commit range -> classification -> arithmetic
-> prerelease reconciliation.
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from ..commits import analyze_commits
from ..domain.commit import Commit
from ..domain.query import VersionQuery
from ..domain.version import (
    ReleaseType,
    SemanticVersion,
    normalize_version,
    sanitize_prerelease_id,
)
from ..infra.sources import VersionSource
from ..version_manager import (
    DEFAULT_PRERELEASE_ID,
    PrereleaseReconciler,
    calculate_next_version,
)
from .lookup_service import (
    BranchResolver,
    CommitRangeFetcher,
    SourceChain,
    TagLocator,
)

logger = logging.getLogger(__name__)


class VersionService:
    """
    Answer "current version" and "next version" for one repository.

    Sources are asked in the given order, normally local git then the
    GitHub API. Every "not found" becomes None; nothing is raised.

    Example:
        service = VersionService([LocalSource("."), RemoteSource(client)])
        version = service.next_version(VersionQuery(suffix="beta"))
        if version:
            print(version)
    """

    def __init__(
        self,
        sources: Sequence[VersionSource],
        trace: Optional[Callable[[str], None]] = None,
        default_suffix: str = DEFAULT_PRERELEASE_ID,
    ):
        self._trace = trace or logger.debug
        self.chain = SourceChain(sources, trace=self._trace)
        self.branches = BranchResolver(self.chain)
        self.tags = TagLocator(self.chain)
        self.commits = CommitRangeFetcher(self.chain)
        self.default_suffix = default_suffix

    def _resolve_branches(self, query: VersionQuery) -> Tuple[Optional[str], Optional[str]]:
        branch = query.branch or self.branches.current_branch().value
        if not branch:
            self._trace("Current branch could not be determined")
            return None, None
        self._trace(f"Current branch: {branch}")

        main_branch = query.main_branch or self.branches.main_branch().value
        if not main_branch:
            self._trace("Main branch could not be determined")
            return branch, None
        self._trace(f"Main branch: {main_branch}")

        return branch, main_branch

    def current_version(self, query: VersionQuery) -> Optional[str]:
        """
        Latest version tag reachable from the branch, without the 'v'.

        On the main branch only stable tags count.

        Returns:
            Version string, or None when there is no tag
        """
        branch, main_branch = self._resolve_branches(query)
        if not branch or not main_branch:
            return None

        lookup = self.tags.latest_tag(branch, stable_only=(branch == main_branch))
        if not lookup.found:
            self._trace("Current version: none")
            return None

        version = normalize_version(lookup.value)
        self._trace(f"Current version: {version} ({lookup.source})")
        return version

    def _base_tag(self, branch: str, main_branch: str) -> Tuple[Optional[str], Optional[str]]:
        """Latest stable tag on the branch, else on the main branch."""
        lookup = self.tags.latest_tag(branch, stable_only=True)
        if lookup.found:
            return lookup.value, lookup.source

        if branch != main_branch:
            lookup = self.tags.latest_tag(main_branch, stable_only=True)
            if lookup.found:
                return lookup.value, f"{lookup.source}, from {main_branch}"

        return None, None

    def _release_type(self, base: Optional[str], head: str) -> ReleaseType:
        lookup = self.commits.fetch(base, head)
        commits: List[Commit] = lookup.value or []
        self._trace(f"Analyzing {len(commits)} commit(s) ({lookup.source or 'none'})")
        return analyze_commits(commits)

    def next_version(self, query: VersionQuery) -> Optional[SemanticVersion]:
        """
        Compute the next version from the commits since the last release.

        Returns:
            Next version, or None when nothing qualifies for a release or
            a lookup could not be answered
        """
        branch, main_branch = self._resolve_branches(query)
        if not branch or not main_branch:
            return None
        is_main = branch == main_branch

        base_tag, tag_source = self._base_tag(branch, main_branch)
        base_version = SemanticVersion.parse(base_tag) if base_tag else None
        self._trace(f"Base version: {base_version or 'none'} ({tag_source or 'no tag'})")

        base_sha = None
        if base_tag:
            lookup = self.tags.tag_commit(base_tag)
            if not lookup.found:
                self._trace(f"Commit for {base_tag} not found")
                return None
            base_sha = lookup.value
            self._trace(f"Tag commit: {base_sha[:7]} ({lookup.source})")

        head_lookup = self.branches.branch_head(branch)
        if not head_lookup.found:
            self._trace(f"Head of {branch} not found")
            return None
        head_sha = head_lookup.value

        release_type = self._release_type(base_sha, head_sha)
        self._trace(f"Release type: {release_type}")

        suffix = None
        if not is_main:
            suffix = query.suffix or sanitize_prerelease_id(branch) or self.default_suffix

        candidate = calculate_next_version(base_version, release_type, is_main, suffix)
        if candidate is None:
            self._trace("No release-worthy commits")
            return None

        if candidate.is_prerelease:
            reachable = self.tags.reachable_tags(branch).value or []
            reconciler = PrereleaseReconciler(
                tag_commit=lambda tag: self.tags.tag_commit(tag).value,
                release_since=lambda sha: self._release_type(sha, head_sha),
                trace=self._trace,
            )
            candidate = reconciler.reconcile(candidate, reachable)
            if candidate is None:
                return None

        self._trace(f"Next version: {candidate}")
        return candidate
