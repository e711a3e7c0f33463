"""
Lookup services for ghsemver.

Every repository question is answered by asking the local checkout
first and the GitHub API second:
- SourceChain: The local-then-remote combinator shared by all lookups
- BranchResolver: Current branch, main branch, branch heads
- TagLocator: Latest version tag, reachable tags, tag commits
- CommitRangeFetcher: Commits between two commits
"""

import logging
from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

from ..domain.commit import Commit
from ..domain.version import is_version_tag
from ..exit_codes import SourceUnavailableError
from ..infra.sources import VersionSource

logger = logging.getLogger(__name__)

T = TypeVar('T')

Trace = Callable[[str], None]


@dataclass(frozen=True)
class Lookup(Generic[T]):
    """
    Result of a chained lookup.

    Attributes:
        value: The answer, or None when no source had one
        source: Name of the source that answered
    """
    value: Optional[T] = None
    source: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.source is not None


def _is_usable(value) -> bool:
    if value is None:
        return False
    if isinstance(value, (str, list, tuple, set)):
        return len(value) > 0
    return True


class SourceChain:
    """
    Ask sources in order until one gives a usable answer.

    None, empty strings and empty collections are not usable. A source
    raising SourceUnavailableError is skipped. The chain itself never
    raises for a missing answer; it returns an empty Lookup.

    Example:
        chain = SourceChain([local, remote], trace=print)
        lookup = chain.first("main branch", lambda s: s.main_branch())
        if lookup.found:
            print(lookup.value, "from", lookup.source)
    """

    def __init__(self, sources: Sequence[VersionSource], trace: Optional[Trace] = None):
        self.sources = list(sources)
        self._trace = trace or logger.debug

    def first(self, what: str, query: Callable[[VersionSource], Optional[T]]) -> Lookup[T]:
        """
        Run query against each source until one answers.

        Args:
            what: Description used in diagnostic tracing
            query: Function asking a single source

        Returns:
            Lookup with the first usable value, or an empty Lookup
        """
        for source in self.sources:
            try:
                value = query(source)
            except SourceUnavailableError as e:
                self._trace(f"{what}: {e}")
                continue

            if _is_usable(value):
                self._trace(f"{what}: found via {source.name}")
                return Lookup(value, source.name)

            self._trace(f"{what}: nothing usable from {source.name}")

        return Lookup()


class BranchResolver:
    """Resolve the current branch, the main branch and branch heads."""

    def __init__(self, chain: SourceChain):
        self.chain = chain

    def current_branch(self) -> Lookup[str]:
        return self.chain.first("current branch", lambda s: s.current_branch())

    def main_branch(self) -> Lookup[str]:
        return self.chain.first("main branch", lambda s: s.main_branch())

    def branch_head(self, branch: str) -> Lookup[str]:
        return self.chain.first(f"head of {branch}", lambda s: s.branch_head(branch))


def first_matching_tag(tags: Sequence[str], stable_only: bool) -> Optional[str]:
    """
    Return the first version tag in source order.

    No semantic version comparison is done; sources list newest first.
    """
    for tag in tags:
        if is_version_tag(tag, stable_only=stable_only):
            return tag
    return None


class TagLocator:
    """Find version tags reachable from a branch."""

    def __init__(self, chain: SourceChain):
        self.chain = chain

    def latest_tag(self, branch: str, stable_only: bool = False) -> Lookup[str]:
        """
        Find the latest version tag reachable from a branch.

        Args:
            branch: Branch name
            stable_only: Only match vMAJOR.MINOR.PATCH exactly

        Returns:
            Lookup with the tag name
        """
        kind = "stable tag" if stable_only else "tag"
        return self.chain.first(
            f"latest {kind} on {branch}",
            lambda s: first_matching_tag(s.version_tags(branch), stable_only),
        )

    def reachable_tags(self, branch: str) -> Lookup[List[str]]:
        """All version tags reachable from a branch, newest first."""
        return self.chain.first(f"tags on {branch}", lambda s: s.version_tags(branch))

    def tag_commit(self, tag: str) -> Lookup[str]:
        return self.chain.first(f"commit of {tag}", lambda s: s.tag_commit(tag))


class CommitRangeFetcher:
    """Fetch the commits in (base, head]."""

    def __init__(self, chain: SourceChain):
        self.chain = chain

    def fetch(self, base: Optional[str], head: str) -> Lookup[List[Commit]]:
        """
        Fetch commits after base up to and including head.

        The local source only answers when it holds the base commit, so a
        shallow clone falls through to the API.

        Args:
            base: Exclusive lower bound, or None for all of head's history
            head: Inclusive upper bound

        Returns:
            Lookup with the commits (empty value when base == head)
        """
        if base and base == head:
            return Lookup([], None)

        what = f"commits {base[:7]}..{head[:7]}" if base else f"commits up to {head[:7]}"
        return self.chain.first(what, lambda s: s.commits_between(base, head))
