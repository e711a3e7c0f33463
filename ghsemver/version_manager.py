"""
Version arithmetic for ghsemver.

Handles:
- Bumping a stable MAJOR.MINOR.PATCH triple by release type
- Stable versions on the main branch, IDENTIFIER.N prereleases elsewhere
- Prerelease renumbering against already-published tags
"""

import logging
from typing import Callable, Iterable, Optional, Tuple

from .domain.version import ReleaseType, SemanticVersion

logger = logging.getLogger(__name__)

DEFAULT_PRERELEASE_ID = "dev"

ZERO_VERSION = SemanticVersion(0, 0, 0)


class VersionBumper:
    """Bump semantic versions. Prerelease qualifiers are dropped first."""

    @staticmethod
    def bump_major(version: SemanticVersion) -> SemanticVersion:
        """Bump major version (X.0.0)."""
        return SemanticVersion(version.major + 1, 0, 0)

    @staticmethod
    def bump_minor(version: SemanticVersion) -> SemanticVersion:
        """Bump minor version (x.Y.0)."""
        return SemanticVersion(version.major, version.minor + 1, 0)

    @staticmethod
    def bump_patch(version: SemanticVersion) -> SemanticVersion:
        """Bump patch version (x.y.Z)."""
        return SemanticVersion(version.major, version.minor, version.patch + 1)

    @classmethod
    def bump(cls, version: SemanticVersion, release_type: ReleaseType) -> Optional[SemanticVersion]:
        """
        Bump by release type.

        Returns:
            Bumped stable version, or None for ReleaseType.NONE
        """
        if release_type == ReleaseType.MAJOR:
            return cls.bump_major(version)
        if release_type == ReleaseType.MINOR:
            return cls.bump_minor(version)
        if release_type == ReleaseType.PATCH:
            return cls.bump_patch(version)
        return None


def calculate_next_version(
    base_version: Optional[SemanticVersion],
    release_type: ReleaseType,
    is_main_branch: bool,
    suffix: Optional[str] = None,
) -> Optional[SemanticVersion]:
    """
    Calculate the next version.

    Args:
        base_version: Latest released version, or None for a fresh project
        release_type: Release decision from the commit history
        is_main_branch: Stable release on main, prerelease elsewhere
        suffix: Prerelease identifier for non-main branches (default "dev")

    Returns:
        Next version, or None when no bump is warranted
    """
    if release_type == ReleaseType.NONE:
        return None

    base = (base_version or ZERO_VERSION).stable()
    next_stable = VersionBumper.bump(base, release_type)
    if next_stable is None:
        return None

    if is_main_branch:
        return next_stable

    return next_stable.with_prerelease(suffix or DEFAULT_PRERELEASE_ID, 1)


def find_latest_prerelease(
    candidate: SemanticVersion,
    tag_names: Iterable[str],
) -> Optional[Tuple[str, SemanticVersion]]:
    """
    Find the highest published prerelease in the candidate's series.

    A tag is in the series when its stable triple and prerelease identifier
    both equal the candidate's.

    Returns:
        (tag_name, version) of the highest counter, or None
    """
    latest = None
    for name in tag_names:
        version = SemanticVersion.parse(name)
        if version is None or not version.is_prerelease:
            continue
        if version.triple != candidate.triple or version.prerelease_id != candidate.prerelease_id:
            continue
        if latest is None or version.prerelease_number > latest[1].prerelease_number:
            latest = (name, version)
    return latest


class PrereleaseReconciler:
    """
    Keep prerelease numbers unique and avoid empty re-bumps.

    Example:
        reconciler = PrereleaseReconciler(tag_commit, release_since)
        final = reconciler.reconcile(candidate, tag_names)

    Args:
        tag_commit: Resolves a tag name to its commit hash (or None)
        release_since: Release type of the commits after a given commit hash
        trace: Optional diagnostic sink
    """

    def __init__(
        self,
        tag_commit: Callable[[str], Optional[str]],
        release_since: Callable[[str], ReleaseType],
        trace: Optional[Callable[[str], None]] = None,
    ):
        self.tag_commit = tag_commit
        self.release_since = release_since
        self._trace = trace or logger.debug

    def reconcile(
        self,
        candidate: SemanticVersion,
        tag_names: Iterable[str],
    ) -> Optional[SemanticVersion]:
        """
        Decide the prerelease version to emit.

        Args:
            candidate: Freshly computed prerelease (counter 1)
            tag_names: Tags reachable from the current branch

        Returns:
            The candidate, the next free counter, or None when nothing
            qualifying happened since the last prerelease
        """
        if not candidate.is_prerelease:
            return candidate

        latest = find_latest_prerelease(candidate, tag_names)
        if latest is None:
            return candidate

        tag_name, existing = latest
        self._trace(f"Latest prerelease in series: {tag_name}")

        tag_sha = self.tag_commit(tag_name)
        if not tag_sha:
            self._trace(f"Commit for {tag_name} not found, skipping bump")
            return None

        release_type = self.release_since(tag_sha)
        self._trace(f"Release type since {tag_name}: {release_type}")
        if release_type == ReleaseType.NONE:
            return None

        next_version = candidate.with_prerelease(
            candidate.prerelease_id, existing.prerelease_number + 1
        )
        self._trace(f"Found existing prerelease versions, incrementing to {next_version}")
        return next_version
