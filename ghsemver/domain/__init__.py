"""
Domain layer for ghsemver.

Contains pure domain objects with no I/O or side effects:
- SemanticVersion: MAJOR.MINOR.PATCH with optional IDENTIFIER.N prerelease
- ReleaseType: Ordered release decision (none < patch < minor < major)
- Commit, Ref, VersionTag: Read-only views of repository history
- RepoInfo: GitHub owner/repo parsed from a remote URL
- VersionQuery: Options for one invocation
"""

from .version import (
    ReleaseType,
    SemanticVersion,
    normalize_version,
    to_tag_name,
    is_version_tag,
    sanitize_prerelease_id,
)
from .commit import Commit, Ref, VersionTag, RepoInfo
from .query import VersionQuery

__all__ = [
    'ReleaseType',
    'SemanticVersion',
    'normalize_version',
    'to_tag_name',
    'is_version_tag',
    'sanitize_prerelease_id',
    'Commit',
    'Ref',
    'VersionTag',
    'RepoInfo',
    'VersionQuery',
]
