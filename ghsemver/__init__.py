"""
ghsemver - Semantic versioning from Conventional Commits history.

Computes the current and next semantic version of a repository from its
tags and commit messages, reading the local checkout first and the
GitHub API when local history is missing.

Quick Start:
    import ghsemver

    # Latest version tag on the current branch
    print(ghsemver.get_current_version())

    # Next version, e.g. "1.4.0" on main or "1.4.0-feature-x.1" elsewhere
    print(ghsemver.get_next_version())

    # With overrides
    query = ghsemver.VersionQuery(branch="develop", main_branch="main", suffix="beta")
    print(ghsemver.get_next_version(query))

Classification:
    feat!: / BREAKING CHANGE:  -> major
    feat: / feature:           -> minor
    fix: / perf:               -> patch
    anything else              -> no release
"""

__version__ = "1.0.0"

# High-level API
from .api import get_current_version, get_next_version

# Domain objects
from .domain import (
    ReleaseType,
    SemanticVersion,
    VersionQuery,
    Commit,
    VersionTag,
    RepoInfo,
    normalize_version,
    to_tag_name,
)

# Version logic (for advanced use)
from .commits import classify_commit, analyze_commits
from .version_manager import calculate_next_version
from .services import VersionService

# Errors
from .exit_codes import ConfigError

# Configuration
from .config import load_config

__all__ = [
    # Version
    "__version__",
    # High-level API
    "get_current_version",
    "get_next_version",
    # Domain objects
    "ReleaseType",
    "SemanticVersion",
    "VersionQuery",
    "Commit",
    "VersionTag",
    "RepoInfo",
    "normalize_version",
    "to_tag_name",
    # Version logic
    "classify_commit",
    "analyze_commits",
    "calculate_next_version",
    "VersionService",
    # Errors
    "ConfigError",
    # Configuration
    "load_config",
]
