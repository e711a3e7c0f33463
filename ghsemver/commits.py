"""
Conventional Commits classification for ghsemver.

Maps commit messages to release types:
- Breaking change ("type!:" or a BREAKING CHANGE footer) -> major
- feat / feature -> minor
- fix / perf -> patch
- anything else -> none
"""

import re
from typing import Iterable, Optional

from .domain.commit import Commit
from .domain.version import ReleaseType

# type(scope)!: description
SUBJECT_PATTERN = re.compile(r'^(?P<type>\w+)(?P<scope>\(.+?\))?(?P<breaking>!)?:')

BREAKING_FOOTER_PATTERN = re.compile(r'^BREAKING[ -]CHANGE:', re.MULTILINE)

TYPE_RELEASES = {
    'feat': ReleaseType.MINOR,
    'feature': ReleaseType.MINOR,
    'fix': ReleaseType.PATCH,
    'perf': ReleaseType.PATCH,
}


def is_breaking_change(message: str) -> bool:
    """
    Check a commit message for a breaking-change marker.

    Either '!' right before the subject's colon, or a line starting with
    "BREAKING CHANGE:" / "BREAKING-CHANGE:".
    """
    match = SUBJECT_PATTERN.match(message.split('\n', 1)[0])
    if match and match.group('breaking'):
        return True
    return bool(BREAKING_FOOTER_PATTERN.search(message))


def parse_commit_type(message: str) -> Optional[str]:
    """Return the lowercased type keyword of a conventional subject, or None."""
    match = SUBJECT_PATTERN.match(message.split('\n', 1)[0])
    if not match:
        return None
    return match.group('type').lower()


def classify_commit(message: str) -> ReleaseType:
    """
    Classify one commit message.

    Args:
        message: Full commit message (subject and optional body)

    Returns:
        ReleaseType signalled by the message; never raises
    """
    if is_breaking_change(message):
        return ReleaseType.MAJOR

    commit_type = parse_commit_type(message)
    if commit_type is None:
        return ReleaseType.NONE

    return TYPE_RELEASES.get(commit_type, ReleaseType.NONE)


def analyze_commits(commits: Iterable[Commit]) -> ReleaseType:
    """
    Fold commits into a single release decision.

    The highest release type wins; a major change decides immediately.
    An empty sequence yields ReleaseType.NONE.
    """
    release_type = ReleaseType.NONE

    for commit in commits:
        commit_release = classify_commit(commit.message)
        if commit_release == ReleaseType.MAJOR:
            return ReleaseType.MAJOR
        release_type = max(release_type, commit_release)

    return release_type
