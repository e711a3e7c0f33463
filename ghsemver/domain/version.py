"""
Version domain objects for ghsemver.

SemanticVersion is an immutable MAJOR.MINOR.PATCH triple with an optional
prerelease qualifier of the form IDENTIFIER.COUNTER (e.g. 1.4.0-dev.3).
ReleaseType is the ordered release decision derived from commits.
"""

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


TAG_PREFIX = "v"

# Tag name patterns used by both sources
STABLE_TAG_PATTERN = re.compile(r'^v\d+\.\d+\.\d+$')
ANY_TAG_PATTERN = re.compile(r'^v\d+\.\d+\.\d+')

PRERELEASE_ID_PATTERN = re.compile(r'^[0-9A-Za-z-]+$')

_VERSION_RE = re.compile(
    r'^v?(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)'
    r'(?:-(?P<pre_id>[0-9A-Za-z-]+)\.(?P<pre_num>\d+))?$'
)


class ReleaseType(IntEnum):
    """Release decision, ordered by priority (NONE lowest, MAJOR highest)."""
    NONE = 0
    PATCH = 1
    MINOR = 2
    MAJOR = 3

    def __str__(self) -> str:
        return self.name.lower()

    def __format__(self, format_spec: str) -> str:
        return format(str(self), format_spec)


@dataclass(frozen=True)
class SemanticVersion:
    """
    Semantic version with an optional numbered prerelease qualifier.

    Examples:
        SemanticVersion.parse("1.2.3")        -> SemanticVersion(1, 2, 3)
        SemanticVersion.parse("v2.0.0-rc.4")  -> SemanticVersion(2, 0, 0, "rc", 4)

    Attributes:
        major: Major version number
        minor: Minor version number
        patch: Patch version number
        prerelease_id: Prerelease identifier (e.g. "dev"), None for stable
        prerelease_number: Prerelease counter, present iff prerelease_id is
    """

    major: int
    minor: int
    patch: int
    prerelease_id: Optional[str] = None
    prerelease_number: Optional[int] = None

    def __post_init__(self):
        for name in ('major', 'minor', 'patch'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        if (self.prerelease_id is None) != (self.prerelease_number is None):
            raise ValueError(
                "prerelease_id and prerelease_number must be given together"
            )
        if self.prerelease_number is not None and self.prerelease_number < 0:
            raise ValueError("prerelease_number must be non-negative")
        if self.prerelease_id is not None and not PRERELEASE_ID_PATTERN.match(self.prerelease_id):
            raise ValueError(f"invalid prerelease_id: {self.prerelease_id!r}")

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional['SemanticVersion']:
        """
        Parse a version string or tag name.

        Args:
            text: Version such as "1.2.3", "v1.2.3" or "1.2.3-dev.2"

        Returns:
            SemanticVersion, or None if text is not a version
        """
        if not text:
            return None

        match = _VERSION_RE.match(text.strip())
        if not match:
            return None

        pre_num = match.group('pre_num')
        return cls(
            major=int(match.group('major')),
            minor=int(match.group('minor')),
            patch=int(match.group('patch')),
            prerelease_id=match.group('pre_id'),
            prerelease_number=int(pre_num) if pre_num is not None else None,
        )

    @property
    def is_prerelease(self) -> bool:
        return self.prerelease_id is not None

    @property
    def triple(self):
        return (self.major, self.minor, self.patch)

    @property
    def tag_name(self) -> str:
        return to_tag_name(str(self))

    def stable(self) -> 'SemanticVersion':
        """Return this version without its prerelease qualifier."""
        return SemanticVersion(self.major, self.minor, self.patch)

    def with_prerelease(self, prerelease_id: str, number: int = 1) -> 'SemanticVersion':
        """Return the stable triple qualified with prerelease_id.number."""
        return SemanticVersion(self.major, self.minor, self.patch, prerelease_id, number)

    def __str__(self) -> str:
        version = f"{self.major}.{self.minor}.{self.patch}"
        if self.is_prerelease:
            version += f"-{self.prerelease_id}.{self.prerelease_number}"
        return version


def normalize_version(version: str) -> str:
    """Strip a leading 'v' from a tag name ("v1.2.3" -> "1.2.3")."""
    return version[len(TAG_PREFIX):] if version.startswith(TAG_PREFIX) else version


def to_tag_name(version: str) -> str:
    """Prefix a version string with 'v' ("1.2.3" -> "v1.2.3")."""
    return version if version.startswith(TAG_PREFIX) else f"{TAG_PREFIX}{version}"


def is_version_tag(name: str, stable_only: bool = False) -> bool:
    """
    Check whether a tag name looks like a version tag.

    Args:
        name: Tag name
        stable_only: Only accept the exact vMAJOR.MINOR.PATCH form

    Returns:
        True if the tag matches the requested pattern
    """
    pattern = STABLE_TAG_PATTERN if stable_only else ANY_TAG_PATTERN
    return bool(pattern.match(name))


def sanitize_prerelease_id(value: str) -> str:
    """
    Turn an arbitrary string (typically a branch name) into a prerelease id.

    Characters outside [0-9A-Za-z-] become '-', e.g. "feature/login" ->
    "feature-login".
    """
    cleaned = re.sub(r'[^0-9A-Za-z-]+', '-', value).strip('-')
    return cleaned
