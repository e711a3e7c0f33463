"""
Query configuration for a single ghsemver invocation.
"""

from dataclasses import dataclass
from typing import Optional

from ..exit_codes import ConfigError
from .version import PRERELEASE_ID_PATTERN


@dataclass(frozen=True)
class VersionQuery:
    """
    Caller-supplied options for one version lookup.

    Empty strings are treated as "not given" so that CI inputs can be
    passed straight through.

    Attributes:
        branch: Branch to compute the version for (default: current branch)
        main_branch: Stable release branch (default: repository default)
        suffix: Prerelease identifier for non-main branches
        verbose: Emit diagnostic tracing; never changes the result
    """
    branch: Optional[str] = None
    main_branch: Optional[str] = None
    suffix: Optional[str] = None
    verbose: bool = False

    def __post_init__(self):
        # Frozen: normalise through object.__setattr__
        for name in ('branch', 'main_branch', 'suffix'):
            value = getattr(self, name)
            if value is not None:
                value = value.strip() or None
            object.__setattr__(self, name, value)

        if self.suffix is not None and not PRERELEASE_ID_PATTERN.match(self.suffix):
            raise ConfigError(
                f"Invalid prerelease suffix '{self.suffix}': "
                "only letters, digits and '-' are allowed"
            )
