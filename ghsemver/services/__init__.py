"""
Service layer for ghsemver.

Services hold the version logic on top of the infrastructure layer:
- Lookup services: local-then-remote branch, tag and commit lookups
- VersionService: current and next version resolution
"""

from .lookup_service import (
    Lookup,
    SourceChain,
    BranchResolver,
    TagLocator,
    CommitRangeFetcher,
)
from .version_service import VersionService

__all__ = [
    'Lookup',
    'SourceChain',
    'BranchResolver',
    'TagLocator',
    'CommitRangeFetcher',
    'VersionService',
]
