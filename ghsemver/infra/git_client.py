"""
Git client infrastructure for ghsemver.

Provides a clean abstraction over git command execution.
All local git lookups go through this client, making them:
- Easy to mock for testing
- Consistent in error handling (failures become None / empty results)
- Isolated from version logic
"""

import subprocess
from typing import Optional, List, Tuple
import logging

from ..domain.commit import Commit

logger = logging.getLogger(__name__)

# Separators for machine-readable git log output
FIELD_SEP = '\x1f'
RECORD_SEP = '\x1e'


class GitClient:
    """
    Abstraction over git commands.

    Provides methods for the read-only git queries ghsemver needs,
    with consistent error handling and return types.

    Example:
        client = GitClient()
        branch = client.current_branch("/path/to/repo")
        if branch:
            print(f"On {branch}")
    """

    def __init__(self, timeout: int = 30):
        """
        Initialize GitClient.

        Args:
            timeout: Command timeout in seconds (default: 30)
        """
        self.timeout = timeout

    def _run(
        self,
        args: List[str],
        cwd: str,
    ) -> Tuple[Optional[str], int]:
        """
        Run a git command.

        Args:
            args: Arguments after 'git'
            cwd: Working directory

        Returns:
            Tuple of (stdout, returncode)
        """
        cmd = ['git'] + args
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )

            output = result.stdout
            return output.strip() if output else None, result.returncode

        except subprocess.TimeoutExpired:
            logger.warning(f"Git command timed out: {' '.join(cmd)}")
            return None, -1
        except (OSError, ValueError) as e:
            logger.error(f"Git command failed: {' '.join(cmd)} - {e}")
            return None, -1

    def is_git_repo(self, path: str) -> bool:
        """Check if path is inside a git work tree."""
        output, code = self._run(['rev-parse', '--is-inside-work-tree'], cwd=path)
        return code == 0 and output == 'true'

    def current_sha(self, path: str) -> Optional[str]:
        """Get the commit hash of HEAD."""
        return self.resolve_ref(path, 'HEAD')

    def current_branch(self, path: str) -> Optional[str]:
        """
        Get current branch name.

        Returns:
            Branch name, or None for a detached HEAD
        """
        output, code = self._run(['rev-parse', '--abbrev-ref', 'HEAD'], cwd=path)
        if code == 0 and output and output != 'HEAD':
            return output
        return None

    def remote_url(self, path: str, remote: str = "origin") -> Optional[str]:
        """
        Get remote URL.

        Args:
            path: Path to git repository
            remote: Remote name (default: "origin")

        Returns:
            Remote URL or None if not found
        """
        output, code = self._run(['config', '--get', f'remote.{remote}.url'], cwd=path)
        if code == 0 and output:
            return output
        return None

    def default_branch(self, path: str, remote: str = "origin") -> Optional[str]:
        """
        Get the remote's default branch from refs/remotes/<remote>/HEAD.

        Set by clone, or by 'git remote set-head <remote> --auto'.
        """
        output, code = self._run(
            ['symbolic-ref', '--short', f'refs/remotes/{remote}/HEAD'], cwd=path
        )
        if code != 0 or not output:
            return None
        prefix = f"{remote}/"
        return output[len(prefix):] if output.startswith(prefix) else output

    def resolve_ref(self, path: str, ref: str) -> Optional[str]:
        """Resolve a ref to a commit hash, or None if it does not exist."""
        output, code = self._run(
            ['rev-parse', '--verify', '--quiet', f'{ref}^{{commit}}'], cwd=path
        )
        if code == 0 and output:
            return output
        return None

    def tags(self, path: str, merged: Optional[str] = None) -> List[str]:
        """
        List tag names, highest version first.

        Args:
            path: Path to git repository
            merged: Only tags reachable from this branch/ref

        Returns:
            Tag names; empty if there are none or the ref is unknown
        """
        args = ['tag', '--sort=-version:refname']
        if merged:
            args += ['--merged', merged]

        output, code = self._run(args, cwd=path)
        if code != 0 or not output:
            return []
        return [line.strip() for line in output.split('\n') if line.strip()]

    def tag_commit(self, path: str, tag: str) -> Optional[str]:
        """Get the commit hash a tag points at (annotated tags are peeled)."""
        output, code = self._run(['rev-list', '-n', '1', f'refs/tags/{tag}'], cwd=path)
        if code == 0 and output:
            return output
        return None

    def commit_exists(self, path: str, sha: str) -> bool:
        """Check if a commit object is present in the local object store."""
        _, code = self._run(['cat-file', '-e', f'{sha}^{{commit}}'], cwd=path)
        return code == 0

    def log(self, path: str, base: Optional[str], head: str) -> List[Commit]:
        """
        List commits in (base, head], newest first.

        Args:
            path: Path to git repository
            base: Exclusive lower bound, or None for all history of head
            head: Inclusive upper bound

        Returns:
            List of Commit objects with full messages
        """
        revision = f'{base}..{head}' if base else head
        fmt = f'--format=%H{FIELD_SEP}%aI{FIELD_SEP}%B{RECORD_SEP}'

        output, code = self._run(['log', fmt, revision, '--'], cwd=path)
        if code != 0 or not output:
            return []

        commits = []
        for record in output.split(RECORD_SEP):
            record = record.strip('\n')
            if not record or FIELD_SEP not in record:
                continue

            parts = record.split(FIELD_SEP, 2)
            if len(parts) < 3:
                continue

            commits.append(Commit(
                sha=parts[0].strip(),
                message=parts[2].strip(),
                date=parts[1].strip(),
            ))

        return commits
