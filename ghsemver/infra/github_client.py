"""
GitHub API client infrastructure for ghsemver.

Provides a clean abstraction over the read-only GitHub REST calls
ghsemver needs:
- Uses `gh` CLI when available for authentication
- Falls back to requests with token
- Handles rate limiting with exponential backoff
- Bounded pagination for tag and commit listings
"""

import subprocess
import json
import os
import time
import logging
from dataclasses import dataclass
from typing import Optional, List, Dict, Any
from urllib.parse import quote

import requests

from ..domain.commit import Commit, RepoInfo, VersionTag

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"

# GitHub's maximum page size
DEFAULT_PAGE_SIZE = 100
DEFAULT_MAX_PAGES = 10


@dataclass
class RateLimitStatus:
    """GitHub API rate limit status."""
    remaining: int
    limit: int
    reset_time: int  # Unix timestamp
    used: int

    @property
    def minutes_until_reset(self) -> int:
        """Minutes until rate limit resets."""
        now = int(time.time())
        return max(0, (self.reset_time - now) // 60)

    @property
    def is_low(self) -> bool:
        """Check if rate limit is getting low (< 100 remaining)."""
        return self.remaining < 100


class GitHubClient:
    """
    GitHub API client for one repository.

    Uses `gh` CLI for authentication when available,
    with fallback to direct API calls with token. Every method returns
    None or an empty list when the API cannot answer.

    Example:
        client = GitHubClient(RepoInfo("owner", "repo"))
        branch = client.get_default_branch()
    """

    def __init__(
        self,
        repo: RepoInfo,
        token: Optional[str] = None,
        api_url: str = DEFAULT_API_URL,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 60.0,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_pages: int = DEFAULT_MAX_PAGES,
        use_gh_cli: bool = True,
        timeout: int = 30,
    ):
        """
        Initialize GitHubClient.

        Args:
            repo: Repository to query
            token: GitHub token (defaults to GHSEMVER_GITHUB_TOKEN or GITHUB_TOKEN env var)
            api_url: REST API base URL (GitHub Enterprise Server support)
            max_retries: Maximum retry attempts for rate-limited requests
            base_delay: Base delay for exponential backoff
            max_delay: Maximum delay between retries
            page_size: Items per page for paginated listings
            max_pages: Upper bound on pages fetched per listing
            use_gh_cli: Prefer the gh CLI when it is installed and authenticated
            timeout: Request timeout in seconds
        """
        self.repo = repo
        self.token = token or os.environ.get('GHSEMVER_GITHUB_TOKEN') or os.environ.get('GITHUB_TOKEN')
        self.api_url = api_url.rstrip('/')
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.page_size = page_size
        self.max_pages = max_pages
        self.timeout = timeout
        # gh talks to github.com unless told otherwise
        self._use_gh_cli = use_gh_cli and self.api_url == DEFAULT_API_URL and self._check_gh_cli()
        self._rate_limit_status: Optional[RateLimitStatus] = None
        self.session = requests.Session()
        self.session.headers.update({
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'ghsemver',
        })
        if self.token:
            self.session.headers['Authorization'] = f'token {self.token}'

    @property
    def _repo_path(self) -> str:
        return f"repos/{self.repo.owner}/{self.repo.repo}"

    def _update_rate_limit_from_headers(self, headers) -> None:
        """Update rate limit status from response headers."""
        try:
            remaining = int(headers.get('X-RateLimit-Remaining', -1))
            limit = int(headers.get('X-RateLimit-Limit', -1))
            reset_time = int(headers.get('X-RateLimit-Reset', 0))
            used = int(headers.get('X-RateLimit-Used', 0))

            if remaining >= 0 and limit >= 0:
                self._rate_limit_status = RateLimitStatus(
                    remaining=remaining,
                    limit=limit,
                    reset_time=reset_time,
                    used=used
                )

                if self._rate_limit_status.is_low:
                    logger.warning(
                        f"GitHub API rate limit low: {remaining}/{limit} remaining, "
                        f"resets in {self._rate_limit_status.minutes_until_reset} minutes"
                    )
        except (ValueError, TypeError):
            pass  # Malformed headers

    @property
    def rate_limit_status(self) -> Optional[RateLimitStatus]:
        """Rate limit status from the last API response, if any."""
        return self._rate_limit_status

    def _check_gh_cli(self) -> bool:
        """Check if gh CLI is available and authenticated."""
        try:
            result = subprocess.run(
                ['gh', 'auth', 'status'],
                capture_output=True,
                text=True,
                timeout=10
            )
            return result.returncode == 0
        except (subprocess.TimeoutExpired, FileNotFoundError):
            return False

    def _gh_api(self, endpoint: str) -> Optional[Any]:
        """Call GitHub API using gh CLI."""
        try:
            result = subprocess.run(
                ['gh', 'api', endpoint],
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
            if result.returncode == 0 and result.stdout:
                return json.loads(result.stdout)
            return None
        except (subprocess.TimeoutExpired, json.JSONDecodeError, FileNotFoundError) as e:
            logger.debug(f"gh api call failed for {endpoint}: {e}")
            return None

    def _requests_api(self, endpoint: str) -> Optional[Any]:
        """Call GitHub API using requests library."""
        url = f"{self.api_url}/{endpoint}"

        for attempt in range(self.max_retries):
            try:
                response = self.session.get(url, timeout=self.timeout)

                # Track rate limit from headers
                self._update_rate_limit_from_headers(response.headers)

                if response.status_code == 200:
                    return response.json()

                if response.status_code in (403, 429):
                    # Rate limited
                    reset_time = response.headers.get('X-RateLimit-Reset')
                    if reset_time:
                        wait_time = int(reset_time) - int(time.time())
                        if 0 < wait_time < self.max_delay:
                            logger.info(f"Rate limited, waiting {wait_time}s")
                            time.sleep(wait_time)
                            continue

                    # Exponential backoff
                    delay = min(self.base_delay * (2 ** attempt), self.max_delay)
                    logger.info(f"Rate limited, waiting {delay}s (attempt {attempt + 1})")
                    time.sleep(delay)
                    continue

                if response.status_code in (404, 422):
                    return None

                logger.warning(f"GitHub API error {response.status_code} for {endpoint}")
                return None

            except ValueError as e:
                logger.warning(f"GitHub API returned invalid JSON for {endpoint}: {e}")
                return None
            except requests.RequestException as e:
                logger.warning(f"GitHub API request failed: {e}")
                if attempt < self.max_retries - 1:
                    delay = min(self.base_delay * (2 ** attempt), self.max_delay)
                    time.sleep(delay)
                continue

        return None

    def _api(self, endpoint: str) -> Optional[Any]:
        """Call GitHub API using best available method."""
        if self._use_gh_cli:
            result = self._gh_api(endpoint)
            if result is not None:
                return result

        return self._requests_api(endpoint)

    def _paginate(self, endpoint: str, key: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Fetch a paginated listing, at most max_pages pages.

        Args:
            endpoint: Endpoint, may already carry a query string
            key: Field holding the items when the response is an object

        Returns:
            Items from all fetched pages, in API order
        """
        separator = '&' if '?' in endpoint else '?'
        items: List[Dict[str, Any]] = []

        for page in range(1, self.max_pages + 1):
            data = self._api(f"{endpoint}{separator}per_page={self.page_size}&page={page}")
            if key and isinstance(data, dict):
                data = data.get(key)
            if not data or not isinstance(data, list):
                break

            items.extend(data)
            if len(data) < self.page_size:
                break
        else:
            logger.debug(f"Stopped after {self.max_pages} pages of {endpoint}")

        return items

    def get_default_branch(self) -> Optional[str]:
        """Get the repository's default branch."""
        data = self._api(self._repo_path)
        if isinstance(data, dict):
            return data.get('default_branch')
        return None

    def branches_for_commit(self, sha: str) -> List[str]:
        """
        Get branches whose head is the given commit.

        Args:
            sha: Commit hash

        Returns:
            List of branch names
        """
        data = self._api(f"{self._repo_path}/commits/{sha}/branches-where-head")
        if isinstance(data, list):
            return [b.get('name') for b in data if b.get('name')]
        return []

    def list_tags(self) -> List[VersionTag]:
        """List tags in API order, bounded by max_pages."""
        return [
            VersionTag.from_api_response(item)
            for item in self._paginate(f"{self._repo_path}/tags")
        ]

    def get_tag_commit(self, tag: str) -> Optional[str]:
        """
        Get the commit hash for a tag.

        Annotated tags point at a tag object, which is dereferenced.
        """
        data = self._api(f"{self._repo_path}/git/ref/tags/{quote(tag, safe='/')}")
        if not isinstance(data, dict):
            return None

        target = data.get('object') or {}
        if target.get('type') == 'tag':
            tag_object = self._api(f"{self._repo_path}/git/tags/{target.get('sha')}")
            if not isinstance(tag_object, dict):
                return None
            target = tag_object.get('object') or {}

        return target.get('sha')

    def list_commits(self, ref: str) -> List[Commit]:
        """
        List commits reachable from a ref, newest first.

        Bounded by page_size * max_pages commits.
        """
        items = self._paginate(f"{self._repo_path}/commits?sha={quote(ref, safe='')}")
        return [Commit.from_api_response(item) for item in items]

    def compare(self, base: str, head: str) -> List[Commit]:
        """
        List commits in head that are not in base, oldest first.

        Args:
            base: Base commit or ref (excluded)
            head: Head commit or ref (included)
        """
        endpoint = f"{self._repo_path}/compare/{quote(base, safe='/')}...{quote(head, safe='/')}"
        items = self._paginate(endpoint, key='commits')
        return [Commit.from_api_response(item) for item in items]

    def get_branch_head(self, branch: str) -> Optional[str]:
        """Get the head commit hash of a branch."""
        data = self._api(f"{self._repo_path}/branches/{quote(branch, safe='/')}")
        if isinstance(data, dict):
            return (data.get('commit') or {}).get('sha')
        return None
