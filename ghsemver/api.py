"""
High-level Python API for ghsemver.

Example:
    from ghsemver import VersionQuery, get_current_version, get_next_version

    # Latest released version of the checked-out branch
    print(get_current_version())

    # Next version on a feature branch, with diagnostic tracing
    print(get_next_version(VersionQuery(suffix="beta", verbose=True)))

Both functions return "" when there is no version to report. The only
exception they raise is ConfigError, for malformed settings.
"""

import logging
from typing import Any, Callable, Dict, Optional

from .config import load_config
from .domain import RepoInfo, VersionQuery
from .domain.version import PRERELEASE_ID_PATTERN
from .exit_codes import ConfigError, SourceUnavailableError
from .infra import GitClient, GitHubClient, LocalSource, RemoteSource
from .render import trace_to_stderr
from .services import VersionService
from .version_manager import DEFAULT_PRERELEASE_ID

logger = logging.getLogger(__name__)

Trace = Callable[[str], None]


def _setting(section: Dict[str, Any], key: str, convert, default):
    value = section.get(key, default)
    try:
        return convert(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for '{key}': {value!r}") from e


def _section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = config.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"Config section '{name}' must be a mapping")
    return section


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes', 'on')
    return bool(value)


def build_github_client(repo: RepoInfo, config: Dict[str, Any]) -> GitHubClient:
    """Create a GitHubClient from the 'github' config section."""
    github = _section(config, "github")
    return GitHubClient(
        repo,
        token=str(github.get("token") or "") or None,
        api_url=str(github.get("api_url") or "https://api.github.com"),
        max_retries=_setting(github, "max_retries", int, 3),
        base_delay=_setting(github, "base_delay", float, 1.0),
        max_delay=_setting(github, "max_delay", float, 60.0),
        page_size=_setting(github, "page_size", int, 100),
        max_pages=_setting(github, "max_pages", int, 10),
        use_gh_cli=_as_bool(github.get("use_gh_cli", True)),
        timeout=_setting(_section(config, "git"), "timeout", int, 30),
    )


def build_service(
    config: Dict[str, Any],
    path: str = ".",
    trace: Optional[Trace] = None,
) -> VersionService:
    """
    Wire the local and remote sources into a VersionService.

    The GitHub repository is taken from the configured remote's URL.
    Without one the remote source reports itself unavailable.

    Raises:
        ConfigError: If a setting has the wrong type
    """
    git = _section(config, "git")
    remote_name = str(git.get("remote") or "origin")
    local = LocalSource(
        path,
        GitClient(timeout=_setting(git, "timeout", int, 30)),
        remote=remote_name,
    )

    head_sha = None
    remote_url = None
    try:
        head_sha = local.current_sha()
        remote_url = local.remote_url()
    except SourceUnavailableError as e:
        logger.debug(str(e))

    client = None
    repo = RepoInfo.from_remote_url(remote_url) if remote_url else None
    if repo:
        client = build_github_client(repo, config)
    else:
        logger.debug(f"No GitHub repository found for remote '{remote_name}'")

    versioning = _section(config, "versioning")
    default_suffix = str(versioning.get("default_suffix") or DEFAULT_PRERELEASE_ID)
    if not PRERELEASE_ID_PATTERN.match(default_suffix):
        raise ConfigError(
            f"Invalid value for 'default_suffix': {default_suffix!r}: "
            "only letters, digits and '-' are allowed"
        )

    return VersionService(
        [local, RemoteSource(client, head_sha=head_sha)],
        trace=trace,
        default_suffix=default_suffix,
    )


def _trace_for(query: VersionQuery, trace: Optional[Trace]) -> Trace:
    # Tracing never changes the result, only where messages go
    if query.verbose:
        return trace or trace_to_stderr
    return logger.debug


def get_current_version(
    query: Optional[VersionQuery] = None,
    config: Optional[Dict[str, Any]] = None,
    path: str = ".",
    trace: Optional[Trace] = None,
) -> str:
    """
    Get the latest version tag of the branch, without the 'v' prefix.

    Args:
        query: Branch / main-branch overrides and verbose flag
        config: Settings dict (default: load_config())
        path: Path inside the repository
        trace: Sink for diagnostic messages when query.verbose is set

    Returns:
        Version string, or "" when there is none
    """
    query = query or VersionQuery()
    config = config if config is not None else load_config()
    service = build_service(config, path, trace=_trace_for(query, trace))
    return service.current_version(query) or ""


def get_next_version(
    query: Optional[VersionQuery] = None,
    config: Optional[Dict[str, Any]] = None,
    path: str = ".",
    trace: Optional[Trace] = None,
) -> str:
    """
    Get the next version implied by the commits since the last release.

    Args:
        query: Branch / main-branch / suffix overrides and verbose flag
        config: Settings dict (default: load_config())
        path: Path inside the repository
        trace: Sink for diagnostic messages when query.verbose is set

    Returns:
        Version string, or "" when no release is warranted
    """
    query = query or VersionQuery()
    config = config if config is not None else load_config()
    service = build_service(config, path, trace=_trace_for(query, trace))
    version = service.next_version(query)
    return str(version) if version else ""
