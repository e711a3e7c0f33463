"""
Tests for LocalSource and RemoteSource.
"""

import pytest
from unittest.mock import MagicMock

from ghsemver.domain import Commit, VersionTag
from ghsemver.exit_codes import SourceUnavailableError
from ghsemver.infra.git_client import GitClient
from ghsemver.infra.github_client import GitHubClient
from ghsemver.infra.sources import LocalSource, RemoteSource


@pytest.fixture
def mock_git_client():
    """Create a mock git client for a checkout of 'feature'."""
    client = MagicMock(spec=GitClient)
    client.is_git_repo.return_value = True
    client.current_branch.return_value = "feature"
    client.resolve_ref.return_value = "headsha"
    client.commit_exists.return_value = True
    client.tags.return_value = ["v1.1.0-feature.1", "v1.0.0", "nightly"]
    return client


@pytest.fixture
def mock_github_client():
    client = MagicMock(spec=GitHubClient)
    client.list_commits.return_value = [Commit("c2", "fix: b"), Commit("c1", "feat: a")]
    client.list_tags.return_value = [
        VersionTag("v2.0.0", "elsewhere"),
        VersionTag("v1.1.0", "c2"),
        VersionTag("latest", "c2"),
    ]
    return client


class TestLocalSource:
    """Tests for the local git source."""

    def test_not_a_repo_is_unavailable(self, mock_git_client):
        mock_git_client.is_git_repo.return_value = False
        source = LocalSource("/tmp", mock_git_client)
        with pytest.raises(SourceUnavailableError):
            source.current_branch()

    def test_repo_check_cached(self, mock_git_client):
        source = LocalSource("/repo", mock_git_client)
        source.current_branch()
        source.main_branch()
        mock_git_client.is_git_repo.assert_called_once_with("/repo")

    def test_main_branch_uses_remote(self, mock_git_client):
        mock_git_client.default_branch.return_value = "main"
        source = LocalSource("/repo", mock_git_client, remote="upstream")
        assert source.main_branch() == "main"
        mock_git_client.default_branch.assert_called_once_with("/repo", "upstream")

    def test_version_tags_of_checked_out_branch(self, mock_git_client):
        source = LocalSource("/repo", mock_git_client)
        assert source.version_tags("feature") == ["v1.1.0-feature.1", "v1.0.0"]
        mock_git_client.tags.assert_called_once_with("/repo", merged="HEAD")

    def test_version_tags_of_other_branch(self, mock_git_client):
        source = LocalSource("/repo", mock_git_client)
        source.version_tags("main")
        mock_git_client.tags.assert_called_once_with("/repo", merged="refs/heads/main")

    def test_remote_tracking_branch(self, mock_git_client):
        mock_git_client.resolve_ref.side_effect = lambda path, ref: (
            "sha" if ref == "refs/remotes/origin/main" else None
        )
        source = LocalSource("/repo", mock_git_client)
        source.version_tags("main")
        mock_git_client.tags.assert_called_once_with("/repo", merged="refs/remotes/origin/main")

    def test_unknown_branch(self, mock_git_client):
        mock_git_client.resolve_ref.return_value = None
        source = LocalSource("/repo", mock_git_client)
        assert source.version_tags("gone") == []
        assert source.branch_head("gone") is None

    def test_detached_head_stands_in_for_branch(self, mock_git_client):
        mock_git_client.current_branch.return_value = None
        mock_git_client.resolve_ref.side_effect = lambda path, ref: "headsha" if ref == "HEAD" else None
        source = LocalSource("/repo", mock_git_client)
        assert source.branch_head("feature") == "headsha"

    def test_commits_between(self, mock_git_client):
        mock_git_client.log.return_value = [Commit("b", "fix: b")]
        source = LocalSource("/repo", mock_git_client)
        assert source.commits_between("a", "b") == [Commit("b", "fix: b")]

    def test_missing_base_is_not_trusted(self, mock_git_client):
        mock_git_client.commit_exists.side_effect = lambda path, sha: sha != "base"
        source = LocalSource("/repo", mock_git_client)
        assert source.commits_between("base", "head") is None
        mock_git_client.log.assert_not_called()

    def test_empty_log_is_not_usable(self, mock_git_client):
        mock_git_client.log.return_value = []
        source = LocalSource("/repo", mock_git_client)
        assert source.commits_between("a", "b") is None


class TestRemoteSource:
    """Tests for the GitHub API source."""

    def test_no_client_is_unavailable(self):
        with pytest.raises(SourceUnavailableError):
            RemoteSource(None).main_branch()

    def test_current_branch_from_head_sha(self, mock_github_client):
        mock_github_client.branches_for_commit.return_value = ["feature"]
        source = RemoteSource(mock_github_client, head_sha="headsha")
        assert source.current_branch() == "feature"
        mock_github_client.branches_for_commit.assert_called_once_with("headsha")

    def test_current_branch_without_head(self, mock_github_client):
        assert RemoteSource(mock_github_client).current_branch() is None

    def test_version_tags_filtered_to_branch(self, mock_github_client):
        source = RemoteSource(mock_github_client)
        assert source.version_tags("main") == ["v1.1.0"]
        mock_github_client.list_commits.assert_called_once_with("main")

    def test_version_tags_unknown_branch(self, mock_github_client):
        mock_github_client.list_commits.return_value = []
        assert RemoteSource(mock_github_client).version_tags("gone") == []
        mock_github_client.list_tags.assert_not_called()

    def test_commits_between_uses_compare(self, mock_github_client):
        mock_github_client.compare.return_value = [Commit("b", "fix: b")]
        source = RemoteSource(mock_github_client)
        assert source.commits_between("a", "b") == [Commit("b", "fix: b")]
        mock_github_client.compare.assert_called_once_with("a", "b")

    def test_commits_without_base(self, mock_github_client):
        source = RemoteSource(mock_github_client)
        assert len(source.commits_between(None, "c2")) == 2
        mock_github_client.list_commits.assert_called_once_with("c2")
