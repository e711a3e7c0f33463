"""
Tests for GitHubClient with the HTTP session mocked out.
"""

import json
import pytest
import requests
from unittest.mock import patch, MagicMock

from ghsemver.domain import Commit, RepoInfo, VersionTag
from ghsemver.infra.github_client import GitHubClient, RateLimitStatus

REPO = RepoInfo("octo", "widgets")


def response(status=200, data=None, headers=None):
    resp = MagicMock()
    resp.status_code = status
    resp.headers = headers or {}
    resp.json.return_value = data
    return resp


@pytest.fixture
def client(monkeypatch):
    """A client that talks HTTP through a mock session, never gh."""
    monkeypatch.delenv('GHSEMVER_GITHUB_TOKEN', raising=False)
    monkeypatch.delenv('GITHUB_TOKEN', raising=False)
    with patch.object(GitHubClient, '_check_gh_cli', return_value=False):
        c = GitHubClient(REPO, page_size=2, max_pages=3, base_delay=0.01)
    c.session = MagicMock()
    return c


def requested_urls(client):
    return [call.args[0] for call in client.session.get.call_args_list]


class TestGitHubClientSetup:
    """Tests for construction and authentication."""

    def test_token_from_env(self, monkeypatch):
        monkeypatch.delenv('GHSEMVER_GITHUB_TOKEN', raising=False)
        monkeypatch.setenv('GITHUB_TOKEN', 'env-token')
        with patch.object(GitHubClient, '_check_gh_cli', return_value=False):
            c = GitHubClient(REPO)
        assert c.token == 'env-token'
        assert c.session.headers['Authorization'] == 'token env-token'

    def test_explicit_token_wins(self, monkeypatch):
        monkeypatch.setenv('GITHUB_TOKEN', 'env-token')
        with patch.object(GitHubClient, '_check_gh_cli', return_value=False):
            c = GitHubClient(REPO, token='explicit')
        assert c.token == 'explicit'

    def test_gh_cli_not_used_for_enterprise(self):
        with patch.object(GitHubClient, '_check_gh_cli', return_value=True) as check:
            c = GitHubClient(REPO, api_url="https://ghe.example.com/api/v3/")
        assert not c._use_gh_cli
        assert c.api_url == "https://ghe.example.com/api/v3"
        check.assert_not_called()

    def test_gh_cli_used_when_authenticated(self):
        with patch.object(GitHubClient, '_check_gh_cli', return_value=True):
            c = GitHubClient(REPO)
        assert c._use_gh_cli

    def test_gh_api_result_preferred(self):
        with patch.object(GitHubClient, '_check_gh_cli', return_value=True):
            c = GitHubClient(REPO)
        c.session = MagicMock()
        gh_result = MagicMock(returncode=0, stdout=json.dumps({"default_branch": "trunk"}))
        with patch('ghsemver.infra.github_client.subprocess.run', return_value=gh_result) as run:
            assert c.get_default_branch() == "trunk"
        assert run.call_args[0][0] == ['gh', 'api', 'repos/octo/widgets']
        c.session.get.assert_not_called()


class TestRequests:
    """Tests for HTTP error handling."""

    def test_not_found_is_none(self, client):
        client.session.get.return_value = response(404)
        assert client.get_default_branch() is None

    def test_server_error_is_none(self, client):
        client.session.get.return_value = response(500)
        assert client.get_branch_head("main") is None

    def test_rate_limited_then_ok(self, client):
        client.session.get.side_effect = [
            response(403),
            response(200, {"default_branch": "main"}),
        ]
        with patch('ghsemver.infra.github_client.time.sleep') as sleep:
            assert client.get_default_branch() == "main"
        sleep.assert_called_once()

    def test_request_exception_retries(self, client):
        client.session.get.side_effect = requests.ConnectionError("down")
        with patch('ghsemver.infra.github_client.time.sleep'):
            assert client.get_default_branch() is None
        assert client.session.get.call_count == client.max_retries

    def test_invalid_json(self, client):
        resp = response(200)
        resp.json.side_effect = ValueError("bad json")
        client.session.get.return_value = resp
        assert client.get_default_branch() is None

    def test_rate_limit_tracked(self, client):
        headers = {
            'X-RateLimit-Remaining': '4000',
            'X-RateLimit-Limit': '5000',
            'X-RateLimit-Reset': '1700000000',
            'X-RateLimit-Used': '1000',
        }
        client.session.get.return_value = response(200, {"default_branch": "main"}, headers)
        client.get_default_branch()
        status = client.rate_limit_status
        assert isinstance(status, RateLimitStatus)
        assert status.remaining == 4000
        assert not status.is_low


class TestEndpoints:
    """Tests for the repository queries."""

    def test_branches_for_commit(self, client):
        client.session.get.return_value = response(200, [{"name": "feature"}, {"name": "main"}])
        assert client.branches_for_commit("abc") == ["feature", "main"]
        assert requested_urls(client)[0].endswith("repos/octo/widgets/commits/abc/branches-where-head")

    def test_list_tags_paginates(self, client):
        client.session.get.side_effect = [
            response(200, [{"name": "v1.2.0", "commit": {"sha": "c"}}, {"name": "v1.1.0", "commit": {"sha": "b"}}]),
            response(200, [{"name": "v1.0.0", "commit": {"sha": "a"}}]),
        ]
        tags = client.list_tags()
        assert tags == [VersionTag("v1.2.0", "c"), VersionTag("v1.1.0", "b"), VersionTag("v1.0.0", "a")]
        urls = requested_urls(client)
        assert urls[0].endswith("tags?per_page=2&page=1")
        assert urls[1].endswith("tags?per_page=2&page=2")

    def test_pagination_is_bounded(self, client):
        full_page = [{"name": "v1.0.0", "commit": {"sha": "a"}}] * 2
        client.session.get.return_value = response(200, full_page)
        assert len(client.list_tags()) == 6
        assert client.session.get.call_count == 3

    def test_lightweight_tag_commit(self, client):
        client.session.get.return_value = response(200, {"object": {"type": "commit", "sha": "abc"}})
        assert client.get_tag_commit("v1.0.0") == "abc"
        assert requested_urls(client)[0].endswith("git/ref/tags/v1.0.0")

    def test_annotated_tag_commit(self, client):
        client.session.get.side_effect = [
            response(200, {"object": {"type": "tag", "sha": "tagobj"}}),
            response(200, {"object": {"type": "commit", "sha": "abc"}}),
        ]
        assert client.get_tag_commit("v1.0.0") == "abc"
        assert requested_urls(client)[1].endswith("git/tags/tagobj")

    def test_missing_tag(self, client):
        client.session.get.return_value = response(404)
        assert client.get_tag_commit("v9.9.9") is None

    def test_list_commits_quotes_ref(self, client):
        client.session.get.return_value = response(200, [
            {"sha": "abc", "commit": {"message": "feat: x", "author": {"date": "2024-01-01T00:00:00Z"}}},
        ])
        commits = client.list_commits("feature/x")
        assert commits == [Commit("abc", "feat: x", "2024-01-01T00:00:00Z")]
        assert "commits?sha=feature%2Fx&per_page=2&page=1" in requested_urls(client)[0]

    def test_compare(self, client):
        client.session.get.return_value = response(200, {"commits": [
            {"sha": "b", "commit": {"message": "fix: b"}},
        ]})
        assert client.compare("a", "b") == [Commit("b", "fix: b")]
        assert "compare/a...b?per_page=2&page=1" in requested_urls(client)[0]

    def test_branch_head(self, client):
        client.session.get.return_value = response(200, {"name": "main", "commit": {"sha": "abc"}})
        assert client.get_branch_head("main") == "abc"
