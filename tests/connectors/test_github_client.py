"""Tests for the GitHub REST client."""

from unittest.mock import Mock, patch

import pytest
import requests

from connectors.github.client import GitHubClient
from sync.errors import AuthenticationError, ItemNotFoundError, QuotaExceededError, TransientError


def api_response(status=200, json_data=None, links=None, headers=None, content=b""):
    response = Mock()
    response.status_code = status
    response.json.return_value = json_data
    response.links = links or {}
    response.headers = headers or {}
    response.content = content
    return response


class TestGitHubClient:
    """Test suite for GitHubClient."""

    @pytest.fixture
    def client(self):
        return GitHubClient(user="octocat", token="secret", requests_per_minute=1000)

    def test_session_is_authenticated(self, client):
        assert client.session.auth == ("octocat", "secret")
        assert client.session.headers["Accept"] == "application/vnd.github+json"

    @patch("requests.Session.get")
    def test_get_repository(self, mock_get, client):
        mock_get.return_value = api_response(json_data={"full_name": "octo/hello"})

        repo = client.get_repository("octo/hello")

        assert repo == {"full_name": "octo/hello"}
        assert mock_get.call_args.args[0] == "https://api.github.com/repos/octo/hello"
        assert mock_get.call_args.kwargs["timeout"] == 30.0

    @patch("requests.Session.get")
    def test_custom_api_url(self, mock_get):
        client = GitHubClient("octocat", "secret", api_url="https://ghe.example.com/api/v3/")
        mock_get.return_value = api_response(json_data={"login": "octocat"})

        client.get_myself()

        assert mock_get.call_args.args[0] == "https://ghe.example.com/api/v3/user"

    @patch("requests.Session.get")
    def test_paginate_follows_next_links(self, mock_get, client):
        next_url = "https://api.github.com/repositories/1/issues?state=all&page=2"
        mock_get.side_effect = [
            api_response(json_data=[{"number": 1}, {"number": 2}], links={"next": {"url": next_url}}),
            api_response(json_data=[{"number": 3}]),
        ]

        issues = client.list_issues("octo/hello")

        assert [issue["number"] for issue in issues] == [1, 2, 3]
        first, second = mock_get.call_args_list
        assert first.kwargs["params"] == {"per_page": 100, "state": "all"}
        assert second.args[0] == next_url
        assert second.kwargs["params"] is None

    @patch("requests.Session.get")
    def test_get_directory_wraps_single_file(self, mock_get, client):
        mock_get.return_value = api_response(json_data={"path": "README.md", "type": "file"})

        entries = client.get_directory("octo/hello", "README.md", ref="main")

        assert entries == [{"path": "README.md", "type": "file"}]
        assert mock_get.call_args.kwargs["params"] == {"ref": "main"}

    @patch("requests.Session.get")
    def test_download(self, mock_get, client):
        mock_get.return_value = api_response(content=b"print('hi')\n")
        url = "https://raw.githubusercontent.com/octo/hello/main/app.py"

        assert client.download(url) == b"print('hi')\n"
        assert mock_get.call_args.args[0] == url

    @patch("requests.Session.get")
    def test_401_is_authentication_error(self, mock_get, client):
        mock_get.return_value = api_response(status=401)

        with pytest.raises(AuthenticationError):
            client.get_myself()

    @pytest.mark.parametrize("status", [403, 429])
    @patch("requests.Session.get")
    def test_quota_errors(self, mock_get, client, status):
        mock_get.return_value = api_response(status=status, headers={"Retry-After": "30"})

        with pytest.raises(QuotaExceededError) as exc_info:
            client.get_repository("octo/hello")

        assert exc_info.value.retry_after == 30.0

    @patch("requests.Session.get")
    def test_quota_error_from_rate_limit_reset(self, mock_get, client):
        mock_get.return_value = api_response(
            status=403,
            headers={"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "0"},
        )

        with pytest.raises(QuotaExceededError) as exc_info:
            client.get_repository("octo/hello")

        assert exc_info.value.retry_after == 0.0

    @pytest.mark.parametrize("status", [404, 410])
    @patch("requests.Session.get")
    def test_not_found(self, mock_get, client, status):
        mock_get.return_value = api_response(status=status)

        with pytest.raises(ItemNotFoundError):
            client.get_issue("octo/hello", 42)

    @patch("requests.Session.get")
    def test_server_error_is_transient(self, mock_get, client):
        mock_get.return_value = api_response(status=502)

        with pytest.raises(TransientError, match="502"):
            client.get_repository("octo/hello")

    @patch("requests.Session.get")
    def test_timeout_is_transient(self, mock_get, client):
        mock_get.side_effect = requests.exceptions.Timeout("read timed out")

        with pytest.raises(TransientError, match="timeout"):
            client.get_repository("octo/hello")

    @patch("requests.Session.get")
    def test_connection_error_is_transient(self, mock_get, client):
        mock_get.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(TransientError):
            client.get_repository("octo/hello")

    @patch("requests.Session.get")
    def test_requests_go_through_rate_limiter(self, mock_get, client):
        mock_get.return_value = api_response(json_data={})
        client.rate_limiter.wait_if_needed = Mock()

        client.get_repository("octo/hello")

        client.rate_limiter.wait_if_needed.assert_called_once()
