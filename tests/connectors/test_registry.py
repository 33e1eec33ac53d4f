"""Tests for connector creation from configuration."""

from unittest.mock import patch

import pytest

from connectors.github import GitHubDocumentBuilder, GitHubEnumerator
from connectors.registry import create_connector
from connectors.sample import SampleDocumentBuilder, SampleEnumerator
from sync.errors import AuthenticationError, ConfigurationError, TransientError


@pytest.fixture
def github_env(monkeypatch):
    monkeypatch.setenv("GITHUB_REPOS", "octo-org,octo/hello")
    monkeypatch.setenv("GITHUB_USER", "octocat")
    monkeypatch.setenv("GITHUB_TOKEN", "secret")


class TestCreateConnector:
    def test_sample(self, monkeypatch):
        monkeypatch.setenv("SAMPLE_DOCUMENT_COUNT", "4")
        monkeypatch.setenv("SAMPLE_TRAVERSAL", "full")

        connector = create_connector("sample")

        assert connector.name == "sample"
        assert isinstance(connector.enumerator, SampleEnumerator)
        assert isinstance(connector.builder, SampleDocumentBuilder)
        assert connector.enumerator.push_fingerprints is False
        assert connector.enumerator.corpus is connector.builder.corpus
        assert connector.enumerator.corpus.document_count == 4

    def test_sample_rejects_bad_mode(self, monkeypatch):
        monkeypatch.setenv("SAMPLE_TRAVERSAL", "partial")
        with pytest.raises(ConfigurationError, match="SAMPLE_TRAVERSAL"):
            create_connector("sample")

    def test_sample_rejects_empty_corpus(self, monkeypatch):
        monkeypatch.setenv("SAMPLE_DOCUMENT_COUNT", "0")
        with pytest.raises(ConfigurationError, match="SAMPLE_DOCUMENT_COUNT"):
            create_connector("sample")

    def test_unknown_source(self):
        with pytest.raises(ConfigurationError, match="Unknown source"):
            create_connector("csv")

    def test_github_without_validation(self, github_env):
        connector = create_connector("github", validate=False)

        assert isinstance(connector.enumerator, GitHubEnumerator)
        assert isinstance(connector.builder, GitHubDocumentBuilder)
        assert connector.enumerator.names == ["octo-org", "octo/hello"]
        assert connector.enumerator.client is connector.builder.client

    def test_github_requires_repositories(self, github_env, monkeypatch):
        monkeypatch.setenv("GITHUB_REPOS", "")
        with pytest.raises(ConfigurationError, match="GITHUB_REPOS"):
            create_connector("github")

    def test_github_requires_credentials(self, github_env, monkeypatch):
        monkeypatch.delenv("GITHUB_TOKEN")
        with pytest.raises(ConfigurationError, match="GITHUB_TOKEN"):
            create_connector("github")

    @patch("connectors.github.client.GitHubClient.get_myself")
    def test_github_validates_credentials(self, mock_myself, github_env):
        mock_myself.return_value = {"login": "octocat"}

        create_connector("github")

        mock_myself.assert_called_once()

    @patch("connectors.github.client.GitHubClient.get_myself")
    def test_github_bad_credentials(self, mock_myself, github_env):
        mock_myself.side_effect = AuthenticationError("GitHub rejected the credentials")

        with pytest.raises(AuthenticationError):
            create_connector("github")

    @patch("connectors.github.client.GitHubClient.get_myself")
    def test_github_unreachable(self, mock_myself, github_env):
        mock_myself.side_effect = TransientError("refused")

        with pytest.raises(ConfigurationError, match="Unable to reach GitHub"):
            create_connector("github")
