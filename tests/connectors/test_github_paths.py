"""Tests for GitHub identifiers and language detection."""

import pytest

from connectors.github.languages import language_for
from connectors.github.paths import GitHubPath, identifier_for, parse_identifier


class TestIdentifierFor:
    def test_strips_scheme_and_host(self):
        assert identifier_for("https://github.com/octo/hello") == "/octo/hello"

    def test_strips_trailing_slash(self):
        assert identifier_for("https://github.com/octo/hello/") == "/octo/hello"

    def test_file_url(self):
        url = "https://github.com/octo/hello/blob/main/src/app.py"
        assert identifier_for(url) == "/octo/hello/blob/main/src/app.py"


class TestParseIdentifier:
    def test_repository(self):
        assert parse_identifier("/octo/hello") == GitHubPath(repository="octo/hello", kind="repository")

    def test_issue(self):
        assert parse_identifier("/octo/hello/issues/12") == GitHubPath(
            repository="octo/hello", kind="issue", number=12
        )

    def test_pull_request(self):
        assert parse_identifier("/octo/hello/pull/7") == GitHubPath(
            repository="octo/hello", kind="pull", number=7
        )

    def test_file(self):
        assert parse_identifier("/octo/hello/blob/main/src/app.py") == GitHubPath(
            repository="octo/hello", kind="file", ref="main", path="src/app.py"
        )

    def test_file_path_is_unquoted(self):
        location = parse_identifier("/octo/hello/blob/main/docs/Getting%20Started.md")
        assert location.path == "docs/Getting Started.md"

    def test_branch_with_slash(self):
        location = parse_identifier("/octo/hello/blob/release/1.0/src/app.py", branch="release/1.0")
        assert location == GitHubPath(repository="octo/hello", kind="file", ref="release/1.0", path="src/app.py")

    def test_without_branch_first_segment_is_ref(self):
        location = parse_identifier("/octo/hello/blob/release/1.0/src/app.py")
        assert (location.ref, location.path) == ("release", "1.0/src/app.py")

    def test_other_branch_falls_back_to_first_segment(self):
        location = parse_identifier("/octo/hello/blob/main/src/app.py", branch="release/1.0")
        assert (location.ref, location.path) == ("main", "src/app.py")

    def test_round_trip_from_html_url(self):
        identifier = identifier_for("https://github.com/octo/hello/pull/7")
        assert parse_identifier(identifier).number == 7

    @pytest.mark.parametrize(
        "identifier",
        [
            "octo/hello",
            "/octo",
            "/octo/hello/issues/abc",
            "/octo/hello/tree/main/src",
            "/octo/hello/blob/main",
            "/octo/hello/wiki",
            "/octo/hello/blobby/main/x.py",
        ],
    )
    def test_unsupported(self, identifier):
        with pytest.raises(ValueError):
            parse_identifier(identifier)


class TestLanguageFor:
    @pytest.mark.parametrize(
        "path,language",
        [
            ("src/main.c", "C/C++"),
            ("include/util.h", "C/C++"),
            ("app.py", "Python"),
            ("Code.gs", "JavaScript"),
            ("README.MD", "Markdown"),
            ("config.yaml", "YAML"),
            ("ViewController.m", "Objective-C"),
            ("Makefile", "Other"),
            ("archive.tar.gz", "Other"),
        ],
    )
    def test_extension_map(self, path, language):
        assert language_for(path) == language
