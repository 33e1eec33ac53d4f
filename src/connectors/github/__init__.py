"""GitHub connector: repositories, issues, pull requests and files."""

from .builder import GitHubDocumentBuilder
from .client import GitHubClient
from .enumerator import GitHubEnumerator
from .paths import GitHubPath, identifier_for, parse_identifier

__all__ = [
    "GitHubClient",
    "GitHubDocumentBuilder",
    "GitHubEnumerator",
    "GitHubPath",
    "identifier_for",
    "parse_identifier",
]
