"""Builds documents for GitHub repositories, issues, pull requests and files."""

import mimetypes
from collections.abc import Callable
from typing import Any

from common.constants import BINARY_CONTENT_TYPE
from common.logger import get_logger
from sync.builder import DocumentBuilder, VersionClock
from sync.errors import ItemNotFoundError, SyncError
from sync.models import Document, FetchError, FetchResult, Found, NotFound, StructuredData

from .client import GitHubClient
from .languages import language_for
from .objects import FileObject, GitHubObject, IssueObject, PullRequestObject, RepositoryObject
from .paths import GitHubPath, parse_identifier

logger = get_logger(__name__)


class GitHubDocumentBuilder(DocumentBuilder):
    """Fetches the current GitHub object for an identifier and maps it to a document."""

    def __init__(self, client: GitHubClient, clock: VersionClock | None = None):
        super().__init__(clock)
        self.client = client
        self._mappers: dict[type, Callable[[str, Any, int], Document]] = {
            RepositoryObject: repository_document,
            IssueObject: issue_document,
            PullRequestObject: pull_request_document,
            FileObject: file_document,
        }

    def fetch(self, identifier: str) -> FetchResult:
        try:
            location = parse_identifier(identifier)
        except ValueError as e:
            return FetchError(identifier, e)

        try:
            return Found(self._load(identifier, location))
        except ItemNotFoundError:
            return NotFound(identifier)
        except SyncError as e:
            logger.warning(f"Unable to fetch {identifier}: {e}")
            return FetchError(identifier, e)

    def _load(self, identifier: str, location: GitHubPath) -> GitHubObject:
        repo = location.repository
        if location.kind == "repository":
            return RepositoryObject.from_api(self.client.get_repository(repo))
        if location.kind == "issue":
            data = self.client.get_issue(repo, location.number)
            comments = self.client.list_issue_comments(repo, location.number)
            return IssueObject.from_api(repo, data, comments)
        if location.kind == "pull":
            data = self.client.get_pull_request(repo, location.number)
            comments = self.client.list_issue_comments(repo, location.number)
            return PullRequestObject.from_api(repo, data, comments)
        return self._load_file(identifier, location.repository)

    def _load_file(self, identifier: str, repository: str) -> FileObject:
        # Files are enumerated on the default branch, which may contain slashes
        branch = self.client.get_repository(repository).get("default_branch")
        location = parse_identifier(identifier, branch=branch)

        # List the parent directory; the contents API has no metadata-only file lookup
        parent, _, _ = location.path.rpartition("/")
        entries = self.client.get_directory(location.repository, parent, location.ref)
        for entry in entries:
            if entry.get("path") == location.path and entry.get("type") == "file":
                content = self.client.download(entry["download_url"]) if entry.get("download_url") else b""
                return FileObject.from_api(location.repository, entry, content)
        raise ItemNotFoundError(f"File {location.path} not found in {location.repository}")

    def to_document(self, identifier: str, item: Any, version: int) -> Document:
        mapper = self._mappers.get(type(item))
        if mapper is None:
            raise TypeError(f"Unsupported GitHub object for {identifier}: {type(item).__name__}")
        return mapper(identifier, item, version)


def _owner_and_name(full_name: str) -> tuple[str, str]:
    owner, _, name = full_name.partition("/")
    return owner, name


def _encode(text: str | None) -> bytes:
    return (text or "").encode("utf-8")


def repository_document(identifier: str, repo: RepositoryObject, version: int) -> Document:
    fields = (
        StructuredData()
        .put("organization", repo.owner)
        .put("repository", repo.name)
        .put("stars", repo.stars)
        .put("forks", repo.forks)
        .put("openIssues", repo.open_issues)
        .put("watchers", repo.watchers)
        .put("createdAt", repo.created_at)
        .put("updatedAt", repo.updated_at)
    )
    return Document(
        identifier=identifier,
        title=repo.full_name,
        url=repo.html_url,
        object_type="repository",
        version=version,
        fields=fields,
        content=_encode(repo.description),
        fingerprint=repo.fingerprint,
        created_at=repo.created_at,
    )


def _discussion_document(
    identifier: str, issue: IssueObject, version: int, object_type: str, author_field: str
) -> Document:
    owner, name = _owner_and_name(issue.repository)
    fields = (
        StructuredData()
        .put("organization", owner)
        .put("repository", name)
        .put("status", issue.state)
        .put(author_field, issue.author)
        .put("assignee", issue.assignee)
        .put_all("labels", issue.labels)
        .put_all(
            "comments",
            (StructuredData().put("comment", c.body).put("user", c.user) for c in issue.comments),
        )
        .put("createdAt", issue.created_at)
        .put("updatedAt", issue.updated_at)
    )
    return Document(
        identifier=identifier,
        title=issue.title,
        url=issue.html_url,
        object_type=object_type,
        version=version,
        fields=fields,
        content=_encode(issue.body),
        parent_identifier=f"/{issue.repository}",
        fingerprint=issue.fingerprint,
        created_at=issue.created_at,
    )


def issue_document(identifier: str, issue: IssueObject, version: int) -> Document:
    return _discussion_document(identifier, issue, version, "issue", "reportedBy")


def pull_request_document(identifier: str, pull: PullRequestObject, version: int) -> Document:
    return _discussion_document(identifier, pull, version, "pullRequest", "openedBy")


def file_document(identifier: str, file: FileObject, version: int) -> Document:
    owner, name = _owner_and_name(file.repository)
    content_type, _ = mimetypes.guess_type(file.name)
    fields = (
        StructuredData()
        .put("organization", owner)
        .put("repository", name)
        .put("path", file.path)
        .put("language", language_for(file.name))
    )
    return Document(
        identifier=identifier,
        title=file.name,
        url=file.html_url,
        object_type="file",
        version=version,
        fields=fields,
        content=file.content,
        content_type=content_type or BINARY_CONTENT_TYPE,
        parent_identifier=f"/{file.repository}",
        fingerprint=file.fingerprint,
    )
