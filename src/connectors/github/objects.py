"""Source objects fetched from GitHub.

One frozen dataclass per object kind; the builder dispatches on the type.
Fingerprints are derived here and used by both the enumerator and the
builder, so an unchanged object always reports the same fingerprint.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


def updated_fingerprint(data: dict[str, Any]) -> str | None:
    """Fingerprint for repositories, issues and pull requests."""
    return data.get("updated_at")


def content_fingerprint(data: dict[str, Any]) -> str | None:
    """Fingerprint for files: the git blob sha."""
    return data.get("sha")


def parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _login(user: dict[str, Any] | None) -> str | None:
    return user.get("login") if user else None


@dataclass(frozen=True)
class RepositoryObject:
    full_name: str
    owner: str
    name: str
    html_url: str
    description: str | None
    stars: int
    forks: int
    open_issues: int
    watchers: int
    created_at: datetime | None
    updated_at: datetime | None
    fingerprint: str | None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "RepositoryObject":
        return cls(
            full_name=data["full_name"],
            owner=data["owner"]["login"],
            name=data["name"],
            html_url=data["html_url"],
            description=data.get("description"),
            stars=data.get("stargazers_count", 0),
            forks=data.get("forks_count", 0),
            open_issues=data.get("open_issues_count", 0),
            watchers=data.get("subscribers_count", data.get("watchers_count", 0)),
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
            fingerprint=updated_fingerprint(data),
        )


@dataclass(frozen=True)
class Comment:
    body: str
    user: str | None


@dataclass(frozen=True)
class IssueObject:
    repository: str
    number: int
    title: str
    body: str | None
    state: str
    html_url: str
    author: str | None
    assignee: str | None
    labels: tuple[str, ...]
    comments: tuple[Comment, ...]
    created_at: datetime | None
    updated_at: datetime | None
    fingerprint: str | None

    @classmethod
    def from_api(
        cls, repository: str, data: dict[str, Any], comments: list[dict[str, Any]]
    ) -> "IssueObject":
        return cls(
            repository=repository,
            number=data["number"],
            title=data.get("title") or "",
            body=data.get("body"),
            state=data.get("state", "open"),
            html_url=data["html_url"],
            author=_login(data.get("user")),
            assignee=_login(data.get("assignee")),
            labels=tuple(label["name"] for label in data.get("labels", [])),
            comments=tuple(
                Comment(body=comment.get("body") or "", user=_login(comment.get("user")))
                for comment in comments
            ),
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
            fingerprint=updated_fingerprint(data),
        )


@dataclass(frozen=True)
class PullRequestObject(IssueObject):
    """Pull request; same shape as an issue, indexed with its own object type."""


@dataclass(frozen=True)
class FileObject:
    repository: str
    path: str
    name: str
    html_url: str
    size: int
    content: bytes
    fingerprint: str | None

    @classmethod
    def from_api(cls, repository: str, data: dict[str, Any], content: bytes) -> "FileObject":
        return cls(
            repository=repository,
            path=data["path"],
            name=data["name"],
            html_url=data["html_url"],
            size=data.get("size", len(content)),
            content=content,
            fingerprint=content_fingerprint(data),
        )


GitHubObject = RepositoryObject | IssueObject | PullRequestObject | FileObject
