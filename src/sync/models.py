"""Data models shared by enumerators, builders, the engine and appliers."""

import base64
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ItemStatus(str, Enum):
    """Acceptance status of an item as tracked by the applier."""

    ACCEPTED = "accepted"
    PENDING = "pending"
    NOT_FOUND = "not_found"


class Classification(str, Enum):
    """Outcome of comparing an enumerated item against applier state."""

    NEW = "new"
    MODIFIED = "modified"
    UNMODIFIED = "unmodified"
    MISSING = "missing"


@dataclass(frozen=True)
class PushRecord:
    """An enumerated identifier with its change-detection fingerprint.

    A record without a fingerprint is always rebuilt.
    """

    identifier: str
    fingerprint: str | None = None


@dataclass(frozen=True)
class ItemState:
    """Previously accepted state of one identifier."""

    status: ItemStatus
    fingerprint: str | None = None
    version: int | None = None
    last_seen_cycle: int | None = None

    @classmethod
    def not_found(cls) -> "ItemState":
        return cls(status=ItemStatus.NOT_FOUND)


@dataclass(frozen=True)
class EnumerationBatch:
    """Result of one enumerate() call."""

    records: list[PushRecord]
    checkpoint: bytes | None
    has_more: bool


class StructuredData:
    """Ordered multimap of field name to values.

    Values may be scalars, datetimes or nested StructuredData (for
    sub-objects such as comments). None values are dropped so optional
    source attributes do not produce empty fields.
    """

    def __init__(self) -> None:
        self._values: dict[str, list[Any]] = {}

    def put(self, name: str, value: Any) -> "StructuredData":
        if value is not None:
            self._values.setdefault(name, []).append(value)
        return self

    def put_all(self, name: str, values: Iterable[Any]) -> "StructuredData":
        for value in values:
            self.put(name, value)
        return self

    def get(self, name: str) -> list[Any]:
        return list(self._values.get(name, []))

    def names(self) -> list[str]:
        return list(self._values)

    def items(self) -> Iterator[tuple[str, list[Any]]]:
        for name, values in self._values.items():
            yield name, list(values)

    def to_dict(self) -> dict[str, list[Any]]:
        """Convert to plain JSON-ready structures."""
        return {name: [_plain(v) for v in values] for name, values in self._values.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StructuredData):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"StructuredData({self._values!r})"


def _plain(value: Any) -> Any:
    if isinstance(value, StructuredData):
        return value.to_dict()
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


@dataclass(frozen=True)
class Document:
    """Structured document handed once to the applier.

    Built fresh for every New or Modified item and never mutated afterwards.
    """

    identifier: str
    title: str
    url: str | None
    object_type: str
    version: int
    fields: StructuredData = field(default_factory=StructuredData)
    content: bytes = b""
    content_type: str = "text/plain"
    parent_identifier: str | None = None
    fingerprint: str | None = None
    created_at: datetime | None = None

    def __hash__(self) -> int:
        # StructuredData is mutable and unhashable; equal documents share these
        return hash((self.identifier, self.version, self.fingerprint))

    def to_record(self) -> dict[str, Any]:
        """Serialize to the external document record layout."""
        return {
            "identifier": self.identifier,
            "parentIdentifier": self.parent_identifier,
            "title": self.title,
            "url": self.url,
            "objectType": self.object_type,
            "structuredFields": self.fields.to_dict(),
            "contentBytes": base64.b64encode(self.content).decode("ascii"),
            "contentType": self.content_type,
            "version": self.version,
            "fingerprint": self.fingerprint,
        }


# Fetch outcomes: "not found" is a value, not an exception


@dataclass(frozen=True)
class Found(Generic[T]):
    item: T


@dataclass(frozen=True)
class NotFound:
    identifier: str


@dataclass(frozen=True)
class FetchError:
    identifier: str
    cause: Exception


FetchResult = Found[Any] | NotFound | FetchError


# Build outcomes


@dataclass(frozen=True)
class Built:
    document: Document


@dataclass(frozen=True)
class Deleted:
    identifier: str


@dataclass(frozen=True)
class Unmodified:
    identifier: str


@dataclass(frozen=True)
class Failed:
    identifier: str
    cause: Exception


BuildOutcome = Built | Deleted | Unmodified | Failed
