"""Document builder contract and version tokens."""

import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from common.logger import get_logger

from .models import (
    BuildOutcome,
    Built,
    Classification,
    Deleted,
    Document,
    Failed,
    FetchError,
    FetchResult,
    NotFound,
    Unmodified,
)

logger = get_logger(__name__)


class VersionClock:
    """Issues version tokens that never regress for the same identifier.

    Tokens are wall-clock milliseconds, bumped by one when the clock has not
    advanced past the last token issued for an identifier.
    """

    def __init__(self, now_ms: Callable[[], int] | None = None):
        self._now_ms = now_ms or (lambda: int(time.time() * 1000))
        self._last: dict[str, int] = {}
        self._lock = threading.Lock()

    def next(self, identifier: str) -> int:
        with self._lock:
            version = max(self._now_ms(), self._last.get(identifier, 0) + 1)
            self._last[identifier] = version
            return version


class DocumentBuilder(ABC):
    """Maps source items to documents.

    Subclasses implement fetch() and to_document(). build() is safe to call
    concurrently for distinct identifiers as long as fetch() and
    to_document() keep no per-call state on the instance.
    """

    def __init__(self, clock: VersionClock | None = None):
        self.clock = clock or VersionClock()

    def build(
        self,
        identifier: str,
        fingerprint: str | None,
        classification: Classification,
    ) -> BuildOutcome:
        """Build the document for one enumerated identifier.

        Args:
            identifier: Item identifier
            fingerprint: Fingerprint reported by the enumerator
            classification: Result of reconciliation for this identifier

        Returns:
            Unmodified without fetching when the item is unchanged, Deleted
            when the source no longer has it, Failed on fetch errors, and
            Built otherwise
        """
        if classification == Classification.UNMODIFIED:
            return Unmodified(identifier)

        result = self.fetch(identifier)

        if isinstance(result, NotFound):
            logger.info(f"Item no longer exists: {identifier}")
            return Deleted(identifier)
        if isinstance(result, FetchError):
            return Failed(identifier, result.cause)

        try:
            document = self.to_document(identifier, result.item, self.clock.next(identifier))
        except Exception as e:
            logger.warning(f"Unable to build document for {identifier}: {e}")
            return Failed(identifier, e)
        return Built(document)

    @abstractmethod
    def fetch(self, identifier: str) -> FetchResult:
        """Retrieve the current source object for an identifier.

        Returns:
            Found(item), NotFound(identifier) or FetchError(identifier, cause)
        """
        pass

    @abstractmethod
    def to_document(self, identifier: str, item: Any, version: int) -> Document:
        """Map a fetched source object to a document."""
        pass
