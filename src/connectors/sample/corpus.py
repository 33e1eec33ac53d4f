"""Synthetic document corpus that changes between traversals."""

import random
import time
from collections.abc import Callable


class SampleCorpus:
    """In-memory set of numbered documents with modification timestamps.

    The corpus is owned by whoever drives the connector; the enumerator
    mutates it once per cycle and the builder only reads it.
    """

    KEEP, TOUCH, DROP = 0, 1, 2

    def __init__(
        self,
        document_count: int = 10,
        seed: int | None = None,
        now_ms: Callable[[], int] | None = None,
    ):
        if document_count < 1:
            raise ValueError(f"document_count must be at least 1, got {document_count}")
        self.document_count = document_count
        self.documents: dict[int, int] = {}
        self.last_document_id = 0
        self._random = random.Random(seed)
        self._now_ms = now_ms or (lambda: int(time.time() * 1000))

    def mutate(self) -> None:
        """Keep, touch or drop each document with equal odds, then top up to document_count."""
        now = self._now_ms()
        for document_id in sorted(self.documents):
            action = self._random.randrange(3)
            if action == self.TOUCH:
                self.documents[document_id] = now
            elif action == self.DROP:
                del self.documents[document_id]

        while len(self.documents) < self.document_count:
            self.last_document_id += 1
            self.documents[self.last_document_id] = now

    def ids(self) -> list[int]:
        return sorted(self.documents)

    def timestamp(self, document_id: int) -> int | None:
        return self.documents.get(document_id)

    def fingerprint(self, document_id: int) -> str:
        """Hex string of the document's last modification time in ms."""
        return format(self.documents[document_id], "x")

    @staticmethod
    def content(document_id: int) -> str:
        return f"Hello world from sample doc {document_id}"
