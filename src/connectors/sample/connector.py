"""Enumerator and builder over a SampleCorpus."""

from datetime import datetime
from typing import Any

from common.constants import DEFAULT_CONTENT_TYPE
from common.logger import get_logger
from sync.builder import DocumentBuilder, VersionClock
from sync.enumerator import SourceEnumerator
from sync.models import (
    Document,
    EnumerationBatch,
    FetchError,
    FetchResult,
    Found,
    NotFound,
    PushRecord,
    StructuredData,
)

from .corpus import SampleCorpus

logger = get_logger(__name__)


class SampleEnumerator(SourceEnumerator):
    """Pushes every corpus document in a single batch.

    With fingerprints (list traversal) only touched and new documents are
    rebuilt; without them (full traversal) every document is rebuilt.
    The corpus is mutated at the start of each cycle.
    """

    def __init__(self, corpus: SampleCorpus, push_fingerprints: bool = True):
        self.corpus = corpus
        self.push_fingerprints = push_fingerprints

    def enumerate(self, checkpoint: bytes | None) -> EnumerationBatch:
        self.corpus.mutate()
        records = [
            PushRecord(
                identifier=str(document_id),
                fingerprint=self.corpus.fingerprint(document_id) if self.push_fingerprints else None,
            )
            for document_id in self.corpus.ids()
        ]
        logger.info(f"Sample corpus: {len(records)} document(s)")
        return EnumerationBatch(records=records, checkpoint=None, has_more=False)


class SampleDocumentBuilder(DocumentBuilder):
    """Builds plain-text documents for corpus entries."""

    def __init__(
        self,
        corpus: SampleCorpus,
        base_url: str = "https://www.example.com/sample/",
        clock: VersionClock | None = None,
    ):
        super().__init__(clock)
        self.corpus = corpus
        self.base_url = base_url

    def fetch(self, identifier: str) -> FetchResult:
        try:
            document_id = int(identifier)
        except ValueError as e:
            return FetchError(identifier, e)

        timestamp = self.corpus.timestamp(document_id)
        if timestamp is None:
            return NotFound(identifier)
        return Found((document_id, timestamp))

    def to_document(self, identifier: str, item: Any, version: int) -> Document:
        document_id, timestamp = item
        modified = datetime.fromtimestamp(timestamp / 1000)
        return Document(
            identifier=identifier,
            title=f"Sample document {document_id}",
            url=f"{self.base_url}{document_id}",
            object_type="sampleDocument",
            version=version,
            fields=StructuredData().put("documentId", document_id).put("modifiedAt", modified),
            content=self.corpus.content(document_id).encode("utf-8"),
            content_type=DEFAULT_CONTENT_TYPE,
            fingerprint=format(timestamp, "x"),
        )
