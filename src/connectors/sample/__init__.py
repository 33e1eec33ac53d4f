"""Synthetic sample connector."""

from .connector import SampleDocumentBuilder, SampleEnumerator
from .corpus import SampleCorpus

__all__ = ["SampleCorpus", "SampleDocumentBuilder", "SampleEnumerator"]
