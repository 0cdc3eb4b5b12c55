"""
Corpus-wide document frequency statistics.

A ``CorpusStatistics`` instance has two phases: it is fed every class and
method context exactly once through ``ingest``, then ``freeze`` closes it and
it becomes a read-only snapshot for vector construction.

envylint/src/envylint/corpus.py
"""

import logging
from collections import Counter
from typing import Iterable

from .models import Context

__all__ = ["CorpusStatistics", "CorpusStateError"]

logger = logging.getLogger(__name__)


class CorpusStateError(RuntimeError):
    """Raised when the ingest-then-query lifecycle of a corpus is violated."""


class CorpusStatistics:
    """Document frequency per token and the total document count."""

    def __init__(self) -> None:
        self._document_frequency: Counter = Counter()
        self._total_documents = 0
        self._frozen = False

    @classmethod
    def from_contexts(cls, contexts: Iterable[Context]) -> "CorpusStatistics":
        """Ingest every context and return the frozen statistics."""
        stats = cls()
        for context in contexts:
            stats.ingest(context)
        return stats.freeze()

    def ingest(self, context: Context) -> None:
        """Count one document: every distinct token's frequency goes up by one."""
        if self._frozen:
            raise CorpusStateError("Cannot ingest into a frozen corpus")
        self._document_frequency.update(set(context))
        self._total_documents += 1

    def freeze(self) -> "CorpusStatistics":
        """End the ingestion phase. Further ingest calls raise."""
        if not self._frozen:
            self._frozen = True
            logger.debug(
                f"Corpus frozen with {self._total_documents} documents and "
                f"{len(self._document_frequency)} distinct tokens"
            )
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def total_documents(self) -> int:
        return self._total_documents

    @property
    def vocabulary_size(self) -> int:
        return len(self._document_frequency)

    def document_frequency(self, token: str) -> int:
        """Number of documents containing ``token``; 1 for a token never ingested."""
        return self._document_frequency.get(token, 1)

    def __contains__(self, token: str) -> bool:
        return token in self._document_frequency
