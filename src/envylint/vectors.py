"""
TF-IDF vector construction.

Contexts are token *sets*, so the term frequency of every token present is 1
and a weight reduces to ln(N / df). Tokens present in every document get a
weight of 0.

envylint/src/envylint/vectors.py
"""

import math
from typing import Dict

from .corpus import CorpusStateError, CorpusStatistics
from .models import Context

__all__ = ["Vector", "idf", "build_vector"]

Vector = Dict[str, float]

TERM_FREQUENCY = 1


def _require_queryable(stats: CorpusStatistics) -> None:
    if not stats.frozen:
        raise CorpusStateError("Corpus must be frozen before vectors are built")
    if stats.total_documents == 0:
        raise CorpusStateError("Cannot build vectors from an empty corpus")


def idf(token: str, stats: CorpusStatistics) -> float:
    """Inverse document frequency: ln(total documents / document frequency)."""
    _require_queryable(stats)
    return math.log(stats.total_documents / stats.document_frequency(token))


def build_vector(context: Context, stats: CorpusStatistics) -> Vector:
    """Build the sparse TF-IDF vector for a context."""
    _require_queryable(stats)
    total = stats.total_documents
    return {
        token: TERM_FREQUENCY * math.log(total / stats.document_frequency(token))
        for token in set(context)
    }
