"""Tests for corpus statistics."""

import pytest

from envylint.corpus import CorpusStateError, CorpusStatistics


def test_empty_corpus():
    """A new corpus has no documents and is not frozen."""
    stats = CorpusStatistics()

    assert stats.total_documents == 0
    assert stats.vocabulary_size == 0
    assert not stats.frozen


def test_ingest_counts_documents_and_distinct_tokens():
    """Each ingest adds one document and one count per distinct token."""
    stats = CorpusStatistics()
    stats.ingest(frozenset({"FIELD_total", "CALL_compute"}))
    stats.ingest(frozenset({"FIELD_total"}))
    stats.ingest(frozenset())

    assert stats.total_documents == 3
    assert stats.document_frequency("FIELD_total") == 2
    assert stats.document_frequency("CALL_compute") == 1
    assert "FIELD_total" in stats


def test_document_frequency_is_exact():
    """After N contexts containing a token its frequency is exactly N."""
    stats = CorpusStatistics()
    for i in range(17):
        stats.ingest(frozenset({"FIELD_shared", f"FIELD_unique_{i}"}))

    assert stats.document_frequency("FIELD_shared") == 17
    assert stats.document_frequency("FIELD_unique_3") == 1


def test_unseen_token_defaults_to_one():
    """A token never ingested reports a document frequency of 1, not 0."""
    stats = CorpusStatistics.from_contexts([frozenset({"FIELD_a"})])

    assert stats.document_frequency("FIELD_never_seen") == 1
    assert "FIELD_never_seen" not in stats


def test_duplicate_tokens_in_one_document_count_once():
    """Frequency counts documents, not occurrences."""
    stats = CorpusStatistics()
    stats.ingest(["FIELD_a", "FIELD_a", "FIELD_a"])

    assert stats.document_frequency("FIELD_a") == 1
    assert stats.total_documents == 1


def test_ingest_after_freeze_raises():
    """The ingestion phase ends with freeze."""
    stats = CorpusStatistics()
    stats.ingest(frozenset({"FIELD_a"}))
    stats.freeze()

    with pytest.raises(CorpusStateError):
        stats.ingest(frozenset({"FIELD_b"}))

    assert stats.total_documents == 1


def test_from_contexts_returns_frozen_corpus():
    """from_contexts ingests everything and freezes."""
    stats = CorpusStatistics.from_contexts(
        [frozenset({"FIELD_a"}), frozenset({"FIELD_a", "FIELD_b"})]
    )

    assert stats.frozen
    assert stats.total_documents == 2
    assert stats.document_frequency("FIELD_a") == 2


def test_freeze_is_idempotent():
    """Freezing twice is harmless."""
    stats = CorpusStatistics()

    assert stats.freeze() is stats
    assert stats.freeze() is stats
    assert stats.frozen
