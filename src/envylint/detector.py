"""
Feature envy detection over a corpus of class and method contexts.

Detection runs in two strict phases. First every class context and every
method context is ingested into one ``CorpusStatistics`` which is then
frozen. Then each method's TF-IDF vector is compared with its own class's
vector and with every other class's vector; each class that beats the own
class by more than the threshold yields a ``CandidateRecord``.

Phase two only reads the frozen corpus, so it is split by owning class
across a thread pool when ``max_workers`` allows it.

envylint/src/envylint/detector.py
"""

import logging
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional

from .corpus import CorpusStatistics
from .models import CandidateRecord, ClassContext, MethodContext
from .similarity import cosine_similarity
from .vectors import Vector, build_vector

__all__ = [
    "DEFAULT_THRESHOLD",
    "EnvyDetector",
    "UnknownClassError",
    "detect_feature_envy",
    "exceeds_margin",
]

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.1


class UnknownClassError(LookupError):
    """A method context names an owning class that has no class context."""

    def __init__(self, class_name: str, method_name: str) -> None:
        self.class_name = class_name
        self.method_name = method_name
        super().__init__(
            f"Method '{method_name}' belongs to class '{class_name}', "
            f"but no class context exists for '{class_name}'"
        )


def exceeds_margin(own_similarity: float, other_similarity: float, threshold: float) -> bool:
    """True when the other class is more similar than the own class by more than threshold."""
    return other_similarity - own_similarity > threshold


class EnvyDetector:
    """Compares every method against every class of the corpus."""

    def __init__(
        self,
        class_contexts: Iterable[ClassContext],
        method_contexts: Iterable[MethodContext],
        threshold: float = DEFAULT_THRESHOLD,
        max_workers: Optional[int] = None,
    ) -> None:
        self.threshold = threshold
        self.max_workers = max_workers
        self.classes: Dict[str, ClassContext] = {}
        for class_context in class_contexts:
            if class_context.name in self.classes:
                raise ValueError(f"Duplicate class context for '{class_context.name}'")
            self.classes[class_context.name] = class_context

        self.methods: List[MethodContext] = []
        seen = set()
        for method in method_contexts:
            if method.class_name not in self.classes:
                raise UnknownClassError(method.class_name, method.name)
            if method.key in seen:
                raise ValueError(
                    f"Duplicate method context for '{method.class_name}.{method.name}'"
                )
            seen.add(method.key)
            self.methods.append(method)

        self._stats: Optional[CorpusStatistics] = None

    @property
    def stats(self) -> Optional[CorpusStatistics]:
        """The frozen corpus, once ``build_corpus`` has run."""
        return self._stats

    def build_corpus(self) -> CorpusStatistics:
        """Phase one: ingest each class and method context exactly once."""
        if self._stats is None:
            stats = CorpusStatistics()
            for class_context in self.classes.values():
                stats.ingest(class_context.tokens)
            for method in self.methods:
                stats.ingest(method.tokens)
            self._stats = stats.freeze()
            logger.info(
                f"Ingested {len(self.classes)} classes and {len(self.methods)} methods "
                f"({stats.vocabulary_size} distinct tokens)"
            )
        return self._stats

    def detect(self) -> List[CandidateRecord]:
        """Phase two: score every method against every class."""
        stats = self.build_corpus()
        class_vectors = {
            name: build_vector(context.tokens, stats) for name, context in self.classes.items()
        }

        by_class: Dict[str, List[MethodContext]] = defaultdict(list)
        for method in self.methods:
            by_class[method.class_name].append(method)

        partitions = [by_class[name] for name in sorted(by_class)]
        if self.max_workers and self.max_workers > 1 and len(partitions) > 1:
            logger.debug(
                f"Scoring {len(partitions)} class partitions with max_workers={self.max_workers}"
            )
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                results = list(
                    executor.map(
                        lambda methods: self._score_methods(methods, class_vectors, stats),
                        partitions,
                    )
                )
        else:
            results = [self._score_methods(methods, class_vectors, stats) for methods in partitions]

        records = [record for partition in results for record in partition]
        records.sort(key=lambda r: (r.class_name, r.method_name, r.candidate_class))
        logger.info(
            f"Compared {len(self.methods)} methods against {len(self.classes)} classes: "
            f"{len(records)} feature envy candidates (threshold {self.threshold})"
        )
        return records

    def _score_methods(
        self,
        methods: List[MethodContext],
        class_vectors: Dict[str, Vector],
        stats: CorpusStatistics,
    ) -> List[CandidateRecord]:
        records: List[CandidateRecord] = []
        for method in methods:
            method_vector = build_vector(method.tokens, stats)
            own_similarity = cosine_similarity(method_vector, class_vectors[method.class_name])

            for other_class, other_vector in class_vectors.items():
                if other_class == method.class_name:
                    continue
                other_similarity = cosine_similarity(method_vector, other_vector)
                if exceeds_margin(own_similarity, other_similarity, self.threshold):
                    logger.debug(
                        f"{method.class_name}.{method.name}: {other_class} "
                        f"{other_similarity:.4f} vs own {own_similarity:.4f}"
                    )
                    records.append(
                        CandidateRecord(
                            class_name=method.class_name,
                            method_name=method.name,
                            own_similarity=own_similarity,
                            candidate_class=other_class,
                            candidate_similarity=other_similarity,
                            file_path=method.file_path,
                            line=method.line,
                        )
                    )
        return records


def detect_feature_envy(
    class_contexts: Iterable[ClassContext],
    method_contexts: Iterable[MethodContext],
    threshold: float = DEFAULT_THRESHOLD,
) -> List[CandidateRecord]:
    """Run both detection phases over the given contexts."""
    return EnvyDetector(class_contexts, method_contexts, threshold=threshold).detect()
