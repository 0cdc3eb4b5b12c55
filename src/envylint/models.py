"""
Data model shared by the extractor, the corpus and the detector.

envylint/src/envylint/models.py
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

__all__ = ["Context", "ClassContext", "MethodContext", "CandidateRecord"]

# A context is the set of distinct tokens one class or method references.
Context = FrozenSet[str]


@dataclass(frozen=True)
class ClassContext:
    """Tokens derived from a class's declared field names."""

    name: str
    tokens: Context
    file_path: Optional[Path] = None
    line: int = 0


@dataclass(frozen=True)
class MethodContext:
    """Tokens derived from one method body, keyed by (class name, method name)."""

    class_name: str
    name: str
    tokens: Context
    file_path: Optional[Path] = None
    line: int = 0

    @property
    def key(self) -> Tuple[str, str]:
        return (self.class_name, self.name)


@dataclass(frozen=True)
class CandidateRecord:
    """A method that looks more similar to another class than to its own."""

    class_name: str
    method_name: str
    own_similarity: float
    candidate_class: str
    candidate_similarity: float
    flagged: bool = True
    file_path: Optional[Path] = None
    line: int = 0

    @property
    def margin(self) -> float:
        return self.candidate_similarity - self.own_similarity

    def to_row(self) -> List[str]:
        """Convert the record to a report row (similarities at 4 decimals)."""
        return [
            self.class_name,
            self.method_name,
            f"{self.own_similarity:.4f}",
            self.candidate_class,
            f"{self.candidate_similarity:.4f}",
            "YES" if self.flagged else "NO",
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Convert record to dictionary for JSON output."""
        return {
            "class": self.class_name,
            "method": self.method_name,
            "own_similarity": round(self.own_similarity, 4),
            "candidate_class": self.candidate_class,
            "candidate_similarity": round(self.candidate_similarity, 4),
            "margin": round(self.margin, 4),
            "flagged": self.flagged,
            "path": str(self.file_path) if self.file_path else None,
            "line": self.line,
        }
