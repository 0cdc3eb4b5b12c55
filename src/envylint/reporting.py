"""
Report output for feature envy candidates.

The CSV report is the reference format consumed by downstream tooling; the
human and JSON formatters render the same records for the console.

envylint/src/envylint/reporting.py
"""

import csv
import io
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .models import CandidateRecord

__all__ = [
    "CSV_HEADER",
    "BaseFormatter",
    "HumanFormatter",
    "JsonFormatter",
    "CsvFormatter",
    "BUILTIN_FORMATTERS",
    "FORMAT_CHOICES",
    "DEFAULT_FORMAT",
    "get_formatter",
    "render_csv",
    "write_csv_report",
]

logger = logging.getLogger(__name__)

CSV_HEADER = [
    "Method Class",
    "Method Name",
    "Current Class Similarity",
    "Candidate Class",
    "Candidate Similarity",
    "Suggestion",
]


def _write_rows(handle, records: Iterable[CandidateRecord]) -> int:
    writer = csv.writer(handle, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    count = 0
    for record in records:
        # Only flagged comparisons are reported; there is no NO row.
        if record.flagged:
            writer.writerow(record.to_row())
            count += 1
    return count


def render_csv(records: Iterable[CandidateRecord]) -> str:
    """Render records in the CSV report format."""
    buffer = io.StringIO()
    _write_rows(buffer, records)
    return buffer.getvalue()


def write_csv_report(records: Iterable[CandidateRecord], path: Path) -> Path:
    """Write the CSV report to ``path`` and return it."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        count = _write_rows(f, records)
    logger.info(f"Wrote {count} candidate rows to {path}")
    return path


class BaseFormatter(ABC):
    """Base class for formatters."""

    name: str = ""
    description: str = ""

    @abstractmethod
    def format_results(
        self,
        records: List[CandidateRecord],
        summary: Dict[str, int],
        config: Optional[Any] = None,
    ) -> str:
        """Format detection results for output."""
        pass


class HumanFormatter(BaseFormatter):
    """Plain text output for people reading a terminal."""

    name = "human"
    description = "Human-readable list of candidates with a summary line"

    def format_results(
        self,
        records: List[CandidateRecord],
        summary: Dict[str, int],
        config: Optional[Any] = None,
    ) -> str:
        """Format results for human reading."""
        if not records:
            return f"No feature envy found ({summary.get('methods', 0)} methods checked)."

        max_displayed = 50
        if config is not None and hasattr(config, "get"):
            raw_limit = config.get("max_displayed_issues", 50)
            try:
                max_displayed = int(raw_limit)
            except (TypeError, ValueError):
                logger.warning(
                    f"Invalid max_displayed_issues {raw_limit!r} in [tool.envylint]; using 50"
                )

        lines = ["FEATURE-ENVY:"]
        for index, record in enumerate(records):
            if max_displayed > 0 and index >= max_displayed:
                lines.append("")
                lines.append(
                    f"  WARNING: Showing first {max_displayed} candidates. "
                    f"{len(records) - max_displayed} more found."
                )
                lines.append(
                    "  TIP: Set max_displayed_issues = 0 in pyproject.toml to show all candidates."
                )
                break

            location = ""
            if record.file_path:
                location = (
                    f" ({record.file_path}:{record.line})"
                    if record.line > 0
                    else f" ({record.file_path})"
                )
            lines.append(
                f"  {record.class_name}.{record.method_name} -> {record.candidate_class}: "
                f"{record.candidate_similarity:.4f} vs own {record.own_similarity:.4f}{location}"
            )
            lines.append(
                f"    → Consider moving '{record.method_name}' to {record.candidate_class}"
            )

        envious_methods = len({(r.class_name, r.method_name) for r in records})
        lines.append(
            f"\nSummary: {len(records)} candidates in {envious_methods} methods "
            f"({summary.get('methods', 0)} methods, {summary.get('classes', 0)} classes checked)"
        )
        return "\n".join(lines)


class JsonFormatter(BaseFormatter):
    """JSON output formatter for machine processing."""

    name = "json"
    description = "JSON output format for CI/tooling integration"

    def format_results(
        self,
        records: List[CandidateRecord],
        summary: Dict[str, int],
        config: Optional[Any] = None,
    ) -> str:
        """Format results as JSON."""
        result = {"summary": summary, "candidates": [record.to_dict() for record in records]}
        return json.dumps(result, indent=2, default=str)


class CsvFormatter(BaseFormatter):
    """The CSV report, printed instead of written to a file."""

    name = "csv"
    description = "CSV rows in the report format"

    def format_results(
        self,
        records: List[CandidateRecord],
        summary: Dict[str, int],
        config: Optional[Any] = None,
    ) -> str:
        return render_csv(records).rstrip("\n")


BUILTIN_FORMATTERS = {
    "human": HumanFormatter,
    "json": JsonFormatter,
    "csv": CsvFormatter,
}

# Format choices for CLI - single source of truth
FORMAT_CHOICES = list(BUILTIN_FORMATTERS.keys())
DEFAULT_FORMAT = "human"


def get_formatter(name: str) -> BaseFormatter:
    """Instantiate a built-in formatter by name."""
    try:
        return BUILTIN_FORMATTERS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown format '{name}'. Choose one of: {', '.join(FORMAT_CHOICES)}"
        ) from None
