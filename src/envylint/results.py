"""
Result objects returned by envylint runs.

envylint/src/envylint/results.py
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from .detector import DEFAULT_THRESHOLD
from .models import CandidateRecord

__all__ = ["CommandResult", "CheckResult"]


@dataclass
class CommandResult:
    """
    Base class for command results.

    envylint/src/envylint/results.py
    """

    success: bool = True
    error_message: str | None = None
    exit_code: int = 0

    def __post_init__(self):
        """
        Set exit code based on success if not explicitly set.

        envylint/src/envylint/results.py
        """

        if not self.success and self.exit_code == 0:
            self.exit_code = 1


@dataclass
class CheckResult(CommandResult):
    """
    Result data from the 'check' command.

    envylint/src/envylint/results.py
    """

    records: List[CandidateRecord] = field(default_factory=list)
    files_scanned: int = 0
    class_count: int = 0
    method_count: int = 0
    skipped_files: List[Path] = field(default_factory=list)
    threshold: float = DEFAULT_THRESHOLD
    report_path: Path | None = None

    def __post_init__(self):
        super().__post_init__()
        if self.records and self.exit_code == 0:
            self.exit_code = 1

    @property
    def summary(self) -> Dict[str, int]:
        return {
            "files": self.files_scanned,
            "classes": self.class_count,
            "methods": self.method_count,
            "candidates": len(self.records),
            "skipped": len(self.skipped_files),
        }
