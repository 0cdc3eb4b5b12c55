"""
End-to-end feature envy run: discover, parse, detect, report.

envylint/runner.py
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

from .config import Config, DetectorConfig, get_detector_config
from .detector import EnvyDetector
from .discovery import discover_files, discover_files_from_paths
from .parsing import SourceUnit, merge_units, parse_file
from .reporting import get_formatter, write_csv_report
from .results import CheckResult

__all__ = ["EnvyRunner"]

logger = logging.getLogger(__name__)


class EnvyRunner:
    """
    Runner for feature envy analysis over a project.

    envylint/runner.py
    """

    def __init__(
        self,
        config: Config,
        detector_config: Optional[DetectorConfig] = None,
        show_progress: bool = True,
    ) -> None:
        """
        Initializes the EnvyRunner.

        Args:
            config: The envylint configuration object.
            detector_config: Typed detector settings; read from config when omitted.
            show_progress: Show a progress bar on stderr while parsing.

        envylint/runner.py
        """
        self.config = config
        self.detector_config = detector_config or get_detector_config(config)
        self.show_progress = show_progress

    def run(self, paths: List[Path], report_path: Optional[Path] = None) -> CheckResult:
        """
        Runs the analysis and returns the result; writes the CSV report if report_path is set.

        envylint/runner.py
        """
        if not self.config.project_root:
            logger.error("Project root not found in config. Cannot run.")
            return CheckResult(
                success=False, error_message="Project root not found", exit_code=2
            )

        if paths:
            files = discover_files_from_paths(paths, self.config)
        else:
            files = discover_files([], self.config)
        logger.debug(f"EnvyRunner.run: Discovered {len(files)} Python files.")

        units = self._parse_files(files)
        skipped = [unit.file_path for unit in units if not unit.ok and unit.file_path]
        class_contexts, method_contexts = merge_units(units)

        detector = EnvyDetector(
            class_contexts,
            method_contexts,
            threshold=self.detector_config.threshold,
            max_workers=self.detector_config.max_workers,
        )
        records = detector.detect()

        written: Optional[Path] = None
        if report_path is not None:
            written = write_csv_report(records, report_path)

        return CheckResult(
            records=records,
            files_scanned=len(files),
            class_count=len(class_contexts),
            method_count=len(method_contexts),
            skipped_files=skipped,
            threshold=self.detector_config.threshold,
            report_path=written,
        )

    def _parse_files(self, files: List[Path]) -> List[SourceUnit]:
        """
        Parses files on a thread pool. Results come back in sorted path order.

        envylint/runner.py
        """
        if not files:
            return []

        progress_console = Console(stderr=True)
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=progress_console,
            transient=True,
            disable=not self.show_progress,
        ) as progress:
            task_id = progress.add_task(f"Parsing {len(files)} Python files...", total=len(files))
            with ThreadPoolExecutor(max_workers=self.detector_config.max_workers) as executor:
                futures = {executor.submit(parse_file, f): f for f in files}
                units: List[SourceUnit] = []
                for future in futures:
                    try:
                        units.append(future.result())
                    finally:
                        progress.update(task_id, advance=1)

        return sorted(units, key=lambda u: str(u.file_path))

    def format_output(self, result: CheckResult, format_name: str) -> str:
        """
        Render a result with one of the built-in formatters.

        envylint/runner.py
        """
        formatter = get_formatter(format_name)
        return formatter.format_results(result.records, result.summary, self.config)

    def print_summary(self, result: CheckResult, console: Optional[Console] = None) -> None:
        """
        Prints a summary table of the run.

        envylint/runner.py
        """
        summary_console = console or Console()
        table = Table(title="envylint Results Summary")
        table.add_column("Category", style="cyan")
        table.add_column("Count", style="magenta")

        table.add_row("Files Scanned", str(result.files_scanned))
        table.add_row(
            "Files Skipped",
            str(len(result.skipped_files)),
            style="yellow" if result.skipped_files else "",
        )
        table.add_row("Classes", str(result.class_count))
        table.add_row("Methods", str(result.method_count))
        table.add_row(
            "Candidates",
            str(len(result.records)),
            style="red" if result.records else "green",
        )

        summary_console.print(table)
