"""CLI for envylint - all commands in one module.

Provides core commands: check, contexts.

envylint/src/envylint/cli.py
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from envylint.config import Config, DetectorConfig, get_detector_config, load_config
from envylint.parsing import parse_file
from envylint.reporting import DEFAULT_FORMAT, FORMAT_CHOICES
from envylint.runner import EnvyRunner

console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)

__all__ = ["cli", "main"]


@dataclass
class EnvylintContext:
    """Shared context for CLI commands."""

    verbose: bool = False


def _load_project_config(targets: tuple[Path, ...]) -> Config:
    start = targets[0] if targets else Path.cwd()
    config = load_config(start)
    if config.project_root is None:
        # No pyproject.toml anywhere above: analyse the target itself with defaults.
        root = start if start.is_dir() else start.parent
        config = Config(project_root=root.resolve(), config_dict={})
    return config


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """envylint: feature envy detection for Python classes."""
    ctx.obj = EnvylintContext(verbose=verbose)

    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)


@cli.command("check")
@click.argument("targets", nargs=-1, type=click.Path(exists=True, path_type=Path))
@click.option(
    "--format", "-f", type=click.Choice(FORMAT_CHOICES), default=DEFAULT_FORMAT, help="Output format"
)
@click.option("--threshold", "-t", type=float, help="Similarity margin (default 0.1)")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="CSV report path (default feature_envy_results.csv)",
)
@click.option("--no-report", is_flag=True, help="Do not write the CSV report")
@click.pass_context
def check(
    ctx: click.Context,
    targets: tuple[Path, ...],
    format: str,
    threshold: float | None,
    output: Path | None,
    no_report: bool,
) -> None:
    """Run feature envy detection."""
    config = _load_project_config(targets)

    try:
        detector_config = get_detector_config(config)
        if threshold is not None:
            detector_config = DetectorConfig(
                threshold=threshold,
                max_workers=detector_config.max_workers,
                output=detector_config.output,
            )
    except ValueError as e:
        err_console.print(f"[red]Invalid configuration: {e}[/red]")
        ctx.exit(2)

    report_path = None if no_report else (output or Path(detector_config.output))

    runner = EnvyRunner(config, detector_config, show_progress=err_console.is_terminal)
    result = runner.run(list(targets), report_path=report_path)
    if not result.success:
        err_console.print(f"[red]{result.error_message}[/red]")
        ctx.exit(result.exit_code)

    click.echo(runner.format_output(result, format))
    if format == "human":
        runner.print_summary(result, console)

    if result.report_path is not None:
        # JSON on stdout must stay parseable
        status_console = err_console if format == "json" else console
        status_console.print(f"Results saved to {result.report_path}")

    ctx.exit(result.exit_code)


@cli.command("contexts")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def contexts(ctx: click.Context, file: Path) -> None:
    """Show the token contexts extracted from a Python file."""
    unit = parse_file(file)
    if not unit.ok:
        err_console.print(f"[red]{unit.error}[/red]")
        ctx.exit(1)

    if not unit.classes:
        console.print(f"No classes found in {file}")
        return

    table = Table(title=f"Contexts in {file.name}")
    table.add_column("Class", style="cyan")
    table.add_column("Method", style="magenta")
    table.add_column("Tokens")

    for parsed in unit.classes:
        table.add_row(
            parsed.context.name, "", ", ".join(sorted(parsed.context.tokens)) or "-"
        )
        for method in parsed.methods:
            table.add_row("", method.name, ", ".join(sorted(method.tokens)) or "-")

    console.print(table)


def main() -> None:
    """
    Main entry point for the envylint CLI application.

    This function provides the entry point specified in pyproject.toml.
    """
    try:
        cli(prog_name="envylint")
    except SystemExit as e:
        sys.exit(e.code)
    except (RuntimeError, ValueError, OSError) as e:
        err_console.print(f"[bold red]An unexpected error occurred: {e}[/bold red]")
        if logger.hasHandlers():
            logger.error("Unhandled exception in CLI execution.", exc_info=True)
        sys.exit(1)
