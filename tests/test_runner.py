"""Tests for the end-to-end runner."""

from pathlib import Path

import pytest

from envylint.config import Config, DetectorConfig
from envylint.runner import EnvyRunner


def _runner(config: Config, **kwargs) -> EnvyRunner:
    return EnvyRunner(config, DetectorConfig(**kwargs), show_progress=False)


def test_run_flags_envious_method(sample_config: Config, sample_python_file: Path):
    """The sample billing module has one envious method."""
    result = _runner(sample_config).run([])

    assert result.success
    assert result.files_scanned == 1
    assert result.class_count == 2
    assert result.method_count == 5
    assert result.exit_code == 1

    assert len(result.records) == 1
    record = result.records[0]
    assert (record.class_name, record.method_name, record.candidate_class) == (
        "Invoice",
        "customer_headroom",
        "Customer",
    )
    assert record.own_similarity == 0.0
    assert record.candidate_similarity == pytest.approx(0.2012, abs=1e-4)
    assert record.file_path == sample_python_file.resolve()


def test_run_writes_report(sample_config: Config, sample_python_file: Path, temp_dir: Path):
    """A report path produces the CSV file."""
    report = temp_dir / "feature_envy_results.csv"

    result = _runner(sample_config).run([sample_python_file], report_path=report)

    assert result.report_path == report
    lines = report.read_text(encoding="utf-8").splitlines()
    assert lines[1] == "Invoice,customer_headroom,0.0000,Customer,0.2012,YES"


def test_run_threshold_suppresses(sample_config: Config, sample_python_file: Path):
    """A wide margin reports nothing and exits cleanly."""
    result = _runner(sample_config, threshold=0.5).run([])

    assert result.records == []
    assert result.exit_code == 0


def test_run_counts_skipped_files(sample_config: Config, sample_python_file: Path, temp_dir: Path):
    """Unparseable files are skipped without stopping the run."""
    (temp_dir / "broken.py").write_text("class Broken(:\n")

    result = _runner(sample_config, max_workers=2).run([])

    assert result.files_scanned == 2
    assert [p.name for p in result.skipped_files] == ["broken.py"]
    assert len(result.records) == 1


def test_run_skips_deeply_nested_file(sample_config: Config, sample_python_file: Path, temp_dir: Path):
    """One file too deep to parse does not stop the other files."""
    body = " + ".join(["a"] * 3000)
    (temp_dir / "deep.py").write_text(f"class Deep:\n    def total(self, a):\n        return {body}\n")

    result = _runner(sample_config).run([])

    assert result.success
    assert [p.name for p in result.skipped_files] == ["deep.py"]
    assert result.class_count == 2
    assert len(result.records) == 1


def test_run_without_project_root():
    """Without a project root the run fails."""
    result = _runner(Config(project_root=None, config_dict={})).run([])

    assert not result.success
    assert result.exit_code == 2


def test_run_empty_project(sample_config: Config):
    """No sources means no candidates and no error."""
    result = _runner(sample_config).run([])

    assert result.success
    assert result.files_scanned == 0
    assert result.records == []


def test_format_output(sample_config: Config, sample_python_file: Path):
    """Output goes through the formatter registry."""
    runner = _runner(sample_config)
    result = runner.run([])

    assert "Invoice.customer_headroom -> Customer" in runner.format_output(result, "human")
    assert runner.format_output(result, "csv").splitlines()[1].startswith("Invoice,")
