"""Pytest configuration and fixtures for envylint tests."""

import tempfile
from pathlib import Path
from typing import Iterator

import pytest

from envylint.config import Config

INVOICE_SOURCE = '''"""Billing module."""


class Customer:
    """A customer with an account balance."""

    def __init__(self, name, balance):
        self.name = name
        self.balance = balance
        self.credit_limit = 1000

    def can_afford(self, amount):
        return self.balance + self.credit_limit >= amount


class Invoice:
    """An invoice for one customer."""

    def __init__(self, customer, total):
        self.customer = customer
        self.total = total

    def compute(self):
        return self.total

    def customer_headroom(self, buyer):
        return buyer.balance + buyer.credit_limit
'''


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_python_file(temp_dir: Path) -> Path:
    """Create a sample Python file with one envious method."""
    file_path = temp_dir / "billing.py"
    file_path.write_text(INVOICE_SOURCE)
    return file_path


@pytest.fixture
def sample_config(temp_dir: Path) -> Config:
    """Create a sample Config object for testing."""
    return Config(
        project_root=temp_dir,
        config_dict={
            "include_globs": ["**/*.py"],
            "exclude_globs": ["**/__pycache__/**", "**/.*"],
            "threshold": 0.1,
        },
    )


@pytest.fixture
def pyproject_toml(temp_dir: Path) -> Path:
    """Create a sample pyproject.toml file."""
    config_path = temp_dir / "pyproject.toml"
    config_path.write_text(
        """[tool.envylint]
include_globs = ["**/*.py"]
exclude_globs = ["**/__pycache__/**"]
threshold = 0.2
output = "reports/envy.csv"
max_workers = 2
"""
    )
    return config_path
