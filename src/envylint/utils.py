"""
Path helpers shared by configuration loading and discovery.

src/envylint/utils.py
"""

from pathlib import Path
from typing import Optional

__all__ = ["walk_up_for_config", "get_relative_path"]


def walk_up_for_config(start_path: Path) -> Optional[Path]:
    """
    Walk upwards from start_path to the nearest directory holding a pyproject.toml.

    src/envylint/utils.py
    """
    current = start_path.resolve()
    if current.is_file():
        current = current.parent

    for candidate in [current] + list(current.parents):
        if (candidate / "pyproject.toml").is_file():
            return candidate
    return None


def get_relative_path(file_path: Path, base_path: Path) -> Path:
    """
    Path of file_path relative to base_path.

    Raises:
        ValueError: if file_path is not inside base_path.

    src/envylint/utils.py
    """
    return file_path.resolve().relative_to(base_path.resolve())
