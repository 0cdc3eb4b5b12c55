"""Configuration loading for envylint.

Reads settings *only* from pyproject.toml under the [tool.envylint] section.
Raw settings are exposed as-is; typed detector settings with defaults and
environment overrides come from ``get_detector_config``.

envylint/src/envylint/config.py
"""

import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from envylint.detector import DEFAULT_THRESHOLD
from envylint.utils import walk_up_for_config

logger = logging.getLogger(__name__)

if sys.version_info >= (3, 11):

    import tomllib
else:

    try:

        import tomli as tomllib
    except ImportError as e:

        raise ImportError(
            "envylint requires Python 3.11+ or the 'tomli' package "
            "to parse pyproject.toml on Python 3.10. "
            "Hint: Try running: pip install tomli"
        ) from e

DEFAULT_INCLUDE_GLOBS = ["**/*.py"]
DEFAULT_OUTPUT = "feature_envy_results.csv"


class Config:
    """Holds the envylint configuration loaded *exclusively* from pyproject.toml.

    Attributes:
    project_root: The detected root of the project containing pyproject.toml.
    Can be None if pyproject.toml is not found.
    settings: A read-only view of the dictionary loaded from the
    [tool.envylint] section of pyproject.toml. Empty if the
    file or section is missing or invalid.

    envylint/src/envylint/config.py

    """

    def __init__(self, project_root: Path | None, config_dict: dict[str, Any]):
        self._project_root = project_root
        self._config_dict = config_dict.copy()

    @property
    def project_root(self) -> Path | None:
        """The detected project root directory, or None if not found."""
        return self._project_root

    @property
    def settings(self) -> Mapping[str, Union[str, bool, int, float, list, dict]]:
        """Read-only view of the settings loaded from [tool.envylint]."""
        return self._config_dict

    def get(
        self, key: str, default: Union[str, bool, int, float, list, dict, None] = None
    ) -> Union[str, bool, int, float, list, dict, None]:
        """Gets a value from the loaded settings, returning default if not found."""
        return self._config_dict.get(key, default)

    def __getitem__(self, key: str) -> Union[str, bool, int, float, list, dict]:
        """Gets a value, raising KeyError if the key is not found."""
        if key not in self._config_dict:
            raise KeyError(
                f"Required configuration key '{key}' not found in "
                f"[tool.envylint] section of pyproject.toml."
            )
        return self._config_dict[key]

    def __contains__(self, key: str) -> bool:
        return key in self._config_dict

    def is_present(self) -> bool:
        """Checks if a project root was found and some settings were loaded."""
        return self._project_root is not None and bool(self._config_dict)


def load_config(start_path: Path) -> Config:
    """Loads envylint configuration from the nearest pyproject.toml.

    Args:
    start_path: The directory to start searching upwards for pyproject.toml.

    Returns:
    A Config object. Its settings are empty when no project root, no
    [tool.envylint] section, or an unreadable file is found.

    envylint/src/envylint/config.py

    """
    project_root = walk_up_for_config(start_path)
    loaded_settings: dict[str, Any] = {}

    if not project_root:
        logger.warning(
            f"Could not find project root (pyproject.toml) searching from '{start_path}'. "
            "No configuration will be loaded."
        )
        return Config(project_root=None, config_dict=loaded_settings)

    pyproject_path = project_root / "pyproject.toml"
    logger.debug(f"Attempting to load config from: {pyproject_path}")

    try:
        with open(pyproject_path, "rb") as f:
            full_toml_config = tomllib.load(f)
        logger.debug(f"Parsed {pyproject_path.name}")

        tool_section = full_toml_config.get("tool")
        if not isinstance(tool_section, dict):
            logger.debug("pyproject.toml [tool] section is missing or invalid")
            envylint_config = {}
        else:
            envylint_config = tool_section.get("envylint", {})

        if isinstance(envylint_config, dict):
            loaded_settings = envylint_config
            if loaded_settings:
                logger.debug(f"Loaded [tool.envylint] settings from {pyproject_path}")
                logger.debug(f"Loaded settings: {loaded_settings}")
            else:
                logger.info(
                    f"Found {pyproject_path}, but the [tool.envylint] section is empty or missing."
                )
        else:
            logger.warning(
                f"[tool.envylint] section in {pyproject_path} is not a valid table (dictionary). "
                "Ignoring this section."
            )

    except FileNotFoundError:

        logger.error(
            f"pyproject.toml not found at {pyproject_path} despite project root detection."
        )
    except tomllib.TOMLDecodeError as e:
        logger.error(f"Error parsing {pyproject_path}: {e}. Using empty configuration.")
    except OSError as e:
        logger.error(f"Error reading {pyproject_path}: {e}. Using empty configuration.")

    return Config(project_root=project_root, config_dict=loaded_settings)


@dataclass
class DetectorConfig:
    """Typed detector configuration with explicit validation."""

    threshold: float = DEFAULT_THRESHOLD
    max_workers: Optional[int] = None
    output: str = DEFAULT_OUTPUT

    def __post_init__(self):
        """Validate tunables."""
        if isinstance(self.threshold, bool) or not isinstance(self.threshold, (int, float)):
            raise ValueError(
                f"threshold must be a number, got {self.threshold!r} - configure in [tool.envylint]"
            )
        if self.threshold < 0:
            raise ValueError(f"threshold must not be negative, got {self.threshold}")
        self.threshold = float(self.threshold)
        if self.max_workers is not None and (
            isinstance(self.max_workers, bool)
            or not isinstance(self.max_workers, int)
            or self.max_workers < 1
        ):
            raise ValueError(f"max_workers must be a positive integer, got {self.max_workers!r}")
        if not self.output:
            raise ValueError("output must be a non-empty path - configure in [tool.envylint]")


def _get_env_float(key: str) -> Optional[float]:
    """Get float value from environment variable."""
    value = os.getenv(key)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            logger.warning(f"Ignoring {key}={value!r}: not a number")
            return None
    return None


def _get_env_int(key: str) -> Optional[int]:
    """Get integer value from environment variable."""
    value = os.getenv(key)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            logger.warning(f"Ignoring {key}={value!r}: not an integer")
            return None
    return None


def get_detector_config(config: Optional[Config] = None) -> DetectorConfig:
    """Get typed detector configuration.

    Args:
        config: Optional Config object. If None, loads from current directory.

    Returns:
        Validated DetectorConfig with environment variable overrides

    """
    if config is None:
        config = load_config(Path.cwd())

    env_threshold = _get_env_float("ENVYLINT_THRESHOLD")
    env_workers = _get_env_int("ENVYLINT_MAX_WORKERS")

    kwargs = {
        "threshold": (
            env_threshold if env_threshold is not None else config.get("threshold", DEFAULT_THRESHOLD)
        ),
        "max_workers": env_workers if env_workers is not None else config.get("max_workers"),
        "output": config.get("output", DEFAULT_OUTPUT),
    }

    return DetectorConfig(**kwargs)


__all__ = [
    "Config",
    "DetectorConfig",
    "DEFAULT_INCLUDE_GLOBS",
    "DEFAULT_OUTPUT",
    "get_detector_config",
    "load_config",
]
