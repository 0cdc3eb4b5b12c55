"""
Source file discovery for envylint.

Uses pathlib glob/rglob based on include patterns from pyproject.toml,
then filters results using exclude patterns.
Warns if files inside common VCS directories are included due to missing excludes.

envylint/discovery.py
"""

import fnmatch
import logging
import time
from pathlib import Path
from typing import List, Optional, Set

from .config import DEFAULT_INCLUDE_GLOBS, Config
from .utils import get_relative_path

__all__ = ["discover_files", "discover_files_from_paths"]
logger = logging.getLogger(__name__)


_VCS_DIRS = {".git", ".hg", ".svn"}


def _is_excluded(
    file_path_abs: Path,
    project_root: Path,
    exclude_globs: List[str],
    explicit_exclude_paths: Set[Path],
) -> bool:
    """
    Checks if a discovered file path should be excluded.

    Checks explicit paths first, then exclude globs.

    envylint/discovery.py
    """

    if file_path_abs in explicit_exclude_paths:
        logger.debug(f"Excluding explicitly provided path: {file_path_abs}")
        return True

    try:
        rel_path_str = str(get_relative_path(file_path_abs, project_root)).replace("\\", "/")
    except ValueError:
        logger.warning(f"Path {file_path_abs} is outside project root {project_root}. Excluding.")
        return True

    for pattern in exclude_globs:
        normalized_pattern = pattern.replace("\\", "/")
        if fnmatch.fnmatch(rel_path_str, normalized_pattern):
            logger.debug(f"Excluding '{rel_path_str}' due to pattern '{pattern}'")
            return True

    return False


def _exclude_globs(config: Config) -> List[str]:
    exclude_globs = config.get("exclude_globs", [])
    if not isinstance(exclude_globs, list):
        logger.error(
            f"Configuration error: 'exclude_globs' in pyproject.toml must be a list. "
            f"Found type {type(exclude_globs)}. Ignoring exclusions."
        )
        return []
    return [p.replace("\\", "/") for p in exclude_globs]


def discover_files(
    paths: List[Path],
    config: Config,
    default_includes_if_missing: Optional[List[str]] = None,
    explicit_exclude_paths: Optional[Set[Path]] = None,
) -> List[Path]:
    """
    Discovers files using pathlib glob/rglob based on include patterns from
    pyproject.toml, then filters using exclude patterns.

    If `include_globs` is missing from the configuration, uses
    `default_includes_if_missing` (falling back to ``**/*.py``) and logs it.

    Args:
    paths: Directories to glob from. Defaults to the project root when empty.
    config: The envylint configuration object (must have project_root set).
    default_includes_if_missing: Fallback include patterns if 'include_globs'
    is not in config.settings.
    explicit_exclude_paths: A set of absolute file paths to explicitly exclude
    from the results, regardless of other rules.

    Returns:
    A sorted list of unique absolute Path objects for the discovered files.

    Raises:
    ValueError: If config.project_root is None.

    envylint/discovery.py
    """

    if config.project_root is None:
        raise ValueError("Cannot discover files without a project root defined in Config.")

    project_root = config.project_root.resolve()
    search_roots = [p.resolve() for p in paths] or [project_root]
    _explicit_excludes = explicit_exclude_paths or set()

    include_globs_config = config.get("include_globs")
    if include_globs_config is None:
        include_globs_effective = default_includes_if_missing or DEFAULT_INCLUDE_GLOBS
        logger.info(
            "Configuration key 'include_globs' missing in [tool.envylint]. "
            f"Using default patterns: {include_globs_effective}"
        )
    elif not isinstance(include_globs_config, list):
        logger.error(
            f"Configuration error: 'include_globs' in pyproject.toml must be a list. "
            f"Found type {type(include_globs_config)}. No files will be included."
        )
        return []
    else:
        include_globs_effective = include_globs_config

    normalized_includes = [p.replace("\\", "/") for p in include_globs_effective]
    normalized_exclude_globs = _exclude_globs(config)

    logger.debug(f"Effective Include globs: {normalized_includes}")
    logger.debug(f"Exclude globs: {normalized_exclude_globs}")

    start_time = time.time()
    candidate_files: Set[Path] = set()

    for search_root in search_roots:
        for pattern in normalized_includes:
            glob_method = search_root.rglob if "**" in pattern else search_root.glob
            try:
                for p in glob_method(pattern):
                    if p.is_symlink():
                        logger.debug(f"Skipping discovered symlink: {p}")
                        continue
                    if p.is_file():
                        candidate_files.add(p.resolve())
            except PermissionError as e:
                logger.warning(
                    f"Permission denied accessing path during glob for pattern '{pattern}': {e}. Skipping."
                )

    discovered_files = {
        f
        for f in candidate_files
        if not _is_excluded(f, project_root, normalized_exclude_globs, _explicit_excludes)
    }

    vcs_warnings = sorted(
        (f for f in discovered_files if any(part in _VCS_DIRS for part in f.parts)),
        key=str,
    )
    if vcs_warnings:
        logger.warning(
            f"Found {len(vcs_warnings)} files within potential VCS directories "
            f"({', '.join(sorted(_VCS_DIRS))}) that were included because they were not "
            f"matched by any 'exclude_globs' pattern in pyproject.toml."
        )
        logger.warning(
            "Consider adding patterns like '.git/**' to 'exclude_globs' "
            "in your [tool.envylint] section if this was unintended."
        )

    if not discovered_files and candidate_files:
        logger.warning("All candidate files were excluded. Check your exclude_globs patterns.")

    logger.debug(
        f"Discovery complete in {time.time() - start_time:.4f} seconds. "
        f"Returning {len(discovered_files)} files."
    )
    return sorted(discovered_files, key=str)


def discover_files_from_paths(paths: List[Path], config: Config) -> List[Path]:
    """
    Resolve CLI targets to Python files.

    File targets are used as given (when they are .py files); directory
    targets are globbed with the configured include/exclude patterns.

    envylint/discovery.py
    """
    files: Set[Path] = set()
    directories: List[Path] = []
    for path in paths:
        if path.is_file():
            if path.suffix == ".py":
                files.add(path.resolve())
            else:
                logger.debug(f"Ignoring non-Python target: {path}")
        elif path.is_dir():
            directories.append(path)

    if directories:
        files.update(discover_files(directories, config))

    return sorted(files, key=str)
