"""File discovery: walk a directory and keep the analyzable sources."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import TYPE_CHECKING

from jsmells.ast_tracker.exceptions import UnsupportedLanguageError

if TYPE_CHECKING:
    from jsmells.config import Config

logger = logging.getLogger(__name__)


def is_analyzable(path: Path, config: Config) -> bool:
    """Allowed extension and not matching any exclude pattern."""
    if path.suffix.lower() not in config.allowed_extensions:
        return False
    posix = path.as_posix()
    return not any(re.search(pattern, posix, re.IGNORECASE) for pattern in config.exclude_patterns)


def explore_folder(root: Path, config: Config) -> list[Path]:
    """Recursively collect analyzable files under *root*, sorted by path.

    Directories named in ``config.ignore_dirs`` are not entered. Unreadable
    directories are logged and skipped.
    """
    files: list[Path] = []

    def _on_error(exc: OSError) -> None:
        logger.warning("Error reading directory %s: %s", exc.filename, exc.strerror)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        dirnames[:] = sorted(d for d in dirnames if d not in config.ignore_dirs)
        for filename in filenames:
            path = Path(dirpath) / filename
            if is_analyzable(path, config):
                files.append(path)

    return sorted(files)


def discover_files(target: Path, config: Config) -> tuple[list[Path], Path]:
    """Resolve *target* into the files to analyze and the project root.

    Raises:
        FileNotFoundError: *target* does not exist.
        UnsupportedLanguageError: *target* is a file with an unsupported type.
    """
    if not target.exists():
        raise FileNotFoundError(f"Path does not exist: {target}")

    if target.is_dir():
        files = explore_folder(target, config)
        logger.info("Found %d files to analyze under %s", len(files), target)
        return files, target

    if not is_analyzable(target, config):
        raise UnsupportedLanguageError(f"Unsupported file type: {target}")
    return [target], target.parent
