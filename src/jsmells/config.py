"""Configuration management for jsmells."""

import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class Config:
    """Central configuration with path properties and analysis thresholds."""

    base_dir: Path = field(default_factory=lambda: Path.home() / ".jsmells")

    # Closure nesting (depth 4 triggers at the default of 3)
    max_nesting_depth: int = 3

    # Duplicate code
    similarity_threshold: float = 0.8
    min_duplicate_length: int = 5

    # Line-based smells
    max_line_length: int = 100
    line_length_warning: int = 80
    max_parameters: int = 2
    max_function_lines: int = 20
    large_object_properties: int = 10  # flagged at or above

    # Discovery
    allowed_extensions: frozenset[str] = frozenset(
        {".js", ".jsx", ".mjs", ".cjs", ".ts", ".mts", ".cts", ".tsx"}
    )
    exclude_patterns: tuple[str, ...] = (
        r"\.min\.js$",
        r"\.config\.js$",
        r"eslint\.config.*\.js$",
        r"\.d\.ts$",
    )
    ignore_dirs: frozenset[str] = frozenset(
        {"node_modules", ".git", "dist", "build", "coverage", ".next"}
    )

    # Batch analysis; None means one worker per CPU
    workers: int | None = None

    @property
    def log_dir(self) -> Path:
        return self.base_dir / "logs"

    @property
    def worker_count(self) -> int:
        return self.workers or os.cpu_count() or 1

    def ensure_dirs(self) -> None:
        """Create directory tree if it doesn't exist."""
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.log_dir.mkdir(parents=True, exist_ok=True)
