"""Smell definition shared by tree-based and line-based checks."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from jsmells.analysis.models import DuplicateDetail, Finding

if TYPE_CHECKING:
    from jsmells.ast_tracker.types import SourceUnit
    from jsmells.config import Config


@dataclass(frozen=True, slots=True)
class Occurrence:
    """One detection reported by a check, before it becomes a Finding."""

    line: int
    description: str
    details: DuplicateDetail | None = None


CheckFn = Callable[["SourceUnit", "Config"], list[Occurrence]]


@dataclass(frozen=True, slots=True)
class Smell:
    """A named check with its suggested fix."""

    name: str
    description: str
    fix: str
    check: CheckFn
    uses_tree: bool = False  # Needs a syntax tree; skipped on parse failure

    def run(self, unit: SourceUnit, config: Config) -> list[Finding]:
        """Run the check on one unit and wrap its occurrences as findings."""
        if self.uses_tree and unit.tree is None:
            return []
        return [
            Finding(
                file=unit.path,
                line=occ.line,
                smell=self.name,
                description=occ.description,
                fix=self.fix,
                details=occ.details,
            )
            for occ in self.check(unit, config)
        ]
