"""Analysis pipeline: run smells per unit and fan units out over a worker pool.

Per unit everything is synchronous: the tree is built once, each smell runs
once, and the unit's findings are merged by its own aggregator. Units share
no state, so a batch runs them on ``asyncio.to_thread`` workers bounded by a
semaphore and merges results on the event-loop thread.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from jsmells.analysis.aggregator import FindingAggregator
from jsmells.analysis.discovery import discover_files
from jsmells.analysis.models import AnalysisReport, Finding, ParseDiagnostic
from jsmells.ast_tracker import UnsupportedLanguageError, load_unit
from jsmells.smells import select_smells

if TYPE_CHECKING:
    from jsmells.ast_tracker.types import SourceUnit
    from jsmells.config import Config
    from jsmells.logging.logger import RunLogger
    from jsmells.smells.base import Smell

logger = logging.getLogger(__name__)


@dataclass
class UnitResult:
    """Outcome of analyzing one file."""

    path: str
    findings: list[Finding] = field(default_factory=list)
    diagnostic: ParseDiagnostic | None = None
    skipped: bool = False


def analyze_unit(
    unit: SourceUnit,
    config: Config,
    smells: Sequence[Smell],
) -> tuple[list[Finding], ParseDiagnostic | None]:
    """Run *smells* over one unit.

    Returns the unit's deduplicated findings ordered by line, plus one
    diagnostic if its syntax tree could not be built.
    """
    aggregator = FindingAggregator()
    for smell in smells:
        aggregator.extend(smell.run(unit, config))

    diagnostic = None
    if unit.parse_error is not None:
        diagnostic = ParseDiagnostic(file=unit.path, message=unit.parse_error)
    return aggregator.findings(), diagnostic


def analyze_source(
    source: str,
    file_path: str,
    config: Config,
    smells: Sequence[Smell] | None = None,
) -> tuple[list[Finding], ParseDiagnostic | None]:
    """Analyze in-memory source text as if it were *file_path*."""
    smells = list(smells) if smells is not None else select_smells()
    unit = load_unit(file_path, source, parse=any(s.uses_tree for s in smells))
    return analyze_unit(unit, config, smells)


def _analyze_path(path: Path, config: Config, smells: Sequence[Smell]) -> UnitResult:
    file_path = str(path)
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.warning("Error reading file %s: %s", file_path, exc)
        return UnitResult(
            path=file_path,
            diagnostic=ParseDiagnostic(file=file_path, message=f"Could not read file: {exc}"),
        )

    if not text.strip():
        logger.warning("Skipping empty file: %s", file_path)
        return UnitResult(path=file_path, skipped=True)

    try:
        findings, diagnostic = analyze_source(text, file_path, config, smells)
    except UnsupportedLanguageError as exc:
        logger.warning("Skipping %s: %s", file_path, exc)
        return UnitResult(
            path=file_path,
            diagnostic=ParseDiagnostic(file=file_path, message=str(exc)),
        )
    if diagnostic is not None:
        logger.warning("Could not parse %s: %s", file_path, diagnostic.message)
    return UnitResult(path=file_path, findings=findings, diagnostic=diagnostic)


async def analyze_files_async(
    paths: Sequence[Path],
    config: Config,
    smells: Sequence[Smell],
    run_logger: RunLogger | None = None,
) -> tuple[list[Finding], list[ParseDiagnostic]]:
    """Analyze *paths* concurrently, at most ``config.worker_count`` at a time."""
    semaphore = asyncio.Semaphore(config.worker_count)

    async def _run(path: Path) -> UnitResult:
        async with semaphore:
            return await asyncio.to_thread(_analyze_path, path, config, smells)

    results = await asyncio.gather(*(_run(p) for p in paths))

    aggregator = FindingAggregator()
    diagnostics: list[ParseDiagnostic] = []
    for result in results:
        aggregator.extend(result.findings)
        if result.diagnostic is not None:
            diagnostics.append(result.diagnostic)
            if run_logger is not None:
                run_logger.log(
                    "analysis.parse_failure",
                    {"message": result.diagnostic.message},
                    file_path=result.path,
                )

    return aggregator.findings(), diagnostics


def analyze_files(
    paths: Sequence[Path],
    config: Config,
    smells: Sequence[Smell],
    run_logger: RunLogger | None = None,
) -> tuple[list[Finding], list[ParseDiagnostic]]:
    """Synchronous wrapper around analyze_files_async."""
    return asyncio.run(analyze_files_async(paths, config, smells, run_logger))


def analyze_path(
    target: Path,
    config: Config,
    smell_names: Sequence[str] | None = None,
    run_logger: RunLogger | None = None,
) -> AnalysisReport:
    """Discover files under *target*, analyze them and build the report.

    Raises:
        FileNotFoundError: *target* does not exist.
        UnsupportedLanguageError: *target* is an unsupported file.
        UnknownSmellError: A name in *smell_names* is not registered.
    """
    smells = select_smells(smell_names)
    files, project_root = discover_files(target, config)

    start = time.monotonic()
    if run_logger is not None:
        with run_logger.timed("analysis.run", file_path=str(target)) as ctx:
            findings, diagnostics = analyze_files(files, config, smells, run_logger)
            ctx.update(
                files=len(files),
                findings=len(findings),
                parse_failures=len(diagnostics),
            )
    else:
        findings, diagnostics = analyze_files(files, config, smells)

    return AnalysisReport(
        root=str(project_root),
        files_analyzed=len(files),
        findings=findings,
        diagnostics=diagnostics,
        duration_seconds=round(time.monotonic() - start, 3),
    )
