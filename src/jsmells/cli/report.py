"""Report rendering: rich console output plus text, markdown, JSON and CSV."""

from __future__ import annotations

import csv
import io
from collections import Counter
from collections.abc import Sequence
from enum import StrEnum
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from jsmells.analysis.models import AnalysisReport, ParseDiagnostic
    from jsmells.smells.base import Smell

console = Console()
err_console = Console(stderr=True)


class OutputFormat(StrEnum):
    TEXT = "text"
    JSON = "json"
    CSV = "csv"
    MD = "md"


CSV_COLUMNS = ("file", "line", "smell", "description", "fix", "similarity")


# -----------------------------------------------------------------------
# Rich rendering
# -----------------------------------------------------------------------


def render_detailed(report: AnalysisReport) -> None:
    """Render findings grouped by file, with duplicate-code evidence."""
    console.print(
        Panel(
            Text(f"Code Smell Report: {report.root}", style="bold cyan"),
            border_style="cyan",
        )
    )
    for file, findings in report.files_with_findings().items():
        console.print(f"\n[bold]FILE:[/bold] {escape(file)}")
        for f in findings:
            console.print(f" - [cyan]\\[Line {f.line}][/cyan] [bold]{escape(f.smell)}[/bold]")
            console.print(f"   [red]Defect:[/red] {escape(f.description)}")
            console.print(f"   [green]Solution:[/green] {escape(f.fix)}")
            if f.details is not None:
                console.print(
                    Text(_indent(f.details.message, "     "), style="dim"),
                    soft_wrap=True,
                )


def render_summary_table(report: AnalysisReport) -> None:
    """Render totals and per-file counts as a rich table."""
    grouped = report.files_with_findings()
    table = Table(title="Defects by File")
    table.add_column("File")
    table.add_column("Defects", justify="right")
    for file, findings in grouped.items():
        table.add_row(escape(file), str(len(findings)))

    console.print(f"Total Code Smells: [bold]{len(report.findings)}[/bold]")
    console.print(f"Average Defects Per File: [bold]{_average(report):.2f}[/bold]")
    console.print(table)


def render_diagnostics(diagnostics: Sequence[ParseDiagnostic]) -> None:
    """Report each file that could not be parsed, once."""
    for d in diagnostics:
        err_console.print(
            f"[yellow]Skipped syntax checks for {escape(d.file)}:[/yellow] {escape(d.message)}"
        )


# -----------------------------------------------------------------------
# Plain-text rendering
# -----------------------------------------------------------------------


def render_text(report: AnalysisReport) -> str:
    """Detailed report as plain text (used for --output files)."""
    lines: list[str] = []
    for file, findings in report.files_with_findings().items():
        lines.append("FILE: " + file.replace("\\", "/"))
        for f in findings:
            lines.append(f" - [Line {f.line}] {f.smell}")
            lines.append(f"   Defect: {f.description}")
            lines.append(f"   Solution: {f.fix}")
            if f.details is not None:
                lines.append(_indent(f.details.message, "     "))
            lines.append("")
    return "\n".join(lines)


def render_summary(report: AnalysisReport) -> str:
    lines = [
        "",
        "Summary Report:",
        "===============",
        f"Total Code Smells: {len(report.findings)}",
        f"Average Defects Per File: {_average(report):.2f}",
        "",
        "Defects by File:",
    ]
    for file, findings in report.files_with_findings().items():
        lines.append(f"{file}: {len(findings)} defects")
    return "\n".join(lines)


def render_detected_smells(report: AnalysisReport) -> str:
    """List each detected smell with its occurrence count."""
    counts = Counter(f.smell for f in report.findings)
    lines = ["", "Detected Code Smells:", "===================="]
    lines.extend(f"- {smell} ({count} occurrences)" for smell, count in counts.items())
    return "\n".join(lines)


def render_smell_list(smells: Sequence[Smell]) -> str:
    lines = ["", "Available Code Smells:", "======================"]
    lines.extend(f"- {s.name}: {s.description or 'No description available'}" for s in smells)
    return "\n".join(lines)


def render_markdown(report: AnalysisReport) -> str:
    """Render report data as markdown string."""
    lines: list[str] = [f"# Code Smell Report: {report.root}", ""]
    lines.append(f"**Files analyzed**: {report.files_analyzed}")
    lines.append(f"**Total code smells**: {len(report.findings)}")
    lines.append("")

    for file, findings in report.files_with_findings().items():
        lines.append(f"## {file}")
        lines.append("| Line | Smell | Defect |")
        lines.append("|---|---|---|")
        for f in findings:
            defect = f.description.replace("|", "\\|")
            lines.append(f"| {f.line} | {f.smell} | {defect} |")
        lines.append("")

    if report.diagnostics:
        lines.append("## Parse Failures")
        for d in report.diagnostics:
            lines.append(f"- `{d.file}`: {d.message}")
        lines.append("")

    return "\n".join(lines)


def render_json(report: AnalysisReport) -> str:
    return report.model_dump_json(indent=2)


def render_csv(report: AnalysisReport) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for f in report.findings:
        similarity = f"{f.details.similarity:.4f}" if f.details is not None else ""
        writer.writerow([f.file, f.line, f.smell, f.description, f.fix, similarity])
    return buffer.getvalue()


def render(report: AnalysisReport, fmt: OutputFormat, *, summary: bool = False) -> str:
    """Render *report* as a string in the requested format."""
    if fmt is OutputFormat.JSON:
        return render_json(report)
    if fmt is OutputFormat.CSV:
        return render_csv(report)
    if fmt is OutputFormat.MD:
        return render_markdown(report)
    return render_summary(report) if summary else render_text(report)


# -----------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------


def _average(report: AnalysisReport) -> float:
    file_count = len(report.files_with_findings())
    return len(report.findings) / file_count if file_count else 0.0


def _indent(text: str, prefix: str) -> str:
    return "\n".join(prefix + line for line in text.splitlines())
