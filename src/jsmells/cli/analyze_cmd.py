"""CLI analyze command: detect code smells in a file or directory."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from jsmells.cli.report import (
    OutputFormat,
    console,
    err_console,
    render,
    render_detailed,
    render_detected_smells,
    render_diagnostics,
    render_summary_table,
)

if TYPE_CHECKING:
    from jsmells.config import Config


def run_analysis(
    config: Config,
    path: Path,
    *,
    smell_names: list[str] | None = None,
    summary: bool = False,
    list_smells: bool = False,
    fmt: OutputFormat = OutputFormat.TEXT,
    output: str | None = None,
) -> None:
    """Analyze *path* and print or save the report.

    Raises:
        typer.Exit: With code 1 on a missing path, unsupported file type or
            unknown smell name.
    """
    from jsmells.analysis.pipeline import analyze_path
    from jsmells.ast_tracker import UnsupportedLanguageError
    from jsmells.logging.logger import RunLogger
    from jsmells.smells import UnknownSmellError

    config.ensure_dirs()
    run_logger = RunLogger(config.log_dir)
    machine_output = fmt is not OutputFormat.TEXT

    if not machine_output:
        console.print(f"Analyzing path: {path}")

    try:
        report = analyze_path(path, config, smell_names, run_logger)
    except FileNotFoundError:
        err_console.print("[red]Invalid or empty path provided![/red]")
        raise typer.Exit(code=1) from None
    except UnsupportedLanguageError:
        err_console.print("[red]Unsupported file type.[/red]")
        raise typer.Exit(code=1) from None
    except UnknownSmellError as exc:
        err_console.print(f"[red]Unknown code smell:[/red] {exc.args[0]}")
        raise typer.Exit(code=1) from None

    render_diagnostics(report.diagnostics)

    if report.files_analyzed == 0 and not machine_output:
        console.print("No valid files found to analyze!")
        return

    if not report.findings and not machine_output:
        console.print("No code smells detected!")
        return

    if list_smells and not machine_output:
        result = render_detected_smells(report)
    else:
        result = render(report, fmt, summary=summary)

    if output:
        Path(output).write_text(result, encoding="utf-8")
        console.print(f"Report saved to {output}")
    elif machine_output or list_smells:
        typer.echo(result)
    elif summary:
        render_summary_table(report)
    else:
        render_detailed(report)


def analyze_cmd(
    path: Annotated[Path, typer.Argument(help="File or directory to analyze.")],
    smell: Annotated[
        list[str] | None,
        typer.Option("--smell", "-s", help="Only detect this smell (repeatable)."),
    ] = None,
    summary: Annotated[bool, typer.Option("--summary", help="Print a summary report.")] = False,
    list_smells: Annotated[
        bool, typer.Option("--list", help="List detected smells with counts.")
    ] = False,
    fmt: Annotated[OutputFormat, typer.Option("--format", "-f", help="Output format.")] = (
        OutputFormat.TEXT
    ),
    output: Annotated[
        str | None, typer.Option("-o", "--output", help="Write output to file.")
    ] = None,
    max_depth: Annotated[
        int | None, typer.Option("--max-depth", min=0, help="Maximum closure nesting depth.")
    ] = None,
    similarity_threshold: Annotated[
        float | None,
        typer.Option(min=0.0, max=1.0, help="Similarity at which blocks count as duplicates."),
    ] = None,
    min_duplicate_length: Annotated[
        int | None, typer.Option(min=0, help="Shortest block (characters) compared.")
    ] = None,
    workers: Annotated[
        int | None, typer.Option(min=1, help="Files analyzed in parallel (default: CPUs).")
    ] = None,
) -> None:
    """Analyze JavaScript/TypeScript code for code smells."""
    from jsmells.config import Config

    config = Config()
    if max_depth is not None:
        config.max_nesting_depth = max_depth
    if similarity_threshold is not None:
        config.similarity_threshold = similarity_threshold
    if min_duplicate_length is not None:
        config.min_duplicate_length = min_duplicate_length
    if workers is not None:
        config.workers = workers

    run_analysis(
        config,
        path,
        smell_names=smell or None,
        summary=summary,
        list_smells=list_smells,
        fmt=fmt,
        output=output,
    )
