"""CLI smells command: list the available code smells."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

console = Console()


def smells_cmd(
    output: Annotated[
        str | None, typer.Option("-o", "--output", help="Write output to file.")
    ] = None,
) -> None:
    """List available code smells."""
    from pathlib import Path

    from jsmells.cli.report import render_smell_list
    from jsmells.smells import ALL_SMELLS

    if output:
        Path(output).write_text(render_smell_list(ALL_SMELLS), encoding="utf-8")
        console.print(f"Report saved to {output}")
        return

    table = Table(title="Available Code Smells")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Needs syntax tree", justify="center")
    for smell in ALL_SMELLS:
        table.add_row(smell.name, smell.description, "yes" if smell.uses_tree else "")
    console.print(table)
