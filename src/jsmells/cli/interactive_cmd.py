"""CLI interactive command: menu-driven analysis."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt

if TYPE_CHECKING:
    from jsmells.config import Config
    from jsmells.smells.base import Smell

console = Console()

MENU = (
    ("all", "Analyze code for all smells"),
    ("specific", "Analyze code for specific smells"),
    ("list", "List available code smells"),
    ("exit", "Exit"),
)


def _choose_action() -> str:
    console.print("\n[bold]What would you like to do?[/bold]")
    for i, (_, label) in enumerate(MENU, 1):
        console.print(f"  {i}. {label}")
    choice = IntPrompt.ask(
        "Choice", choices=[str(i) for i in range(1, len(MENU) + 1)], default=1
    )
    return MENU[choice - 1][0]


def _ask_path() -> Path:
    while True:
        answer = Prompt.ask("Enter the path to analyze (file or directory)").strip()
        if not answer:
            console.print("[red]Path cannot be empty[/red]")
        elif not Path(answer).exists():
            console.print("[red]Path does not exist[/red]")
        else:
            return Path(answer)


def _ask_smells(smells: list[Smell]) -> list[str]:
    """Ask for a comma-separated list of smell numbers."""
    console.print("\n[bold]Select which code smells to detect:[/bold]")
    for i, smell in enumerate(smells, 1):
        console.print(f"  {i}. {smell.name}: {smell.description or 'No description available'}")
    while True:
        answer = Prompt.ask("Numbers (comma-separated)")
        try:
            picked = sorted({int(part) for part in answer.split(",") if part.strip()})
        except ValueError:
            picked = []
        if picked and all(1 <= n <= len(smells) for n in picked):
            return [smells[n - 1].name for n in picked]
        console.print("[red]You must choose at least one code smell.[/red]")


def run_menu(config: Config) -> None:
    """Loop over the action menu until the user exits."""
    from jsmells.cli.analyze_cmd import run_analysis
    from jsmells.cli.report import OutputFormat, render_smell_list
    from jsmells.smells import ALL_SMELLS

    while True:
        action = _choose_action()
        if action == "exit":
            break

        if action == "list":
            typer.echo(render_smell_list(ALL_SMELLS))
        else:
            path = _ask_path()
            smell_names = _ask_smells(list(ALL_SMELLS)) if action == "specific" else None
            summary = Prompt.ask(
                "What type of report would you like?",
                choices=["detailed", "summary"],
                default="detailed",
            ) == "summary"

            output = None
            fmt = OutputFormat.TEXT
            if Confirm.ask("Would you like to save the output to a file?", default=False):
                output = Prompt.ask("Enter the output file path", default="report.txt")
                fmt = OutputFormat(
                    Prompt.ask(
                        "Select output format",
                        choices=[f.value for f in OutputFormat],
                        default=OutputFormat.TEXT.value,
                    )
                )

            try:
                run_analysis(
                    config,
                    path,
                    smell_names=smell_names,
                    summary=summary,
                    fmt=fmt,
                    output=output,
                )
            except typer.Exit:
                # run_analysis has already printed the error
                pass

        if not Confirm.ask("Would you like to perform another action?", default=False):
            break

    console.print("Goodbye!")


def interactive_cmd() -> None:
    """Run in interactive mode."""
    from jsmells.config import Config

    run_menu(Config())
