"""Root Typer app for jsmells CLI."""

from __future__ import annotations

import logging
from typing import Annotated

import typer

app = typer.Typer(
    name="jsmells",
    help="jsmells: Code smell detection for JavaScript and TypeScript.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log analysis progress to stderr.")
    ] = False,
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _register_commands() -> None:
    """Register all CLI commands."""
    from jsmells.cli.analyze_cmd import analyze_cmd
    from jsmells.cli.interactive_cmd import interactive_cmd
    from jsmells.cli.smells_cmd import smells_cmd

    app.command(name="analyze")(analyze_cmd)
    app.command(name="smells")(smells_cmd)
    app.command(name="interactive")(interactive_cmd)


_register_commands()
