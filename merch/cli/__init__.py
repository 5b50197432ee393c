"""CLI entry point for merch.

This module provides the main CLI application that combines all commands
and subcommands into a single unified interface.
"""

import typer

from merch import __version__
from merch.cli.config import config_app
from merch.cli.merge import edit_command, merge_command
from merch.cli.split import split_command, status_command


def main_command(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show the version and exit",
    ),
) -> None:
    """Edit many files as one document, then split the edits back."""
    if version:
        typer.echo(f"merch {__version__}")
        raise typer.Exit(0)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


# Main application
app = typer.Typer(
    name="merch",
    help="merch: edit many files as one document",
    add_completion=False,
)

app.add_typer(config_app, name="config")

app.command("merge")(merge_command)
app.command("edit")(edit_command)
app.command("split")(split_command)
app.command("status")(status_command)

app.callback(invoke_without_command=True)(main_command)


__all__ = [
    "app",
    "config_app",
    "main_command",
    "merge_command",
    "edit_command",
    "split_command",
    "status_command",
]
