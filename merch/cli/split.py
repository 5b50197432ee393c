"""CLI commands that read merch documents: split and status."""

from pathlib import Path

import typer

from merch.analyzer import analyze_merch_text
from merch.document.parser import parse_merch_doc
from merch.exceptions import HashMismatchError, MerchError
from merch.fs import FileSystemError, LocalFileSystem
from merch.plan.splitter import split_content
from merch.cli.utils import format_status, load_config_or_exit


def _read_document(file: Path) -> str:
    try:
        return LocalFileSystem().read_file(str(file))
    except (OSError, UnicodeDecodeError) as e:
        typer.echo(f"Error: Cannot read {file}: {e}", err=True)
        raise typer.Exit(1)


def split_command(
    file: Path = typer.Argument(
        ...,
        help="Merch document to split",
    ),
    dry: bool = typer.Option(
        False,
        "--dry",
        "-d",
        help="Only print the actions, do not touch any file",
    ),
    no_hash_check: bool = typer.Option(
        False,
        "--no-hash-check",
        help="Do not check file hashes before modifying",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Print parse details and diagnostics before splitting",
    ),
) -> None:
    """Split a merch document back into files."""
    config = load_config_or_exit()
    check_hash = config["check_hash"] and not no_hash_check
    content = _read_document(file)

    try:
        if debug:
            doc = parse_merch_doc(content)
            typer.echo(f"Base path: {doc.base_path}")
            typer.echo(
                f"Files: {len(doc.existing_files)} existing, "
                f"{len(doc.updated_files)} updated, {len(doc.new_files)} new"
            )
            for diagnostic in doc.diagnostics:
                typer.echo(f"  [{diagnostic.severity}] {diagnostic.message}")

        split_content(content, dry, LocalFileSystem(), typer.echo, check_hash)

    except HashMismatchError as e:
        typer.echo(f"Error: {e}", err=True)
        typer.echo("Re-run with --no-hash-check to overwrite the file anyway.", err=True)
        raise typer.Exit(1)
    except (MerchError, FileSystemError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def status_command(
    file: Path = typer.Argument(
        ...,
        help="Merch document to analyze",
    ),
) -> None:
    """Show what splitting a merch document would do, without touching disk."""
    content = _read_document(file)
    statuses = analyze_merch_text(content)

    if not statuses:
        typer.echo("No changes.")
        return

    for status in sorted(statuses, key=lambda s: s.range.start):
        typer.echo(format_status(content, status))

    if any(status.type == "error" for status in statuses):
        raise typer.Exit(1)
