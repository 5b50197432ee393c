"""CLI commands that build merch documents: merge and edit."""

import os
import tempfile
import time
from pathlib import Path
from typing import Optional

import typer

from merch.config import ConfigError, resolve_line_ending
from merch.document.builder import merge_files, merge_to_string
from merch.exceptions import HashMismatchError, MerchError
from merch.fs import FileSystemError, LocalFileSystem
from merch.plan.splitter import split_file
from merch.cli.utils import (
    expand_patterns,
    get_formatter,
    get_merch_file_extension,
    load_config_or_exit,
    open_editor,
    read_input_list,
)


def _forced_line_ending(config: dict) -> Optional[str]:
    try:
        return resolve_line_ending(config.get("line_ending"))
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def merge_command(
    files: Optional[list[str]] = typer.Argument(
        None,
        help="Files to merge (glob patterns)",
    ),
    merch_file: Optional[Path] = typer.Option(
        None,
        "--merch-file",
        "-m",
        help="Write the merch document to this file instead of stdout",
    ),
    input_file: Optional[Path] = typer.Option(
        None,
        "--input-file",
        "-i",
        help="File containing a list of files to merge, one per line",
    ),
    comment_style: Optional[str] = typer.Option(
        None,
        "--comment-style",
        "-c",
        help='Comment style for header lines (e.g. "// {}" or "# {}")',
    ),
    without_content: bool = typer.Option(
        False,
        "--without-content",
        "-w",
        help="Do not include file content (all blocks folded)",
    ),
) -> None:
    """Merge files into a merch document."""
    config = load_config_or_exit()
    formatter = get_formatter(comment_style, config)
    line_ending = _forced_line_ending(config)

    patterns = list(files or [])
    if input_file:
        try:
            patterns.extend(read_input_list(input_file))
        except OSError as e:
            typer.echo(f"Error: Cannot read input file: {e}", err=True)
            raise typer.Exit(1)

    cwd = os.getcwd()
    resolved = expand_patterns(patterns, cwd)
    fs = LocalFileSystem()

    try:
        if merch_file:
            with open(merch_file, "w", encoding="utf-8", newline="") as out:
                merge_files(resolved, out, formatter, cwd, without_content, fs, line_ending)
        else:
            document = merge_to_string(resolved, formatter, cwd, fs, without_content, line_ending)
            typer.echo(document, nl=False)
    except (OSError, UnicodeDecodeError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def edit_command(
    files: Optional[list[str]] = typer.Argument(
        None,
        help="Files to edit (glob patterns)",
    ),
    comment_style: Optional[str] = typer.Option(
        None,
        "--comment-style",
        "-c",
        help='Comment style for header lines (e.g. "// {}" or "# {}")',
    ),
    without_content: bool = typer.Option(
        False,
        "--without-content",
        "-w",
        help="Do not include file content (all blocks folded)",
    ),
    no_hash_check: bool = typer.Option(
        False,
        "--no-hash-check",
        help="Do not check file hashes before modifying",
    ),
) -> None:
    """Edit files together in a temporary merch document.

    Builds the document, opens it in your editor and splits it back when
    the editor closes.
    """
    config = load_config_or_exit()
    formatter = get_formatter(comment_style, config)
    line_ending = _forced_line_ending(config)
    check_hash = config["check_hash"] and not no_hash_check

    cwd = os.getcwd()
    resolved = expand_patterns(list(files or []), cwd)
    if not resolved:
        typer.echo("No files matched.", err=True)
        raise typer.Exit(1)

    fs = LocalFileSystem()
    ext = get_merch_file_extension(resolved)
    temp_file = Path(tempfile.gettempdir()) / f"merch_{int(time.time() * 1000)}.merch{ext}"

    try:
        document = merge_to_string(resolved, formatter, cwd, fs, without_content, line_ending)
        fs.write_file(str(temp_file), document)
    except (OSError, UnicodeDecodeError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    open_editor(temp_file, config)

    try:
        split_file(str(temp_file), False, fs, typer.echo, check_hash)
    except HashMismatchError as e:
        typer.echo(f"Error: {e}", err=True)
        typer.echo("Re-run with --no-hash-check to overwrite the file anyway.", err=True)
        typer.echo(f"Your edits are kept in {temp_file}", err=True)
        raise typer.Exit(1)
    except (MerchError, FileSystemError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        typer.echo(f"Your edits are kept in {temp_file}", err=True)
        raise typer.Exit(1)

    fs.delete(str(temp_file))
