"""Shared utility functions for CLI commands."""

import glob
import os
import shlex
import subprocess
from pathlib import Path
from typing import Optional

import typer

from merch.analyzer import FileStatus
from merch.config import ConfigError, load_config
from merch.document.models import LineFormatter


def expand_patterns(patterns: list[str], cwd: str) -> list[str]:
    """Expand glob patterns relative to cwd into absolute paths.

    Matches of one pattern are sorted; pattern order is kept and duplicates
    are dropped.

    Args:
        patterns: Glob patterns or plain paths.
        cwd: Directory patterns are relative to.

    Returns:
        Absolute paths of all matches.
    """
    files: list[str] = []
    seen: set[str] = set()
    for pattern in patterns:
        for match in sorted(glob.glob(pattern, root_dir=cwd, recursive=True)):
            absolute = os.path.abspath(os.path.join(cwd, match))
            if absolute not in seen:
                seen.add(absolute)
                files.append(absolute)
    return files


def read_input_list(input_file: Path) -> list[str]:
    """Read one file pattern per non-blank line."""
    content = input_file.read_text(encoding="utf-8")
    return [line.strip() for line in content.splitlines() if line.strip()]


def get_merch_file_extension(files: list[str]) -> str:
    """Extension for the temp document, taken from the first file."""
    if not files:
        return ".txt"
    return os.path.splitext(files[0])[1] or ".txt"


def load_config_or_exit() -> dict:
    """Load the configuration, turning errors into exit code 1."""
    try:
        return load_config()
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def get_formatter(comment_style: Optional[str], config: dict) -> LineFormatter:
    """Build the header formatter from --comment-style or the config."""
    style = comment_style or config["comment_style"]
    try:
        return LineFormatter.from_comment_style(style)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def find_editor(config: dict) -> list[str]:
    """Find the editor command.

    Preference order:
    1. editor from ~/.merch/config.yaml
    2. git config core.editor
    3. $EDITOR environment variable
    4. vi (notepad on Windows)

    Returns:
        List of command parts to run the editor.
    """
    editor = config.get("editor")
    if editor:
        return shlex.split(editor)

    try:
        result = subprocess.run(
            ["git", "config", "--get", "core.editor"],
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode == 0 and result.stdout.strip():
            return shlex.split(result.stdout.strip())
    except OSError:
        pass

    editor = os.environ.get("EDITOR")
    if editor:
        return shlex.split(editor)

    return ["notepad"] if os.name == "nt" else ["vi"]


def open_editor(file_path: Path, config: dict) -> None:
    """Open the file in an editor and wait for it to close.

    Raises:
        typer.Exit: If the editor cannot be started or fails.
    """
    editor_cmd = find_editor(config)

    typer.echo(f"Opening editor: {' '.join(editor_cmd)}")

    try:
        result = subprocess.run(editor_cmd + [str(file_path)], check=False)
    except FileNotFoundError:
        typer.echo(f"Error: Editor not found: {editor_cmd[0]}", err=True)
        raise typer.Exit(1)

    if result.returncode != 0:
        typer.echo(f"Error: Editor exited with status {result.returncode}", err=True)
        raise typer.Exit(1)


def offset_to_line_col(text: str, offset: int) -> tuple[int, int]:
    """1-based line and column of a character offset."""
    line = text.count("\n", 0, offset) + 1
    line_start = text.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1


def format_status(text: str, status: FileStatus) -> str:
    """Render a status as "line:col [type] message"."""
    line, col = offset_to_line_col(text, status.range.start)
    return f"{line}:{col} [{status.type}] {status.message}"
