"""CLI commands for configuration management."""

import typer

from merch.config import DEFAULT_CONFIG, ConfigError, get_config_file_path, set_config_value
from merch.cli.utils import load_config_or_exit

# Subcommand group for configuration management
config_app = typer.Typer(
    name="config",
    help="Manage merch configuration in ~/.merch/config.yaml",
    add_completion=False,
)


@config_app.command("show")
def config_show() -> None:
    """Show the current configuration."""
    config = load_config_or_exit()

    typer.echo(f"merch configuration ({get_config_file_path()}):")
    typer.echo()
    for key in DEFAULT_CONFIG:
        value = config.get(key)
        typer.echo(f"  {key}: {value if value is not None else 'not set'}")


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        ...,
        help="Config key (comment_style, check_hash, line_ending, editor)",
    ),
    value: str = typer.Argument(
        ...,
        help="New value",
    ),
) -> None:
    """Set a configuration value."""
    try:
        stored = set_config_value(key, value)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Set {key} = {stored}")
