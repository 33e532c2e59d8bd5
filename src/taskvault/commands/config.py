"""Configuration commands."""

from __future__ import annotations

import typer

from taskvault.services.config_service import get_config_service
from taskvault.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NOT_FOUND
from taskvault.utils.ui.console import get_console
from taskvault.utils.ui.formatters import format_output, format_success

from .decorators import AppError, command_wrapper

app = typer.Typer(help="Configuration management", no_args_is_help=True)


@app.command("show")
@command_wrapper
def show_config() -> None:
    """Show the whole configuration."""
    format_output(get_config_service().config.model_dump(), "yaml")


@app.command("get")
@command_wrapper
def get_config(key: str = typer.Argument(..., help="Dotted key, e.g. search.min_score")) -> None:
    """Print one configuration value."""
    try:
        value = get_config_service().get_value(key)
    except KeyError as e:
        raise AppError(f"Unknown config key '{key}'", ERROR_NOT_FOUND) from e
    get_console().print(value)


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Dotted key, e.g. search.min_score"),
    value: str = typer.Argument(..., help="New value; 'null' clears optional keys"),
) -> None:
    """Change one configuration value."""
    try:
        get_config_service().set_value(key, None if value == "null" else value)
    except KeyError as e:
        raise AppError(f"Unknown config key '{key}'", ERROR_NOT_FOUND) from e
    except ValueError as e:
        raise AppError(str(e), ERROR_INVALID_ARGS) from e
    format_success(f"{key} = {value}")


@app.command("reset")
@command_wrapper
def reset_config(force: bool = typer.Option(False, "--force", "-f")) -> None:
    """Restore the default configuration."""
    if not force and not typer.confirm("Reset configuration to defaults?"):
        raise typer.Exit(0)
    get_config_service().reset_config()
    format_success("Configuration reset")
