"""Task list commands."""

from __future__ import annotations

import typer

from taskvault.models.contract import LOCAL_ACCOUNT_TYPE
from taskvault.models.core import TaskListCreate
from taskvault.services.config_service import get_config_service
from taskvault.services.task_provider import get_task_provider
from taskvault.utils.ui.formatters import format_output, format_success

from .decorators import command_wrapper

app = typer.Typer(help="Task list commands", no_args_is_help=True)


@app.command("add")
@command_wrapper
def add_list(
    name: str = typer.Argument(..., help="List name"),
    color: str | None = typer.Option(None, "--color", help="Display color, e.g. #3366ff"),
    account_name: str = typer.Option("Local", "--account", help="Owning account name"),
    account_type: str = typer.Option(
        LOCAL_ACCOUNT_TYPE, "--account-type", help="Owning account type (LOCAL for device-only)"
    ),
) -> None:
    """Create a task list."""
    list_id = get_task_provider().insert_list(
        TaskListCreate(name=name, color=color, account_name=account_name, account_type=account_type)
    )
    format_success(f"List {list_id} created")


@app.command("ls")
@command_wrapper
def list_lists(
    output: str | None = typer.Option(None, "--output", "-o", help="pretty, json or yaml"),
) -> None:
    """Show all task lists."""
    lists = [tl.model_dump() for tl in get_task_provider().get_lists()]
    output_format = output or get_config_service().config.output.format
    format_output(lists, output_format, columns=("id", "name", "account_name", "account_type", "color"))
