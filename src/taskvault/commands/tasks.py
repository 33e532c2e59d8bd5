"""Task commands - add, update, delete, show, list, search, touch."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from zoneinfo import ZoneInfo

import typer

from taskvault.services.config_service import get_config_service
from taskvault.services.task_provider import get_task_provider
from taskvault.utils.exit_codes import ERROR_INVALID_ARGS
from taskvault.utils.timezones import get_system_timezone, is_valid_timezone
from taskvault.utils.ui.formatters import (
    TASK_COLUMNS,
    format_info,
    format_output,
    format_success,
    format_warning,
)

from .decorators import AppError, command_wrapper

app = typer.Typer(help="Task management commands", no_args_is_help=True)

STATUS_CHOICES = {"needs-action": 0, "in-process": 1, "completed": 2, "cancelled": 3}

TrustedOption = typer.Option(
    False, "--sync-adapter", help="Act as a trusted sync adapter (no bookkeeping)"
)
OutputOption = typer.Option(None, "--output", "-o", help="pretty, json or yaml")


def parse_instant(text: str, tz: str | None) -> tuple[int, bool]:
    """Parse an ISO date or date-time into epoch milliseconds.

    A bare date (``2026-03-01``) is an all-day value at UTC midnight; a
    date-time without offset is interpreted in *tz*.

    Returns:
        Tuple of (millis, is_allday)
    """
    try:
        if len(text) == 10:
            day = datetime.fromisoformat(text).replace(tzinfo=UTC)
            return int(day.timestamp() * 1000), True
        value = datetime.fromisoformat(text)
    except ValueError as e:
        raise AppError(f"Invalid date '{text}'", ERROR_INVALID_ARGS) from e
    if value.tzinfo is None:
        value = value.replace(tzinfo=ZoneInfo(tz) if tz else UTC)
    return int(value.timestamp() * 1000), False


def _output_format(output: str | None) -> str:
    return output or get_config_service().config.output.format


def _date_values(
    dtstart: str | None, due: str | None, duration: str | None, tz: str | None
) -> dict[str, Any]:
    values: dict[str, Any] = {}
    if tz is not None and not is_valid_timezone(tz):
        raise AppError(f"Unknown time zone '{tz}'", ERROR_INVALID_ARGS)
    all_day = None
    for field, text in (("dtstart", dtstart), ("due", due)):
        if text is None:
            continue
        values[field], field_all_day = parse_instant(text, tz)
        if all_day is not None and all_day != field_all_day:
            raise AppError("Start and due must both be dates or both be date-times", ERROR_INVALID_ARGS)
        all_day = field_all_day
    if all_day is not None:
        values["is_allday"] = all_day
        if not all_day:
            values["tz"] = tz or get_config_service().config.output.timezone or get_system_timezone()
    elif tz is not None:
        values["tz"] = tz
    if duration is not None:
        values["duration"] = duration
    return values


def _status_value(status: str) -> int:
    if status not in STATUS_CHOICES:
        raise AppError(
            f"Unknown status '{status}' (choose from {', '.join(STATUS_CHOICES)})",
            ERROR_INVALID_ARGS,
        )
    return STATUS_CHOICES[status]


@app.command("add")
@command_wrapper
def add_task(
    title: str = typer.Argument(..., help="Task title"),
    list_id: int = typer.Option(..., "--list", "-l", help="Id of the task list"),
    description: str | None = typer.Option(None, "--description", "-d"),
    dtstart: str | None = typer.Option(None, "--start", help="Start date or date-time"),
    due: str | None = typer.Option(None, "--due", help="Due date or date-time"),
    duration: str | None = typer.Option(None, "--duration", help="RFC 5545 duration, e.g. PT1H"),
    tz: str | None = typer.Option(None, "--tz", help="Time zone of the dates"),
    priority: int | None = typer.Option(None, "--priority", "-p", help="0 (none) to 9"),
    trusted: bool = TrustedOption,
) -> None:
    """Add a task to a list."""
    values: dict[str, Any] = {"list_id": list_id, "title": title}
    if description is not None:
        values["description"] = description
    if priority is not None:
        values["priority"] = priority
    values.update(_date_values(dtstart, due, duration, tz))

    task_id = get_task_provider().run_insert(values, is_trusted=trusted)
    format_success(f"Task {task_id} added")


@app.command("update")
@command_wrapper
def update_task(
    task_ids: list[int] = typer.Argument(..., help="Task id(s)"),
    title: str | None = typer.Option(None, "--title"),
    description: str | None = typer.Option(None, "--description", "-d"),
    list_id: int | None = typer.Option(None, "--list", "-l", help="Move to this list"),
    status: str | None = typer.Option(None, "--status", help="needs-action, in-process, completed, cancelled"),
    percent: int | None = typer.Option(None, "--percent", help="Percent complete, 0-100"),
    priority: int | None = typer.Option(None, "--priority", "-p"),
    dtstart: str | None = typer.Option(None, "--start"),
    due: str | None = typer.Option(None, "--due"),
    duration: str | None = typer.Option(None, "--duration"),
    tz: str | None = typer.Option(None, "--tz"),
    trusted: bool = TrustedOption,
) -> None:
    """Update one or more tasks."""
    values: dict[str, Any] = {}
    for field, value in (
        ("title", title),
        ("description", description),
        ("list_id", list_id),
        ("percent_complete", percent),
        ("priority", priority),
    ):
        if value is not None:
            values[field] = value
    if status is not None:
        values["status"] = _status_value(status)
    values.update(_date_values(dtstart, due, duration, tz))
    if not values:
        raise AppError("Nothing to update", ERROR_INVALID_ARGS)

    count = get_task_provider().run_update(task_ids, values, is_trusted=trusted)
    if count:
        format_success(f"Updated {count} task(s)")
    else:
        format_info("No matching tasks")


@app.command("complete")
@command_wrapper
def complete_task(task_ids: list[int] = typer.Argument(..., help="Task id(s)")) -> None:
    """Mark tasks as completed."""
    count = get_task_provider().run_update(task_ids, {"status": STATUS_CHOICES["completed"]})
    format_success(f"Completed {count} task(s)")


@app.command("delete")
@command_wrapper
def delete_task(
    task_ids: list[int] = typer.Argument(..., help="Task id(s)"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
    trusted: bool = TrustedOption,
) -> None:
    """Delete tasks."""
    if not force:
        confirm = typer.confirm(f"Delete {len(task_ids)} task(s)?")
        if not confirm:
            format_info("Cancelled")
            raise typer.Exit(0)

    count = get_task_provider().run_delete(task_ids, is_trusted=trusted)
    if count:
        format_success(f"Deleted {count} task(s)")
    else:
        format_warning("No matching tasks")


@app.command("show")
@command_wrapper
def show_task(
    task_id: int = typer.Argument(..., help="Task id"),
    output: str | None = OutputOption,
) -> None:
    """Show a task with its instance and properties."""
    provider = get_task_provider()
    data = provider.get_task(task_id).model_dump()
    instance = provider.get_instance(task_id)
    if instance is not None:
        data.update(instance.model_dump(exclude={"task_id"}))
    format_output(data, _output_format(output))


@app.command("ls")
@command_wrapper
def list_tasks(
    include_deleted: bool = typer.Option(False, "--all", "-a", help="Include deleted tasks"),
    output: str | None = OutputOption,
) -> None:
    """List tasks."""
    tasks = [t.model_dump() for t in get_task_provider().get_tasks(include_deleted)]
    format_output(tasks, _output_format(output), columns=TASK_COLUMNS)


@app.command("search")
@command_wrapper
def search_tasks(
    query: str = typer.Argument(..., help="Search text"),
    order_by: str | None = typer.Option(None, "--order-by", help="Tie-break column, '-col' for descending"),
    limit: int | None = typer.Option(None, "--limit", "-n"),
    output: str | None = OutputOption,
) -> None:
    """Search task titles, descriptions and properties."""
    provider = get_task_provider()
    rows = []
    for hit in provider.search(query, order_by=order_by, limit=limit):
        task = provider.get_task(hit.task_id)
        rows.append({"id": task.id, "score": hit.score, "title": task.title, "list_id": task.list_id})
    format_output(rows, _output_format(output), columns=("id", "score", "title", "list_id"))


@app.command("touch")
@command_wrapper
def touch_tasks() -> None:
    """Recompute derived data of every task (run after time zone changes)."""
    count = get_task_provider().touch_all()
    format_success(f"Refreshed {count} task(s)")
