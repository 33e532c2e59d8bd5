"""Output formatters for the CLI."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any
from zoneinfo import ZoneInfo

import yaml
from rich.table import Table

from taskvault.models.contract import STATUS_NAMES
from taskvault.utils.ui.console import get_console

# Columns shown for task lists in pretty output
TASK_COLUMNS = ("id", "list_id", "status", "title", "dtstart", "due", "priority")
_INSTANT_FIELDS = frozenset(
    ("dtstart", "due", "completed", "created", "last_modified", "original_instance_time")
)


def format_instant(millis: int | None, tz: str | None = None) -> str:
    """Render epoch milliseconds as an ISO timestamp in *tz* (UTC when None)."""
    if millis is None:
        return "-"
    zone = ZoneInfo(tz) if tz else UTC
    return datetime.fromtimestamp(millis / 1000, zone).isoformat(timespec="minutes")


def _display_value(key: str, value: Any, item: dict) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "✓" if value else "✗"
    if key == "status" and value in STATUS_NAMES:
        return STATUS_NAMES[value]
    if key in _INSTANT_FIELDS and isinstance(value, int):
        return format_instant(value, item.get("tz"))
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


def format_output(data: Any, output_format: str = "pretty", columns: tuple[str, ...] | None = None) -> None:
    """Print *data* (dict or list of dicts) as pretty tables, JSON or YAML."""
    console = get_console()
    if output_format == "json":
        console.print_json(json.dumps(data, default=str))
    elif output_format == "yaml":
        console.print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False), end="")
    elif isinstance(data, list):
        format_table(data, columns)
    elif isinstance(data, dict):
        format_single_item(data)
    else:
        console.print(data)


def format_table(items: list[dict], columns: tuple[str, ...] | None = None) -> None:
    """Format a list of dictionaries as a table."""
    console = get_console()
    if not items:
        console.print("[yellow]No items found[/yellow]")
        return

    columns = columns or tuple(items[0].keys())
    table = Table(show_header=True, header_style="bold magenta")
    for col in columns:
        table.add_column(col.replace("_", " ").title())
    for item in items:
        table.add_row(*(_display_value(col, item.get(col), item) for col in columns))
    console.print(table)


def format_single_item(item: dict) -> None:
    """Format a single item as key-value pairs, skipping empty values."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")
    for key, value in item.items():
        if value is None:
            continue
        table.add_row(key.replace("_", " ").title(), _display_value(key, value, item))
    get_console().print(table)


def format_error(message: str) -> None:
    """Format and display an error message."""
    get_console().print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    get_console().print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    get_console().print(f"[bold yellow]Warning:[/bold yellow] {message}")


def format_info(message: str) -> None:
    get_console().print(f"[bold blue]Info:[/bold blue] {message}")
