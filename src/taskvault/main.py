"""Main entry point for the taskvault CLI."""

import typer

from taskvault import __version__
from taskvault.commands import config, lists, tasks
from taskvault.utils.ui.console import get_console

app = typer.Typer(
    name="taskvault",
    help="Local task store with list moves, scheduling and n-gram search",
    no_args_is_help=True,
)

app.add_typer(tasks.app, name="tasks", help="Task management commands")
app.add_typer(lists.app, name="lists", help="Task list commands")
app.add_typer(config.app, name="config", help="Configuration management")


@app.command()
def version() -> None:
    """Show version information."""
    get_console().print(f"[bold]taskvault[/bold] version [cyan]{__version__}[/cyan]")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
