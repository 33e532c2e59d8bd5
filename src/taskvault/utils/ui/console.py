"""Console utilities for the taskvault CLI."""

from functools import lru_cache

from rich.console import Console


@lru_cache(maxsize=2)
def get_console(highlight: bool = True) -> Console:
    """Get a shared Rich Console so all output goes through one place."""
    return Console(highlight=highlight)
