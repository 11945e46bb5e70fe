"""Shared utility functions for vclight-create.

Provides project-name validation and npm-name normalisation, duration
formatting, and the Rich-based console helpers used for every user-facing
message.
"""

from __future__ import annotations

import re

from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# Name helpers
# ---------------------------------------------------------------------------

_ILLEGAL_FOLDER_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1F]')

MAX_FOLDER_NAME_LENGTH = 255


def is_valid_folder_name(name: str) -> bool:
    """Return ``True`` if *name* can be used as a project folder name.

    Rejects names containing characters reserved on common filesystems,
    blank names, and names longer than 255 characters.

    Examples::

        is_valid_folder_name("my-app")   -> True
        is_valid_folder_name("a/b")      -> False
        is_valid_folder_name("   ")      -> False
    """
    if _ILLEGAL_FOLDER_CHARS.search(name):
        return False
    if name.strip() == "":
        return False
    return len(name) <= MAX_FOLDER_NAME_LENGTH


def to_valid_npm_name(name: str) -> str:
    """Convert a folder name into a package name npm accepts.

    * Replaces runs of whitespace with a hyphen.
    * Drops every character that is not alphanumeric or a hyphen.
    * Lowercases the result.

    Examples::

        to_valid_npm_name("My App")      -> "my-app"
        to_valid_npm_name("Demo_2.0!")   -> "demo20"
    """
    result = re.sub(r"\s+", "-", name)
    result = re.sub(r"[^a-zA-Z0-9-]", "", result)
    return result.lower()


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
    """
    if seconds < 0:
        return "0.0s"

    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.1f}s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table; values are shown literally."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, escape(str(value)))

    console.print(table)
    console.print()


def print_info(message: str) -> None:
    """Print a cyan informational message."""
    console.print(f"[cyan]i[/cyan] {message}")


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def create_progress() -> Progress:
    """Create a Rich spinner for the file-creation phase.

    Returns:
        A ``Progress`` instance suitable for use as a context manager.
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
