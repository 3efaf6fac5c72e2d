"""Output formatters for different formats."""

import json
from datetime import datetime
from typing import Any

from rich.table import Table

from pomo_cli.utils.ui.console import get_console


def format_output(data: Any, output_format: str = "pretty") -> None:
    """Format and display output based on format."""
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str))
    elif output_format == "table":
        format_dict_table(data)
    else:
        format_pretty(data)


def format_pretty(data: dict) -> None:
    """Print ``key: value`` lines, the layout shell scripts grep for."""
    console = get_console()
    for key, value in data.items():
        console.print(f"{key}: {value}", highlight=False)


def format_dict_table(data: dict) -> None:
    """Format a flat dictionary as a two-column table."""
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(key.replace("_", " ").title(), str(value))
    get_console().print(table)


def format_error(message: str) -> None:
    """Format and display an error message."""
    get_console().print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    get_console().print(f"[bold green]Success:[/bold green] {message}")


def format_duration(total_seconds: int) -> str:
    """Format seconds as ``MM:SS``, or ``HH:MM:SS`` from one hour up."""
    total_seconds = max(0, int(total_seconds))
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


def format_local_time(value: datetime) -> str:
    """Format an aware datetime in the local timezone."""
    return value.astimezone().strftime("%Y-%m-%d %H:%M:%S")
