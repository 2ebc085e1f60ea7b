"""Shared utility functions for projectboot.

Provides path comparison, URL helpers and Rich-based console reporting.  The console helpers are the only place that writes
user-facing output; everything else logs through :mod:`logging`.
"""

from __future__ import annotations

import os
from pathlib import Path

from rich.console import Console
from rich.table import Table

from .errors import ConfigError, IdenticalSourceAndTargetError

console = Console()

# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def compare_paths(first: str | Path, second: str | Path, *, force_differ: bool) -> None:
    """Compare two paths after making them absolute and normalized.

    Args:
        first: First path (relative paths resolve against the working
            directory).
        second: Second path.
        force_differ: When ``True`` the paths must differ, otherwise they
            must be equal.

    Raises:
        IdenticalSourceAndTargetError: If *force_differ* is set and the paths
            are the same.
        ConfigError: If *force_differ* is not set and the paths differ.
    """
    first_abs = os.path.abspath(os.path.normpath(first))
    second_abs = os.path.abspath(os.path.normpath(second))

    if force_differ:
        if first_abs == second_abs:
            raise IdenticalSourceAndTargetError(first_abs, second_abs)
        return

    if first_abs != second_abs:
        raise ConfigError(f"first and second path must be the same: {first_abs!r} != {second_abs!r}")


# ---------------------------------------------------------------------------
# String helpers
# ---------------------------------------------------------------------------


def strip_scheme(url: str) -> str:
    """Remove a leading ``https://`` or ``http://`` from *url*.

    Examples::

        strip_scheme("https://github.com/acme") -> "github.com/acme"
        strip_scheme("gitlab.com/acme")         -> "gitlab.com/acme"
    """
    for scheme in ("https://", "http://"):
        if url.startswith(scheme):
            return url[len(scheme):]
    return url


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
