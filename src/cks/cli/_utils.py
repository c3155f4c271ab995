"""CLI utilities."""

from __future__ import annotations

import json
import logging
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from cks.exceptions import CKSError, ConfigurationError
from cks.manager import ClusterManager

console = Console()
error_console = Console(stderr=True)


def setup_logging(debug: bool = False) -> None:
    """Send library logs to stderr through rich."""
    level = logging.DEBUG if debug else logging.WARNING
    handler = RichHandler(console=error_console, show_path=False)
    root = logging.getLogger("cks")
    root.handlers[:] = [handler]
    root.setLevel(level)


def get_manager() -> ClusterManager:
    """Get a ClusterManager synced with the configured cluster."""
    try:
        manager = ClusterManager.from_config()
    except ConfigurationError as e:
        error_console.print(f"[red]Configuration error:[/red] {e}")
        error_console.print("\nSet API_KEY, SECRET_KEY, ENDPOINT and CKS_NODES, or run:")
        error_console.print("  cks config set <key> <value>")
        raise typer.Exit(1) from None

    try:
        manager.fetch()
    except CKSError as e:
        manager.close()
        handle_error(e)
    return manager


def output_json(data: Any) -> None:
    """Output data as JSON."""
    if hasattr(data, "model_dump"):
        data = data.model_dump(mode="json")
    elif isinstance(data, list) and data and hasattr(data[0], "model_dump"):
        data = [item.model_dump(mode="json") for item in data]

    console.print_json(json.dumps(data, default=str))


def output_table(
    data: list[Any],
    columns: list[tuple[str, str]],
    title: str | None = None,
) -> None:
    """Output data as a Rich table.

    Args:
        data: List of objects
        columns: List of (field_name, header) tuples
        title: Optional table title
    """
    table = Table(title=title, show_header=True, header_style="bold")

    for _, header in columns:
        table.add_column(header)

    for item in data:
        row = []
        for field, _ in columns:
            if hasattr(item, field):
                value = getattr(item, field)
            elif isinstance(item, dict):
                value = item.get(field, "")
            else:
                value = ""

            if value is None:
                value = "-"

            row.append(str(value))

        table.add_row(*row)

    console.print(table)


def handle_error(e: Exception) -> None:
    """Handle and display an error."""
    if isinstance(e, CKSError):
        error_console.print(f"[red]Error:[/red] {e.message}")
    else:
        error_console.print(f"[red]Error:[/red] {e}")

    raise typer.Exit(1)


def get_json_flag(ctx: typer.Context) -> bool:
    """Get JSON output flag from context."""
    return ctx.obj.get("json", False) if ctx.obj else False


def mask_secret(value: str) -> str:
    return value[:8] + "..." + value[-4:] if len(value) > 12 else "***"
