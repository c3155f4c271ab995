"""Configuration CLI commands."""

from __future__ import annotations

import typer
from rich.console import Console

from cks._config import (
    CONFIG_FILE,
    ENV_VARS,
    SECRET_KEYS,
    CKSConfig,
    get_config_value,
    set_config_value,
)
from cks.cli._utils import handle_error, mask_secret
from cks.exceptions import CKSError

app = typer.Typer(help="Configuration management.")
console = Console()


@app.command("get")
def get(
    key: str = typer.Argument(..., help="Configuration key"),
) -> None:
    """Get a configuration value.

    Example:
        cks config get endpoint
    """
    try:
        value = get_config_value(key)
    except CKSError as e:
        handle_error(e)

    if value is None:
        console.print(f"[dim]No value set for '{key}'[/dim]")
    else:
        if key in SECRET_KEYS and value:
            value = mask_secret(value)
        console.print(value)


@app.command("set")
def set_value(
    key: str = typer.Argument(..., help="Configuration key"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value.

    Example:
        cks config set endpoint https://cloud.example.com/client/api
        cks config set nodes 1:5:5d3c2a0e-...
    """
    # Convert value types
    if value.lower() in ("true", "false"):
        typed_value: str | bool | int | float = value.lower() == "true"
    elif value.isdigit() and key not in ("nodes", "api_key", "secret_key"):
        typed_value = int(value)
    elif value.replace(".", "", 1).isdigit() and key not in ("nodes", "api_key", "secret_key"):
        typed_value = float(value)
    else:
        typed_value = value

    try:
        set_config_value(key, typed_value)
    except CKSError as e:
        handle_error(e)

    shown = mask_secret(value) if key in SECRET_KEYS else value
    console.print(f"[green]Set {key} = {shown}[/green]")


@app.command("list")
def list_config() -> None:
    """List all configuration values."""
    try:
        config = CKSConfig.load()
    except CKSError as e:
        handle_error(e)

    console.print("[bold]Current Configuration[/bold]\n")

    for key in ENV_VARS:
        value = getattr(config, key)
        console.print(f"  {key}:", end=" ")
        if value is None or value == "":
            console.print("[dim]not set[/dim]")
        elif key in SECRET_KEYS:
            console.print(mask_secret(value))
        else:
            console.print(str(value))

    console.print(f"\n[dim]Config file: {CONFIG_FILE}[/dim]")


@app.command("path")
def show_path() -> None:
    """Show configuration file path."""
    console.print(str(CONFIG_FILE))
