"""Main CLI entry point."""

from __future__ import annotations

import os

import typer
from rich.console import Console

from cks._version import __version__
from cks.cli import cluster, config
from cks.cli._utils import setup_logging

app = typer.Typer(
    name="cks",
    help="CKS autoscaler CLI - inspect and scale a CloudStack Kubernetes cluster.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

# Register sub-commands
app.add_typer(cluster.app, name="cluster", help="Cluster inspection and scaling")
app.add_typer(config.app, name="config", help="Configuration management")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"cks-autoscaler version {__version__}")


@app.callback()
def main(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output in JSON format",
        is_eager=True,
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Log API requests and job polling",
    ),
) -> None:
    """CKS autoscaler CLI."""
    ctx.ensure_object(dict)
    ctx.obj["json"] = json_output
    setup_logging(debug or os.getenv("CKS_DEBUG", "").lower() in ("1", "true", "yes"))


if __name__ == "__main__":
    app()
