"""Cluster CLI commands."""

from __future__ import annotations

import typer

from cks.cli._utils import (
    console,
    get_json_flag,
    get_manager,
    handle_error,
    output_json,
    output_table,
)
from cks.exceptions import CKSError
from cks.models.node import Node
from cks.node_group import ClusterNodeGroup

app = typer.Typer(help="Cluster inspection and scaling.")


@app.command("status")
def status(ctx: typer.Context) -> None:
    """Show the managed cluster and its size bounds."""
    manager = get_manager()
    try:
        snapshot = manager.snapshot
    finally:
        manager.close()

    if get_json_flag(ctx):
        data = snapshot.model_dump(mode="json", exclude={"members"})
        data["current_size"] = snapshot.current_size
        output_json(data)
        return

    console.print(f"[bold]{snapshot.name}[/bold] ({snapshot.cluster_id})")
    console.print(f"  size: {snapshot.current_size} [dim]({snapshot.min_size}-{snapshot.max_size})[/dim]")
    console.print(f"  workers: {snapshot.worker_count}")
    console.print(f"  masters: {snapshot.master_count}")


@app.command("nodes")
def nodes(ctx: typer.Context) -> None:
    """List the cluster's virtual machines."""
    manager = get_manager()
    try:
        members = list(manager.snapshot.members)
    finally:
        manager.close()

    if get_json_flag(ctx):
        output_json(members)
        return

    output_table(members, [("id", "ID"), ("name", "Name"), ("state", "State")], title="Nodes")


@app.command("scale-up")
def scale_up(
    delta: int = typer.Argument(..., help="Number of nodes to add"),
) -> None:
    """Add worker nodes, within the configured max size.

    Example:
        cks cluster scale-up 2
    """
    manager = get_manager()
    try:
        ClusterNodeGroup(manager).increase_size(delta)
        console.print(f"[green]Cluster size is now {manager.snapshot.current_size}[/green]")
    except CKSError as e:
        handle_error(e)
    finally:
        manager.close()


@app.command("remove")
def remove(
    node_ids: list[str] = typer.Argument(..., help="Virtual machine IDs to remove"),
) -> None:
    """Remove specific worker nodes, within the configured min size.

    Control plane nodes are never removed.

    Example:
        cks cluster remove 5d3c2a0e-...
    """
    manager = get_manager()
    try:
        snapshot = manager.snapshot
        nodes = []
        for node_id in node_ids:
            member = snapshot.find_member(node_id)
            if member is None:
                raise CKSError(f"Node {node_id} is not a member of cluster {snapshot.cluster_id}")
            nodes.append(Node(name=member.name, system_uuid=member.id))

        ClusterNodeGroup(manager).delete_nodes(nodes)
        console.print(f"[green]Cluster size is now {manager.snapshot.current_size}[/green]")
    except CKSError as e:
        handle_error(e)
    finally:
        manager.close()
