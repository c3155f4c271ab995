"""Cloud provider entry point for the cluster autoscaler."""

from __future__ import annotations

import logging
from typing import Any

from cks._config import CKSConfig
from cks.manager import ClusterManager
from cks.models.node import Node
from cks.node_group import ClusterNodeGroup, NodeGroup

logger = logging.getLogger("cks")

PROVIDER_NAME = "cloudstack"


class CloudStackProvider:
    """Exposes the single managed cluster as a node group.

    Example:
        ```python
        provider = build_provider()
        group = provider.node_group_for_node(Node.from_kubernetes(k8s_node))
        if group is not None:
            group.delete_nodes([Node.from_kubernetes(k8s_node)])
        ```
    """

    def __init__(self, manager: ClusterManager) -> None:
        self._manager = manager
        self._group = ClusterNodeGroup(manager)

    @property
    def name(self) -> str:
        return PROVIDER_NAME

    @property
    def manager(self) -> ClusterManager:
        return self._manager

    def node_groups(self) -> list[NodeGroup]:
        return [self._group]

    def node_group_for_node(self, node: Node) -> NodeGroup | None:
        """Return the group owning `node`, or None if no group does."""
        if self._group.belongs(node):
            return self._group
        return None

    def get_available_machine_types(self) -> list[str]:
        return []

    def new_node_group(self, machine_type: str, **kwargs: Any) -> NodeGroup:
        raise NotImplementedError("Node groups can not be created by this provider")

    def refresh(self) -> None:
        """Re-sync the cluster before each autoscaler loop."""
        self._manager.fetch()

    def cleanup(self) -> None:
        self._manager.close()


def build_provider(config: CKSConfig | None = None) -> CloudStackProvider:
    """Build the provider and sync the cluster once.

    Raises:
        ConfigurationError: If the configuration is incomplete.
    """
    manager = ClusterManager.from_config(config)
    manager.fetch()
    logger.info("Managing cluster %s", manager.cluster_id)
    return CloudStackProvider(manager)
