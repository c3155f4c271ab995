"""Node group interface exposed to the cluster autoscaler.

A node group is one scalable pool of capacity. This provider manages a
single pre-existing CKS cluster, so the group can be resized and have
members removed, but never created or deleted.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from cks.exceptions import BoundsError, UnsupportedOperationError, ValidationError
from cks.models.node import Instance, Node

if TYPE_CHECKING:
    from cks.manager import ClusterManager
    from cks.models.cluster import ClusterSnapshot

logger = logging.getLogger("cks.node_group")


class NodeGroup(ABC):
    """Operations the autoscaler needs from a node group."""

    @property
    @abstractmethod
    def id(self) -> str:
        """Stable identifier of the group."""
        ...

    @abstractmethod
    def min_size(self) -> int:
        """Minimum size of the group."""
        ...

    @abstractmethod
    def max_size(self) -> int:
        """Maximum size of the group."""
        ...

    @abstractmethod
    def target_size(self) -> int:
        """Current target size of the group.

        It may differ from the number of nodes registered in Kubernetes.
        """
        ...

    @abstractmethod
    def increase_size(self, delta: int) -> None:
        """Increase the target size by `delta` nodes."""
        ...

    @abstractmethod
    def decrease_target_size(self, delta: int) -> None:
        """Decrease the target size without deleting existing nodes."""
        ...

    @abstractmethod
    def delete_nodes(self, nodes: list[Node]) -> None:
        """Delete the given nodes from the group."""
        ...

    @abstractmethod
    def belongs(self, node: Node) -> bool:
        """Whether the node is a member of the group."""
        ...

    @abstractmethod
    def nodes(self) -> list[Instance]:
        """All members of the group."""
        ...

    def debug(self) -> str:
        return f"{self.id} [{self.min_size()} : {self.max_size()}]"

    def exist(self) -> bool:
        return True

    def autoprovisioned(self) -> bool:
        return False

    def create(self) -> NodeGroup:
        raise NotImplementedError("Node groups can not be created by this provider")

    def delete(self) -> None:
        raise NotImplementedError("Node groups can not be deleted by this provider")

    def template_node_info(self) -> Any:
        raise NotImplementedError("Node templates are not available")


class ClusterNodeGroup(NodeGroup):
    """Node group backed by a ClusterManager.

    Size bounds are checked against the cached snapshot while the manager
    lock is held, and the lock stays held through the resulting call.
    """

    def __init__(self, manager: ClusterManager) -> None:
        self._manager = manager

    @property
    def id(self) -> str:
        return self._manager.cluster_id

    def min_size(self) -> int:
        return self._manager.min_size

    def max_size(self) -> int:
        return self._manager.max_size

    def target_size(self) -> int:
        return self._manager.snapshot.current_size

    def increase_size(self, delta: int) -> None:
        logger.info("Increase cluster %s by %d", self.id, delta)
        if delta <= 0:
            raise BoundsError(f"Size increase must be positive, got {delta}")

        with self._manager.locked() as snapshot:
            wanted = snapshot.current_size + delta
            if wanted > snapshot.max_size:
                raise BoundsError(
                    f"Size increase too large - wanted: {wanted} max: {snapshot.max_size}"
                )
            self._manager.scale_to(snapshot.worker_count + delta)

    def decrease_target_size(self, delta: int) -> None:
        raise UnsupportedOperationError("CloudStack provider does not support decrease_target_size")

    def delete_nodes(self, nodes: list[Node]) -> None:
        with self._manager.locked() as snapshot:
            member_ids = self._removable_members(snapshot, nodes)
            self._manager.remove_members(member_ids)

    def _removable_members(self, snapshot: ClusterSnapshot, nodes: list[Node]) -> list[str]:
        if snapshot.current_size <= snapshot.min_size:
            raise BoundsError(f"Min size reached. Can not delete {len(nodes)} nodes")

        member_ids = []
        for node in nodes:
            if node.is_control_plane:
                logger.warning("Not deleting control plane node %s", node.name)
                continue
            member = snapshot.find_member(node.system_uuid) if node.system_uuid else None
            if member is None:
                raise ValidationError(f"Node {node.name} is not a member of cluster {self.id}")
            member_ids.append(member.id)

        if not member_ids:
            raise ValidationError(f"No removable worker nodes among {[n.name for n in nodes]}")
        return member_ids

    def belongs(self, node: Node) -> bool:
        if not node.system_uuid:
            return False
        return self._manager.snapshot.find_member(node.system_uuid) is not None

    def nodes(self) -> list[Instance]:
        return [
            Instance(id=member.id, state=member.state)
            for member in self._manager.snapshot.members
        ]

    def __repr__(self) -> str:
        return f"ClusterNodeGroup(id={self.id!r})"
