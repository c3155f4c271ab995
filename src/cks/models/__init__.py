"""Pydantic models for the CKS autoscaler."""

from cks.models.cluster import (
    Cluster,
    ClusterResponse,
    ClusterSnapshot,
    ListClustersResponse,
    VirtualMachine,
)
from cks.models.common import AsyncJobResult, CKSModel
from cks.models.node import Instance, Node

__all__ = [
    # Common
    "CKSModel",
    "AsyncJobResult",
    # Cluster
    "Cluster",
    "ClusterResponse",
    "ClusterSnapshot",
    "ListClustersResponse",
    "VirtualMachine",
    # Node
    "Instance",
    "Node",
]
