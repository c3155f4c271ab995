"""Orchestrator-side node models."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from cks.models.common import CKSModel

CONTROL_PLANE_NAME_MARKERS = ("-master", "-control-")
CONTROL_PLANE_LABELS = (
    "node-role.kubernetes.io/control-plane",
    "node-role.kubernetes.io/master",
)


class Node(CKSModel):
    """A physical node as seen by the Kubernetes API."""

    name: str = Field(..., description="Node name")
    system_uuid: str = Field("", description="Platform-issued system UUID")
    labels: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_kubernetes(cls, obj: dict[str, Any]) -> Node:
        """Build from a Kubernetes Node object (as returned by the API)."""
        metadata = obj.get("metadata") or {}
        node_info = (obj.get("status") or {}).get("nodeInfo") or {}
        return cls(
            name=metadata.get("name", ""),
            system_uuid=node_info.get("systemUUID", ""),
            labels=metadata.get("labels") or {},
        )

    @property
    def is_control_plane(self) -> bool:
        if any(label in self.labels for label in CONTROL_PLANE_LABELS):
            return True
        name = self.name.lower()
        return any(marker in name for marker in CONTROL_PLANE_NAME_MARKERS)


class Instance(CKSModel):
    """A node group member reported back to the orchestrator."""

    id: str
    state: str | None = None
