"""Kubernetes cluster models."""

from __future__ import annotations

from pydantic import AliasChoices, Field

from cks.models.common import CKSModel


class VirtualMachine(CKSModel):
    """A node of a CKS cluster as reported by the management server."""

    id: str = Field(..., description="Virtual machine ID")
    name: str = Field("", description="Display name")
    state: str | None = Field(None, description="Lifecycle state, e.g. Running")


class Cluster(CKSModel):
    """CKS cluster details."""

    id: str = Field(..., description="Cluster ID")
    name: str = Field("", description="Cluster name")
    state: str | None = Field(None, description="Cluster state")
    min_size: int | None = Field(None, alias="minsize")
    max_size: int | None = Field(None, alias="maxsize")
    worker_count: int = Field(0, alias="size", description="Number of worker nodes")
    master_count: int = Field(
        0,
        validation_alias=AliasChoices("masternodes", "controlnodes", "master_count"),
        description="Number of control plane nodes",
    )
    virtual_machines: list[VirtualMachine] = Field(default_factory=list, alias="virtualmachines")


class ListClustersResponse(CKSModel):
    """Response of the listKubernetesClusters command."""

    count: int = 0
    clusters: list[Cluster] = Field(default_factory=list, alias="kubernetescluster")


class ClusterResponse(CKSModel):
    """Job result of the scaleKubernetesCluster command."""

    cluster: Cluster = Field(..., alias="kubernetescluster")


class ClusterSnapshot(CKSModel):
    """Cached view of a cluster at its last successful sync.

    The size bounds come from local configuration, not from the server.
    A snapshot is replaced as a whole and never modified.
    """

    cluster_id: str
    name: str = ""
    worker_count: int = 0
    master_count: int = 0
    min_size: int
    max_size: int
    members: tuple[VirtualMachine, ...] = ()

    @classmethod
    def from_cluster(cls, cluster: Cluster, *, min_size: int, max_size: int) -> ClusterSnapshot:
        return cls(
            cluster_id=cluster.id,
            name=cluster.name,
            worker_count=cluster.worker_count,
            master_count=cluster.master_count,
            min_size=min_size,
            max_size=max_size,
            members=tuple(cluster.virtual_machines),
        )

    @property
    def current_size(self) -> int:
        return self.worker_count + self.master_count

    def find_member(self, member_id: str) -> VirtualMachine | None:
        """Look up a member by ID, ignoring case."""
        wanted = member_id.lower()
        for member in self.members:
            if member.id.lower() == wanted:
                return member
        return None
