"""Kubernetes clusters resource."""

from __future__ import annotations

import builtins

from cks.exceptions import NotFoundError, ValidationError
from cks.models.cluster import Cluster, ClusterResponse, ListClustersResponse
from cks.resources._base import SyncResource


class Clusters(SyncResource):
    """CloudStack Kubernetes Service clusters.

    Example:
        ```python
        from cks import CKSClient

        client = CKSClient(api_key="...", secret_key="...", endpoint="...")

        cluster = client.clusters.get("cluster-id")
        print(f"{cluster.name}: {cluster.worker_count} workers")

        # Scale to 5 workers (waits for the async job)
        cluster = client.clusters.scale("cluster-id", 5)

        # Remove specific worker VMs
        cluster = client.clusters.remove_nodes("cluster-id", ["vm-id"])
        ```
    """

    def list(self) -> builtins.list[Cluster]:
        """List all clusters visible to the account."""
        data = self._http.request_model("listKubernetesClusters", ListClustersResponse)
        return data.clusters

    def get(self, cluster_id: str) -> Cluster:
        """Get a specific cluster.

        Args:
            cluster_id: The cluster ID.

        Returns:
            Cluster details.

        Raises:
            NotFoundError: If no cluster has this ID.
        """
        data = self._http.request_model(
            "listKubernetesClusters", ListClustersResponse, {"id": cluster_id}
        )
        if not data.clusters:
            raise NotFoundError(
                f"Unable to fetch cluster with id: {cluster_id}",
                resource_type="cluster",
                resource_id=cluster_id,
            )
        return data.clusters[0]

    def scale(self, cluster_id: str, worker_count: int) -> Cluster:
        """Scale the cluster to a number of worker nodes.

        Args:
            cluster_id: The cluster ID.
            worker_count: Desired number of workers.

        Returns:
            Cluster details after the scale job finished.
        """
        data = self._http.request_model(
            "scaleKubernetesCluster",
            ClusterResponse,
            {"id": cluster_id, "size": str(worker_count)},
            asynchronous=True,
        )
        return data.cluster

    def remove_nodes(self, cluster_id: str, node_ids: builtins.list[str]) -> Cluster:
        """Remove specific nodes from the cluster.

        Args:
            cluster_id: The cluster ID.
            node_ids: Virtual machine IDs to remove.

        Returns:
            Cluster details after the scale job finished.
        """
        if not node_ids:
            raise ValidationError(f"No node IDs given to remove from cluster {cluster_id}")

        data = self._http.request_model(
            "scaleKubernetesCluster",
            ClusterResponse,
            {"id": cluster_id, "nodeids": ",".join(node_ids)},
            asynchronous=True,
        )
        return data.cluster
