"""Cluster state manager.

Owns the cached snapshot of one CKS cluster. Every operation holds the
manager lock for its full duration, network round-trip included, so at
most one scale or remove command is in flight against the cluster.
Callers that check bounds before mutating use `locked()` so the check
and the command run under the same acquisition.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Protocol

from cks.exceptions import CKSError, ValidationError
from cks.models.cluster import Cluster, ClusterSnapshot

if TYPE_CHECKING:
    from cks._config import CKSConfig
    from cks.client import CKSClient

logger = logging.getLogger("cks.manager")


class ClusterService(Protocol):
    """Cluster operations the manager needs from the API."""

    def get(self, cluster_id: str) -> Cluster: ...

    def scale(self, cluster_id: str, worker_count: int) -> Cluster: ...

    def remove_nodes(self, cluster_id: str, node_ids: list[str]) -> Cluster: ...


class ClusterManager:
    """Serializes operations against one remote cluster.

    The snapshot is replaced only after a successful call. A failed call
    leaves the previous snapshot in place.

    Example:
        ```python
        manager = ClusterManager.from_config()
        manager.fetch()
        print(manager.snapshot.current_size)
        manager.scale_to(manager.snapshot.worker_count + 1)
        ```
    """

    def __init__(
        self,
        service: ClusterService,
        cluster_id: str,
        *,
        min_size: int,
        max_size: int,
        client: CKSClient | None = None,
    ) -> None:
        self._service = service
        self._cluster_id = cluster_id
        self._min_size = min_size
        self._max_size = max_size
        self._client = client
        self._lock = threading.RLock()
        self._snapshot: ClusterSnapshot | None = None

    @classmethod
    def from_config(cls, config: CKSConfig | None = None) -> ClusterManager:
        """Build a manager and its API client from configuration.

        Raises:
            ConfigurationError: If required configuration is missing.
        """
        from cks._config import CKSConfig
        from cks.client import CKSClient

        config = config or CKSConfig.load()
        config.validate()
        group = config.node_group()
        client = CKSClient(config=config)
        return cls(
            client.clusters,
            group.cluster_id,
            min_size=group.min_size,
            max_size=group.max_size,
            client=client,
        )

    @property
    def cluster_id(self) -> str:
        return self._cluster_id

    @property
    def min_size(self) -> int:
        return self._min_size

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def snapshot(self) -> ClusterSnapshot:
        """The cluster as of the last successful sync.

        Raises:
            CKSError: If the cluster has never been fetched.
        """
        with self._lock:
            return self._current()

    @contextmanager
    def locked(self) -> Iterator[ClusterSnapshot]:
        """Hold the manager lock and yield the current snapshot.

        Operations called inside the block reuse the held lock, so no other
        thread can change the cluster between reading the snapshot and
        the end of the block.

        Raises:
            CKSError: If the cluster has never been fetched.
        """
        with self._lock:
            yield self._current()

    @property
    def synced(self) -> bool:
        with self._lock:
            return self._snapshot is not None

    def fetch(self) -> ClusterSnapshot:
        """Re-read the cluster from the API.

        Raises:
            NotFoundError: If the cluster ID is unknown.
        """
        with self._lock:
            cluster = self._service.get(self._cluster_id)
            logger.debug("Fetched cluster %s (%s)", cluster.id, cluster.name)
            return self._replace(cluster)

    def scale_to(self, worker_count: int) -> int:
        """Scale the cluster to `worker_count` workers.

        Returns:
            The new current size (workers plus masters).
        """
        with self._lock:
            cluster = self._service.scale(self._cluster_id, worker_count)
            snapshot = self._replace(cluster)
            logger.info(
                "Scaled cluster %s to %d workers, size is now %d",
                self._cluster_id,
                worker_count,
                snapshot.current_size,
            )
            return snapshot.current_size

    def remove_members(self, node_ids: list[str]) -> int:
        """Remove specific members from the cluster.

        Returns:
            The new current size (workers plus masters).

        Raises:
            ValidationError: If `node_ids` is empty.
        """
        if not node_ids:
            raise ValidationError(f"Unable to remove nodes from {self._cluster_id}: no node IDs")

        with self._lock:
            cluster = self._service.remove_nodes(self._cluster_id, list(node_ids))
            snapshot = self._replace(cluster)
            logger.info(
                "Removed %s from cluster %s, size is now %d",
                ", ".join(node_ids),
                self._cluster_id,
                snapshot.current_size,
            )
            return snapshot.current_size

    def close(self) -> None:
        """Release the API client, waiting for any operation in flight."""
        with self._lock:
            if self._client is not None:
                self._client.close()

    def _current(self) -> ClusterSnapshot:
        if self._snapshot is None:
            raise CKSError(f"Cluster {self._cluster_id} has not been fetched yet")
        return self._snapshot

    def _replace(self, cluster: Cluster) -> ClusterSnapshot:
        # Caller holds the lock. Bounds come from local configuration.
        snapshot = ClusterSnapshot.from_cluster(
            cluster, min_size=self._min_size, max_size=self._max_size
        )
        self._snapshot = snapshot
        return snapshot

    def __repr__(self) -> str:
        return (
            f"ClusterManager(cluster_id={self._cluster_id!r}, "
            f"min_size={self._min_size}, max_size={self._max_size})"
        )
