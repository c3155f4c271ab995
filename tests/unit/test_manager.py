"""Tests for ClusterManager."""

from __future__ import annotations

import threading
import time

import pytest

from cks._config import CKSConfig
from cks.exceptions import AsyncJobError, CKSError, ConfigurationError, NotFoundError, ValidationError
from cks.manager import ClusterManager
from tests.fakes import FakeClusterService, make_cluster


def _manager(service: FakeClusterService, *, min_size: int = 2, max_size: int = 5) -> ClusterManager:
    return ClusterManager(service, "C1", min_size=min_size, max_size=max_size)


class TestClusterManagerFetch:
    """Test fetching the cluster."""

    def test_snapshot_before_fetch(self) -> None:
        """Reading the snapshot before any sync is an error."""
        manager = _manager(FakeClusterService(make_cluster(worker_count=2)))

        assert manager.synced is False
        with pytest.raises(CKSError):
            manager.snapshot

    def test_fetch_builds_snapshot(self) -> None:
        """Fetch derives the current size and applies local bounds."""
        service = FakeClusterService(make_cluster(worker_count=2, master_count=1))
        manager = _manager(service)

        snapshot = manager.fetch()

        assert manager.synced is True
        assert snapshot is manager.snapshot
        assert snapshot.cluster_id == "C1"
        assert snapshot.current_size == 3
        assert snapshot.min_size == 2
        assert snapshot.max_size == 5
        assert [m.id for m in snapshot.members] == ["MASTER-0", "WORKER-0", "WORKER-1"]
        assert service.calls == [("get", "C1")]

    def test_fetch_ignores_remote_bounds(self) -> None:
        """Remote minsize/maxsize never replace the configured bounds."""
        service = FakeClusterService(make_cluster(worker_count=2))
        assert service.cluster.max_size == 10

        snapshot = _manager(service, max_size=4).fetch()

        assert snapshot.max_size == 4

    def test_failed_fetch_keeps_snapshot(self) -> None:
        """A failed fetch leaves the previous snapshot untouched."""
        service = FakeClusterService(make_cluster(worker_count=2))
        manager = _manager(service)
        before = manager.fetch()

        service.error = NotFoundError("gone")
        with pytest.raises(NotFoundError):
            manager.fetch()

        assert manager.snapshot == before


class TestClusterManagerScale:
    """Test scaling operations."""

    def test_scale_to(self) -> None:
        """Scaling replaces the snapshot and returns the new size."""
        service = FakeClusterService(make_cluster(worker_count=2))
        manager = _manager(service)
        manager.fetch()

        size = manager.scale_to(4)

        assert size == 5
        assert manager.snapshot.worker_count == 4
        assert manager.snapshot.max_size == 5
        assert service.calls[-1] == ("scale", 4)

    def test_failed_scale_keeps_snapshot(self) -> None:
        """A failed scale leaves the snapshot byte-for-byte unchanged."""
        service = FakeClusterService(make_cluster(worker_count=2))
        manager = _manager(service)
        before = manager.fetch()
        dumped = before.model_dump_json()

        service.error = AsyncJobError("failed", job_id="job-1")
        with pytest.raises(AsyncJobError):
            manager.scale_to(4)

        assert manager.snapshot is before
        assert manager.snapshot.model_dump_json() == dumped

    def test_remove_members(self) -> None:
        """Removing members replaces the snapshot."""
        service = FakeClusterService(make_cluster(worker_count=3))
        manager = _manager(service)
        manager.fetch()

        size = manager.remove_members(["WORKER-2"])

        assert size == 3
        assert service.calls[-1] == ("remove_nodes", ["WORKER-2"])
        assert manager.snapshot.find_member("WORKER-2") is None

    def test_remove_no_members(self) -> None:
        """An empty ID list fails before any call."""
        service = FakeClusterService(make_cluster(worker_count=3))
        manager = _manager(service)

        with pytest.raises(ValidationError):
            manager.remove_members([])

        assert service.calls == []

    def test_failed_remove_keeps_snapshot(self) -> None:
        """A failed removal leaves the snapshot untouched."""
        service = FakeClusterService(make_cluster(worker_count=3))
        manager = _manager(service)
        before = manager.fetch()

        service.error = AsyncJobError("failed", job_id="job-1")
        with pytest.raises(AsyncJobError):
            manager.remove_members(["WORKER-0"])

        assert manager.snapshot is before

    def test_operations_are_serialized(self) -> None:
        """A second operation waits for the one in flight."""
        service = FakeClusterService(make_cluster(worker_count=2))
        manager = _manager(service, max_size=10)
        manager.fetch()

        active = 0
        overlaps = []
        guard = threading.Lock()

        def track() -> None:
            nonlocal active
            with guard:
                active += 1
                overlaps.append(active)
            time.sleep(0.05)
            with guard:
                active -= 1

        service.on_call = track
        threads = [threading.Thread(target=manager.scale_to, args=(n,)) for n in (3, 4, 5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert max(overlaps) == 1
        assert len([c for c in service.calls if c[0] == "scale"]) == 3

    def test_locked_allows_nested_operations(self) -> None:
        """Operations inside locked() reuse the held lock."""
        service = FakeClusterService(make_cluster(worker_count=2))
        manager = _manager(service, max_size=10)
        manager.fetch()

        with manager.locked() as snapshot:
            size = manager.scale_to(snapshot.worker_count + 1)

        assert size == 4
        assert manager.snapshot.worker_count == 3

    def test_locked_before_fetch(self) -> None:
        """There is nothing to lock before the first sync."""
        manager = _manager(FakeClusterService(make_cluster(worker_count=2)))

        with pytest.raises(CKSError):
            with manager.locked():
                pass


class TestClusterManagerFromConfig:
    """Test building a manager from configuration."""

    def test_from_config(self) -> None:
        """The node group directive sets the cluster and bounds."""
        config = CKSConfig(
            api_key="key",
            secret_key="secret",
            endpoint="https://cloud.example.com/client/api",
            nodes="1:4:C9",
        )

        manager = ClusterManager.from_config(config)
        try:
            assert manager.cluster_id == "C9"
            assert manager.min_size == 1
            assert manager.max_size == 4
        finally:
            manager.close()

    def test_from_config_missing_values(self) -> None:
        """Missing configuration is fatal."""
        with pytest.raises(ConfigurationError) as exc_info:
            ClusterManager.from_config(CKSConfig(api_key="key"))

        assert "SECRET_KEY" in str(exc_info.value)
        assert "CKS_NODES" in str(exc_info.value)
