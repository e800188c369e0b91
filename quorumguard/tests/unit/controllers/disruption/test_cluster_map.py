"""Tests for the namespace to cluster registry."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

from quorumguard.controllers.disruption.cluster_map import ClusterMap


class TestClusterMap:
    """Tests for ClusterMap."""

    def test_get_unknown_namespace(self) -> None:
        assert ClusterMap().get("rook-ceph") is None

    def test_update_replaces_existing(self) -> None:
        cluster_map = ClusterMap()
        cluster_map.update("rook-ceph", "a")
        cluster_map.update("rook-ceph", "b")
        assert cluster_map.get("rook-ceph") == "b"
        assert len(cluster_map) == 1

    def test_remove_is_idempotent(self) -> None:
        cluster_map = ClusterMap()
        cluster_map.update("rook-ceph", "a")
        cluster_map.remove("rook-ceph")
        cluster_map.remove("rook-ceph")
        assert cluster_map.get("rook-ceph") is None

    def test_namespaces_snapshot(self) -> None:
        cluster_map = ClusterMap()
        cluster_map.update("ns-b", "b")
        cluster_map.update("ns-a", "a")
        snapshot = cluster_map.namespaces()
        cluster_map.remove("ns-a")
        assert snapshot == ["ns-a", "ns-b"]

    def test_concurrent_updates_and_reads(self) -> None:
        cluster_map = ClusterMap()
        names = [f"cluster-{index}" for index in range(16)]
        observed: list[str | None] = []
        observed_lock = threading.Lock()

        def _writer(name: str) -> None:
            for _ in range(200):
                cluster_map.update("rook-ceph", name)

        def _reader() -> None:
            for _ in range(200):
                value = cluster_map.get("rook-ceph")
                with observed_lock:
                    observed.append(value)

        with ThreadPoolExecutor(max_workers=8) as pool:
            futures = [pool.submit(_writer, name) for name in names]
            futures += [pool.submit(_reader) for _ in range(8)]
            for future in futures:
                future.result()

        assert all(value is None or value in names for value in observed)
        assert cluster_map.get("rook-ceph") in names
        assert len(cluster_map) == 1
