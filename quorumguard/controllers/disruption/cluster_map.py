"""Namespace to CephCluster name registry shared by reconcile workers."""

from __future__ import annotations

import threading


class ClusterMap:
    """Maps each namespace to the single CephCluster living in it.

    There is a one-per-namespace limit on CephClusters, so a namespace is
    enough to resolve a cluster. All methods take the same lock and perform
    no I/O while holding it.
    """

    def __init__(self) -> None:
        self._clusters: dict[str, str] = {}
        self._lock = threading.Lock()

    def update(self, namespace: str, name: str) -> None:
        with self._lock:
            self._clusters[namespace] = name

    def remove(self, namespace: str) -> None:
        with self._lock:
            self._clusters.pop(namespace, None)

    def get(self, namespace: str) -> str | None:
        with self._lock:
            return self._clusters.get(namespace)

    def namespaces(self) -> list[str]:
        """Snapshot of the namespaces with a known cluster."""
        with self._lock:
            return sorted(self._clusters)

    def __len__(self) -> int:
        with self._lock:
            return len(self._clusters)
