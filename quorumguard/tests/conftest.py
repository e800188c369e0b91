"""Shared fixtures: an in-memory resource store and resource builders."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator
from typing import Any

import pytest

from quorumguard.constants.enums import ResourceKind
from quorumguard.controllers.cluster.parsers.resource_parser import ResourceParser
from quorumguard.exceptions import NotFoundError
from quorumguard.models.cluster.cluster_info import CephClusterResource
from quorumguard.models.events.watch_event import RawWatchEvent
from quorumguard.models.pdb.disruption_budget import DisruptionBudget


def cluster_manifest(
    namespace: str = "rook-ceph",
    name: str = "rook-ceph",
    mon_count: int = 3,
    status: dict[str, Any] | None = None,
    **spec: Any,
) -> dict[str, Any]:
    """Build a raw CephCluster object as kubectl would return it."""
    return {
        "apiVersion": "ceph.rook.io/v1",
        "kind": "CephCluster",
        "metadata": {"name": name, "namespace": namespace, "resourceVersion": "1"},
        "spec": {"mon": {"count": mon_count}, **spec},
        "status": status or {},
    }


def deployment_manifest(
    namespace: str = "rook-ceph",
    name: str = "rook-ceph-osd-0",
    unavailable: int = 0,
    app: str = "rook-ceph-osd",
) -> dict[str, Any]:
    status: dict[str, Any] = {"replicas": 1}
    if unavailable:
        status["unavailableReplicas"] = unavailable
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {"name": name, "namespace": namespace, "labels": {"app": app}},
        "spec": {"replicas": 1},
        "status": status,
    }


def child_manifest(kind: ResourceKind, namespace: str = "rook-ceph", name: str = "pool-a") -> dict[str, Any]:
    return {
        "apiVersion": "ceph.rook.io/v1",
        "kind": kind.value,
        "metadata": {"name": name, "namespace": namespace},
        "spec": {},
    }


def pdb_manifest(
    namespace: str = "rook-ceph",
    name: str = "mon-pdb",
    min_available: Any = 2,
) -> dict[str, Any]:
    return {
        "apiVersion": "policy/v1",
        "kind": "PodDisruptionBudget",
        "metadata": {"name": name, "namespace": namespace, "resourceVersion": "7"},
        "spec": {
            "minAvailable": min_available,
            "selector": {"matchLabels": {"app": "rook-ceph-mon"}},
        },
    }


class FakeResourceStore:
    """In-memory ResourceStore recording every write."""

    def __init__(self) -> None:
        self.clusters: dict[tuple[str, str], CephClusterResource] = {}
        self.budgets: dict[tuple[str, str], DisruptionBudget] = {}
        self.writes: list[tuple[str, DisruptionBudget]] = []
        self.watch_events: dict[ResourceKind, list[RawWatchEvent]] = {}
        self.watch_calls: list[tuple[ResourceKind, str | None, str | None]] = []
        self.watch_failures: dict[ResourceKind, list[Exception]] = {}
        self.errors: dict[str, Exception] = {}
        self._parser = ResourceParser()

    def add_cluster(self, namespace: str = "rook-ceph", name: str = "rook-ceph", mon_count: int = 3) -> None:
        self.clusters[(namespace, name)] = self._parser.parse_cluster(
            cluster_manifest(namespace, name, mon_count)
        )

    def add_budget(
        self,
        namespace: str = "rook-ceph",
        name: str = "mon-pdb",
        min_available: int = 2,
        selector: dict[str, str] | None = None,
    ) -> None:
        self.budgets[(namespace, name)] = DisruptionBudget(
            namespace=namespace,
            name=name,
            min_available=min_available,
            selector=selector or {"app": "rook-ceph-mon"},
            resource_version="7",
        )

    def _maybe_fail(self, operation: str) -> None:
        error = self.errors.get(operation)
        if error is not None:
            raise error

    async def check_connection(self) -> bool:
        return "check_connection" not in self.errors

    async def get_cluster(self, namespace: str, name: str) -> CephClusterResource:
        self._maybe_fail("get_cluster")
        try:
            return self.clusters[(namespace, name)]
        except KeyError:
            raise NotFoundError("CephCluster", namespace, name) from None

    async def list_clusters(self, namespace: str) -> list[CephClusterResource]:
        self._maybe_fail("list_clusters")
        return [cluster for (ns, _), cluster in sorted(self.clusters.items()) if ns == namespace]

    async def get_disruption_budget(self, namespace: str, name: str) -> DisruptionBudget:
        self._maybe_fail("get_disruption_budget")
        try:
            return self.budgets[(namespace, name)]
        except KeyError:
            raise NotFoundError("PodDisruptionBudget", namespace, name) from None

    async def create_disruption_budget(self, budget: DisruptionBudget) -> DisruptionBudget:
        self._maybe_fail("create_disruption_budget")
        self.writes.append(("create", budget))
        self.budgets[(budget.namespace, budget.name)] = budget
        return budget

    async def update_disruption_budget(self, budget: DisruptionBudget) -> DisruptionBudget:
        self._maybe_fail("update_disruption_budget")
        self.writes.append(("update", budget))
        self.budgets[(budget.namespace, budget.name)] = budget
        return budget

    async def watch(
        self,
        kind: ResourceKind,
        *,
        namespace: str | None = None,
        label_selector: str | None = None,
    ) -> AsyncGenerator[RawWatchEvent, None]:
        self.watch_calls.append((kind, namespace, label_selector))
        failures = self.watch_failures.get(kind)
        if failures:
            raise failures.pop(0)
        for event in self.watch_events.get(kind, []):
            yield event
        # Stay subscribed until cancelled, like a live watch
        await asyncio.Event().wait()


@pytest.fixture
def store() -> FakeResourceStore:
    return FakeResourceStore()


@pytest.fixture
def parser() -> ResourceParser:
    return ResourceParser()
