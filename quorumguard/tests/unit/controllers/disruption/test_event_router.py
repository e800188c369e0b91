"""Tests for the event router."""

from __future__ import annotations

import asyncio
import copy
import logging

import pytest

from quorumguard.constants.enums import STORAGE_CHILD_KINDS, EventVerb, ResourceKind
from quorumguard.controllers.disruption.event_router import EventRouter
from quorumguard.models.events.watch_event import RawWatchEvent, ReconcileRequest, WatchEvent
from quorumguard.models.pdb.disruption_budget import DisruptionBudget
from quorumguard.tests.conftest import (
    FakeResourceStore,
    child_manifest,
    cluster_manifest,
    deployment_manifest,
)


class TestEventRouter:
    """Tests for EventRouter predicates and routing."""

    @pytest.fixture
    def requests(self) -> list[ReconcileRequest]:
        return []

    @pytest.fixture
    def router(self, requests: list[ReconcileRequest]) -> EventRouter:
        return EventRouter(requests.append)

    # Deployments --------------------------------------------------------

    def test_deployment_update_without_unavailable_replicas(
        self, router: EventRouter, requests: list[ReconcileRequest]
    ) -> None:
        router.handle(
            RawWatchEvent(
                ResourceKind.DEPLOYMENT,
                EventVerb.UPDATE,
                deployment_manifest(unavailable=0),
                deployment_manifest(unavailable=0),
            )
        )
        assert requests == []

    def test_deployment_update_with_unavailable_replicas(
        self, router: EventRouter, requests: list[ReconcileRequest]
    ) -> None:
        router.handle(
            RawWatchEvent(
                ResourceKind.DEPLOYMENT,
                EventVerb.UPDATE,
                deployment_manifest(namespace="storage", unavailable=2),
                deployment_manifest(namespace="storage"),
            )
        )
        assert requests == [ReconcileRequest(namespace="storage")]
        assert requests[0].name == ""

    @pytest.mark.parametrize("verb", [EventVerb.CREATE, EventVerb.DELETE])
    def test_deployment_create_and_delete_ignored(
        self, router: EventRouter, requests: list[ReconcileRequest], verb: EventVerb
    ) -> None:
        router.handle(RawWatchEvent(ResourceKind.DEPLOYMENT, verb, deployment_manifest(unavailable=3)))
        assert requests == []

    def test_non_osd_deployment_ignored(
        self, router: EventRouter, requests: list[ReconcileRequest]
    ) -> None:
        router.handle(
            RawWatchEvent(
                ResourceKind.DEPLOYMENT,
                EventVerb.UPDATE,
                deployment_manifest(unavailable=1, app="rook-ceph-mgr"),
            )
        )
        assert requests == []

    # Clusters -------------------------------------------------------------

    def test_cluster_create_enqueues(
        self, router: EventRouter, requests: list[ReconcileRequest]
    ) -> None:
        router.handle(RawWatchEvent(ResourceKind.CEPH_CLUSTER, EventVerb.CREATE, cluster_manifest()))
        assert requests == [ReconcileRequest(namespace="rook-ceph")]

    def test_cluster_status_only_update_ignored(
        self, router: EventRouter, requests: list[ReconcileRequest]
    ) -> None:
        old = cluster_manifest(status={"phase": "Progressing"})
        new = copy.deepcopy(old)
        new["status"] = {"phase": "Ready", "ceph": {"health": "HEALTH_OK"}}
        new["metadata"]["resourceVersion"] = "2"

        router.handle(RawWatchEvent(ResourceKind.CEPH_CLUSTER, EventVerb.UPDATE, new, old))

        assert requests == []

    def test_cluster_spec_update_enqueues_once(
        self, router: EventRouter, requests: list[ReconcileRequest]
    ) -> None:
        old = cluster_manifest(mon_count=3)
        new = cluster_manifest(mon_count=5)

        router.handle(RawWatchEvent(ResourceKind.CEPH_CLUSTER, EventVerb.UPDATE, new, old))

        assert requests == [ReconcileRequest(namespace="rook-ceph")]

    def test_cluster_nested_spec_change_detected(
        self, router: EventRouter, requests: list[ReconcileRequest]
    ) -> None:
        old = cluster_manifest(storage={"nodes": [{"name": "a", "devices": [{"name": "sdb"}]}]})
        new = cluster_manifest(storage={"nodes": [{"name": "a", "devices": [{"name": "sdc"}]}]})

        router.handle(RawWatchEvent(ResourceKind.CEPH_CLUSTER, EventVerb.UPDATE, new, old))

        assert len(requests) == 1

    def test_cluster_delete_ignored(
        self, router: EventRouter, requests: list[ReconcileRequest]
    ) -> None:
        router.handle(RawWatchEvent(ResourceKind.CEPH_CLUSTER, EventVerb.DELETE, cluster_manifest()))
        assert requests == []

    # Storage children -----------------------------------------------------

    @pytest.mark.parametrize("kind", STORAGE_CHILD_KINDS)
    @pytest.mark.parametrize("verb", list(EventVerb))
    def test_child_events_always_enqueue(
        self,
        router: EventRouter,
        requests: list[ReconcileRequest],
        kind: ResourceKind,
        verb: EventVerb,
    ) -> None:
        router.handle(RawWatchEvent(kind, verb, child_manifest(kind, namespace="tenant-a")))
        assert requests == [ReconcileRequest(namespace="tenant-a")]

    def test_object_without_namespace_dropped(
        self, router: EventRouter, requests: list[ReconcileRequest]
    ) -> None:
        manifest = child_manifest(ResourceKind.CEPH_BLOCK_POOL, namespace="")
        router.handle(RawWatchEvent(ResourceKind.CEPH_BLOCK_POOL, EventVerb.CREATE, manifest))
        assert requests == []

    # Malformed payloads ---------------------------------------------------

    def test_wrong_kind_payload_dropped(
        self, requests: list[ReconcileRequest], caplog: pytest.LogCaptureFixture
    ) -> None:
        router = EventRouter(requests.append, log=logging.getLogger("test.router"))

        with caplog.at_level(logging.WARNING, logger="test.router"):
            result = router.handle(
                RawWatchEvent(ResourceKind.CEPH_CLUSTER, EventVerb.CREATE, deployment_manifest())
            )

        assert result is None
        assert requests == []
        assert any("Expected CephCluster" in record.getMessage() for record in caplog.records)

    def test_non_mapping_payload_dropped(
        self, router: EventRouter, requests: list[ReconcileRequest]
    ) -> None:
        router.handle(RawWatchEvent(ResourceKind.DEPLOYMENT, EventVerb.UPDATE, "not-an-object"))
        router.handle(RawWatchEvent(ResourceKind.CEPH_FILESYSTEM, EventVerb.CREATE, {"kind": "CephFilesystem"}))
        assert requests == []

    # Subscriptions --------------------------------------------------------

    def test_label_selector_only_for_deployments(self, router: EventRouter) -> None:
        assert router.label_selector_for(ResourceKind.DEPLOYMENT) == "app=rook-ceph-osd"
        assert router.label_selector_for(ResourceKind.CEPH_CLUSTER) is None

    def test_watched_kinds(self, router: EventRouter) -> None:
        assert set(router.watched_kinds) == {
            ResourceKind.CEPH_CLUSTER,
            ResourceKind.DEPLOYMENT,
            *STORAGE_CHILD_KINDS,
        }

    @pytest.mark.asyncio
    async def test_run_routes_events_and_stops(
        self,
        router: EventRouter,
        requests: list[ReconcileRequest],
        store: FakeResourceStore,
    ) -> None:
        store.watch_events[ResourceKind.CEPH_CLUSTER] = [
            RawWatchEvent(ResourceKind.CEPH_CLUSTER, EventVerb.CREATE, cluster_manifest())
        ]
        store.watch_events[ResourceKind.CEPH_OBJECT_STORE] = [
            RawWatchEvent(
                ResourceKind.CEPH_OBJECT_STORE,
                EventVerb.DELETE,
                child_manifest(ResourceKind.CEPH_OBJECT_STORE, namespace="tenant-b"),
            )
        ]
        stop_event = asyncio.Event()

        run_task = asyncio.create_task(router.run(store, stop_event))
        for _ in range(20):
            await asyncio.sleep(0)
        stop_event.set()
        await asyncio.wait_for(run_task, timeout=1.0)

        assert sorted(request.namespace for request in requests) == ["rook-ceph", "tenant-b"]
        assert len(store.watch_calls) == len(router.watched_kinds)
        assert (ResourceKind.DEPLOYMENT, None, "app=rook-ceph-osd") in store.watch_calls


class TestStreamResilience:
    """Malformed events and failed subscriptions never silence a stream."""

    @pytest.fixture
    def requests(self) -> list[ReconcileRequest]:
        return []

    @staticmethod
    async def _run_briefly(router: EventRouter, store: FakeResourceStore) -> None:
        stop_event = asyncio.Event()
        run_task = asyncio.create_task(router.run(store, stop_event))
        for _ in range(50):
            await asyncio.sleep(0)
        stop_event.set()
        await asyncio.wait_for(run_task, timeout=1.0)

    @pytest.mark.parametrize(("field", "value"), [("status", ["bad"]), ("spec", "bad")])
    def test_misshapen_deployment_dropped(
        self, requests: list[ReconcileRequest], field: str, value: object
    ) -> None:
        router = EventRouter(requests.append)
        raw = deployment_manifest(unavailable=2)
        raw[field] = value

        assert router.handle(RawWatchEvent(ResourceKind.DEPLOYMENT, EventVerb.UPDATE, raw)) is None
        assert requests == []

    @pytest.mark.asyncio
    async def test_stream_continues_after_misshapen_event(
        self, requests: list[ReconcileRequest], store: FakeResourceStore
    ) -> None:
        broken = deployment_manifest(name="rook-ceph-osd-1", unavailable=1)
        broken["spec"] = "bad"
        store.watch_events[ResourceKind.DEPLOYMENT] = [
            RawWatchEvent(ResourceKind.DEPLOYMENT, EventVerb.UPDATE, broken),
            RawWatchEvent(ResourceKind.DEPLOYMENT, EventVerb.UPDATE, deployment_manifest(unavailable=2)),
        ]

        await self._run_briefly(EventRouter(requests.append), store)

        assert requests == [ReconcileRequest(namespace="rook-ceph")]

    @pytest.mark.asyncio
    async def test_failed_subscription_is_reopened(
        self, requests: list[ReconcileRequest], store: FakeResourceStore
    ) -> None:
        store.watch_failures[ResourceKind.CEPH_CLUSTER] = [OSError("kubectl: not found")]
        store.watch_events[ResourceKind.CEPH_CLUSTER] = [
            RawWatchEvent(ResourceKind.CEPH_CLUSTER, EventVerb.CREATE, cluster_manifest())
        ]

        await self._run_briefly(EventRouter(requests.append, restart_delay=0), store)

        cluster_calls = [call for call in store.watch_calls if call[0] is ResourceKind.CEPH_CLUSTER]
        assert len(cluster_calls) == 2
        assert requests == [ReconcileRequest(namespace="rook-ceph")]

    def test_budget_events_are_not_routed(self, requests: list[ReconcileRequest]) -> None:
        router = EventRouter(requests.append)
        event = WatchEvent(
            kind=ResourceKind.POD_DISRUPTION_BUDGET,
            verb=EventVerb.CREATE,
            new_object=DisruptionBudget(namespace="rook-ceph", name="mon-pdb", min_available=2),
        )

        assert router.route(event) is None
        assert requests == []
