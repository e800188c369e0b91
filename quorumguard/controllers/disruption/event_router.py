"""Event router for the cluster disruption controller.

Subscribes to the resource streams that can change the monitor disruption
tolerance and turns matching events into namespace-scoped reconcile requests.
Each stream has its own predicate:

- CephCluster: create always, update only on a spec change, never delete.
- OSD deployments: update only while replicas are unavailable (a drain or a
  failure is in progress).
- Pools, filesystems, object stores: every event.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import cast

from quorumguard.constants.enums import STORAGE_CHILD_KINDS, EventVerb, ResourceKind
from quorumguard.constants.timeouts import WATCH_RESTART_DELAY
from quorumguard.constants.values import APP_LABEL, OSD_APP_NAME
from quorumguard.controllers.cluster.fetchers.resource_store import ResourceStore
from quorumguard.controllers.cluster.fetchers.watch_fetcher import follow_watch
from quorumguard.controllers.cluster.parsers.resource_parser import ResourceParser
from quorumguard.models.cluster.cluster_info import CephClusterResource, DeploymentResource
from quorumguard.models.events.watch_event import (
    RawWatchEvent,
    ReconcileRequest,
    RoutedObject,
    WatchEvent,
)

logger = logging.getLogger(__name__)

Predicate = Callable[[WatchEvent], bool]


class EventRouter:
    """Filters watch events and enqueues reconcile requests by namespace."""

    def __init__(
        self,
        enqueue: Callable[[ReconcileRequest], object],
        *,
        osd_app_label: str = OSD_APP_NAME,
        parser: ResourceParser | None = None,
        restart_delay: float = WATCH_RESTART_DELAY,
        log: logging.Logger | None = None,
    ) -> None:
        """Initialize the router.

        Args:
            enqueue: Callable receiving each reconcile request.
            osd_app_label: ``app`` label value identifying OSD deployments.
            parser: Boundary parser for raw payloads.
            restart_delay: Seconds to wait before resubscribing a failed stream.
            log: Logger overriding the module logger.
        """
        self._enqueue = enqueue
        self._osd_app_label = osd_app_label
        self._parser = parser or ResourceParser()
        self._restart_delay = restart_delay
        self._log = log or logger
        self._predicates: dict[ResourceKind, Predicate] = {
            ResourceKind.CEPH_CLUSTER: self.cluster_predicate,
            ResourceKind.DEPLOYMENT: self.osd_predicate,
        }
        for child_kind in STORAGE_CHILD_KINDS:
            self._predicates[child_kind] = self.child_predicate

    @property
    def watched_kinds(self) -> tuple[ResourceKind, ...]:
        return tuple(self._predicates)

    def label_selector_for(self, kind: ResourceKind) -> str | None:
        if kind is ResourceKind.DEPLOYMENT:
            return f"{APP_LABEL}={self._osd_app_label}"
        return None

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    def cluster_predicate(self, event: WatchEvent) -> bool:
        cluster = cast(CephClusterResource, event.new_object)
        if event.verb is EventVerb.CREATE:
            self._log.info(
                "Create event from CephCluster %s/%s",
                cluster.metadata.namespace,
                cluster.metadata.name,
            )
            return True
        if event.verb is EventVerb.UPDATE:
            old = event.old_object
            if old is None:
                return True
            # Status-only updates are ignored
            return cast(CephClusterResource, old).spec != cluster.spec
        return False

    def osd_predicate(self, event: WatchEvent) -> bool:
        if event.verb is not EventVerb.UPDATE:
            return False
        deployment = cast(DeploymentResource, event.new_object)
        if deployment.metadata.labels.get(APP_LABEL) != self._osd_app_label:
            return False
        self._log.debug(
            "OSD deployment %s is updated. Unavailable replicas: %d",
            deployment.metadata.name,
            deployment.unavailable_replicas,
        )
        return deployment.unavailable_replicas > 0

    @staticmethod
    def child_predicate(event: WatchEvent) -> bool:
        return True

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    def route(self, event: WatchEvent) -> ReconcileRequest | None:
        """Apply the stream's predicate and enqueue a request when it matches."""
        predicate = self._predicates.get(event.kind)
        if predicate is None or not predicate(event):
            self._log.debug("Ignoring %s %s event", event.verb.value, event.kind.value)
            return None

        metadata = cast(RoutedObject, event.new_object).metadata
        namespace = metadata.namespace
        if not namespace:
            self._log.error(
                "%s %s received without a namespace, dropping", event.kind.value, metadata.name
            )
            return None

        # The name is resolved by the reconciler (one CephCluster per namespace)
        request = ReconcileRequest(namespace=namespace)
        self._log.debug(
            "Enqueueing reconcile for namespace %s after %s %s %s",
            namespace,
            event.verb.value,
            event.kind.value,
            metadata.name,
        )
        self._enqueue(request)
        return request

    def handle(self, raw_event: RawWatchEvent) -> ReconcileRequest | None:
        """Decode and route one raw event; malformed payloads are logged and dropped."""
        try:
            event = self._parser.parse_watch_event(
                raw_event.kind, raw_event.verb, raw_event.new_raw, raw_event.old_raw
            )
        except ValueError as exc:
            self._log.warning(
                "Expected %s but handler received an unusable payload: %s",
                raw_event.kind.value,
                exc,
            )
            return None
        return self.route(event)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    async def _consume(
        self,
        store: ResourceStore,
        kind: ResourceKind,
        namespace: str | None,
    ) -> None:
        label_selector = self.label_selector_for(kind)
        await follow_watch(
            lambda: store.watch(kind, namespace=namespace, label_selector=label_selector),
            self.handle,
            name=kind.value,
            restart_delay=self._restart_delay,
            log=self._log,
        )

    async def run(
        self,
        store: ResourceStore,
        stop_event: asyncio.Event,
        *,
        namespace: str | None = None,
    ) -> None:
        """Subscribe to every stream until ``stop_event`` is set.

        All subscriptions are cancelled together; a stream that fails is
        logged and resubscribed while the others keep running.
        """
        tasks = [
            asyncio.create_task(self._consume(store, kind, namespace), name=f"watch-{kind.value}")
            for kind in self.watched_kinds
        ]
        try:
            await stop_event.wait()
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

