"""Cluster disruption controller.

Keeps the monitor PodDisruptionBudget of every CephCluster consistent with
its declared monitor count. Watch events are routed into a work queue; each
worker pass re-reads the cluster and the budget and converges them.
"""

from __future__ import annotations

import asyncio
import logging
import time

from quorumguard.constants.enums import EventVerb, ResourceKind
from quorumguard.constants.timeouts import CLUSTER_CHECK_TIMEOUT
from quorumguard.controllers.base import BaseController, ReconcileResult
from quorumguard.controllers.cluster.fetchers.kubectl_runner import KubectlRunner
from quorumguard.controllers.cluster.fetchers.kubectl_store import KubectlResourceStore
from quorumguard.controllers.cluster.fetchers.resource_store import ResourceStore
from quorumguard.controllers.cluster.fetchers.watch_fetcher import WatchFetcher, follow_watch
from quorumguard.controllers.cluster.parsers.resource_parser import ResourceParser
from quorumguard.controllers.disruption.cluster_map import ClusterMap
from quorumguard.controllers.disruption.event_router import EventRouter
from quorumguard.controllers.disruption.pdb_manager import MonPDBAuditor, PDBLifecycleManager
from quorumguard.controllers.disruption.quorum_validator import QuorumValidator
from quorumguard.controllers.disruption.work_queue import QueueShutDown, ReconcileQueue
from quorumguard.exceptions import NotFoundError, ResourceStoreError
from quorumguard.models.cluster.cluster_info import CephClusterResource
from quorumguard.models.events.watch_event import RawWatchEvent, ReconcileRequest
from quorumguard.models.state.app_settings import OperatorSettings

logger = logging.getLogger(__name__)


class ClusterDisruptionController(BaseController):
    """Reconciles the monitor disruption budget of CephClusters.

    This class wires together:
    - EventRouter: stream filtering into namespace-scoped requests
    - ReconcileQueue: dedup and per-request serialisation
    - ClusterMap: namespace to cluster name resolution
    - PDBLifecycleManager: budget convergence
    - MonPDBAuditor: warnings for budgets edited out of band
    """

    def __init__(
        self,
        store: ResourceStore,
        settings: OperatorSettings | None = None,
        *,
        cluster_map: ClusterMap | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            store: Resource store used for every read and write.
            settings: Operator settings, defaults when omitted.
            cluster_map: Shared namespace registry, a new one when omitted.
            log: Logger overriding the module logger.
        """
        self.settings = settings or OperatorSettings()
        self._store = store
        self._log = log or logger
        self.cluster_map = cluster_map or ClusterMap()
        self.validator = QuorumValidator(self.settings.mon_pdb_name)
        self.pdb_manager = PDBLifecycleManager(
            store,
            self.validator,
            mon_app_label=self.settings.mon_app_label,
            log=log,
        )
        self.auditor = MonPDBAuditor(store, self.cluster_map, self.validator, log=log)
        self._parser = ResourceParser()
        self.queue: ReconcileQueue | None = None

    @classmethod
    def from_settings(cls, settings: OperatorSettings) -> ClusterDisruptionController:
        """Build a controller backed by kubectl."""
        runner = KubectlRunner(
            settings.context,
            request_timeout=settings.request_timeout,
            command_timeout=settings.command_timeout_seconds,
        )
        store = KubectlResourceStore(
            runner,
            watch_fetcher=WatchFetcher(
                runner.build_command,
                restart_delay=settings.watch_restart_delay_seconds,
            ),
        )
        return cls(store, settings)

    async def check_connection(self) -> bool:
        try:
            return await asyncio.wait_for(
                self._store.check_connection(),
                timeout=CLUSTER_CHECK_TIMEOUT,
            )
        except asyncio.TimeoutError:
            self._log.warning(
                "Cluster connection check timed out after %.1fs", CLUSTER_CHECK_TIMEOUT
            )
            return False

    # ------------------------------------------------------------------
    # Reconcile
    # ------------------------------------------------------------------

    async def _resolve_cluster(self, request: ReconcileRequest) -> CephClusterResource | None:
        """Find the authoritative cluster object for ``request``."""
        namespace = request.namespace
        name = request.name or self.cluster_map.get(namespace)
        if name:
            try:
                return await self._store.get_cluster(namespace, name)
            except NotFoundError:
                self._log.info("CephCluster %s/%s not found", namespace, name)
                self.cluster_map.remove(namespace)
                if request.name:
                    return None

        clusters = await self._store.list_clusters(namespace)
        if not clusters:
            self._log.debug("No CephCluster in namespace %s", namespace)
            self.cluster_map.remove(namespace)
            return None
        if len(clusters) > 1:
            self._log.warning(
                "Found %d CephClusters in namespace %s, using %s",
                len(clusters),
                namespace,
                clusters[0].metadata.name,
            )
        return clusters[0]

    async def reconcile(self, request: ReconcileRequest) -> ReconcileResult:
        """Run one pass; store errors are returned in the result, never raised."""
        start = time.monotonic()
        try:
            cluster = await self._resolve_cluster(request)
            if cluster is None:
                return ReconcileResult(
                    success=True,
                    data=None,
                    duration_ms=(time.monotonic() - start) * 1000,
                )
            reference = cluster.to_reference()
            self.cluster_map.update(reference.namespace, reference.name)
            action = await self.pdb_manager.reconcile(reference)
        except ResourceStoreError as exc:
            self._log.warning("Reconcile of %s failed: %s", request, exc)
            return ReconcileResult(
                success=False,
                error=str(exc),
                duration_ms=(time.monotonic() - start) * 1000,
                requeue=True,
            )

        return ReconcileResult(
            success=True,
            data=action,
            duration_ms=(time.monotonic() - start) * 1000,
        )

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    async def _worker(self, queue: ReconcileQueue, worker_id: int) -> None:
        while True:
            try:
                request = await queue.get()
            except QueueShutDown:
                return
            try:
                result = await self.reconcile(request)
            except Exception:
                self._log.exception("Worker %d: unexpected error reconciling %s", worker_id, request)
                result = ReconcileResult(success=False, requeue=True)
            finally:
                queue.done(request)
            if result.requeue:
                queue.add_after(request, self.settings.requeue_delay_seconds)

    async def _audit_event(self, raw_event: RawWatchEvent) -> None:
        if raw_event.verb is EventVerb.DELETE:
            return
        try:
            budget = self._parser.parse_disruption_budget(raw_event.new_raw)
        except ValueError as exc:
            self._log.warning("Expected PodDisruptionBudget but handler received %s", exc)
            return
        try:
            await self.auditor.audit(budget)
        except ResourceStoreError as exc:
            self._log.warning("Audit of %s/%s failed: %s", budget.namespace, budget.name, exc)

    async def _watch_budgets(self) -> None:
        namespace = self.settings.namespace
        await follow_watch(
            lambda: self._store.watch(ResourceKind.POD_DISRUPTION_BUDGET, namespace=namespace),
            self._audit_event,
            name=ResourceKind.POD_DISRUPTION_BUDGET.value,
            restart_delay=self.settings.watch_restart_delay_seconds,
            log=self._log,
        )

    async def run(self, stop_event: asyncio.Event) -> None:
        """Watch, route and reconcile until ``stop_event`` is set."""
        queue = ReconcileQueue()
        self.queue = queue
        router = EventRouter(
            queue.add,
            osd_app_label=self.settings.osd_app_label,
            restart_delay=self.settings.watch_restart_delay_seconds,
            log=self._log,
        )
        self._log.info("Starting %d reconcile workers", self.settings.worker_count)

        tasks = [
            asyncio.create_task(self._worker(queue, worker_id), name=f"reconcile-worker-{worker_id}")
            for worker_id in range(self.settings.worker_count)
        ]
        tasks.append(
            asyncio.create_task(
                router.run(self._store, stop_event, namespace=self.settings.namespace),
                name="event-router",
            )
        )
        tasks.append(asyncio.create_task(self._watch_budgets(), name="watch-PodDisruptionBudget"))
        try:
            await stop_event.wait()
        finally:
            queue.shutdown()
            for task in tasks:
                task.cancel()
            results = await asyncio.gather(*tasks, return_exceptions=True)
            for task, outcome in zip(tasks, results):
                if isinstance(outcome, Exception):
                    self._log.error("%s stopped with error: %s", task.get_name(), outcome)
            self._log.info("Cluster disruption controller stopped")
