"""Monitor PodDisruptionBudget lifecycle.

``PDBLifecycleManager`` converges the monitor budget of one cluster toward
the threshold computed by ``QuorumValidator``. Every pass re-reads the budget
and decides from scratch, so passes can be retried or repeated freely.

``MonPDBAuditor`` only reports: it evaluates budgets seen on the watch stream
and logs when the monitor budget disagrees with the declared quorum.
"""

from __future__ import annotations

import logging

from quorumguard.constants.enums import PDBAction, QuorumConsistency
from quorumguard.constants.values import APP_LABEL, MON_APP_NAME
from quorumguard.controllers.cluster.fetchers.resource_store import ResourceStore
from quorumguard.controllers.disruption.cluster_map import ClusterMap
from quorumguard.controllers.disruption.quorum_validator import QuorumValidator
from quorumguard.exceptions import NotFoundError
from quorumguard.models.cluster.cluster_info import ClusterReference
from quorumguard.models.pdb.disruption_budget import DisruptionBudget

logger = logging.getLogger(__name__)


class PDBLifecycleManager:
    """Creates or updates the monitor budget so it matches the quorum."""

    def __init__(
        self,
        store: ResourceStore,
        validator: QuorumValidator | None = None,
        *,
        mon_app_label: str = MON_APP_NAME,
        log: logging.Logger | None = None,
    ) -> None:
        self._store = store
        self._validator = validator or QuorumValidator()
        self._mon_app_label = mon_app_label
        self._log = log or logger

    @property
    def budget_name(self) -> str:
        return self._validator.mon_pdb_name

    def desired_budget(self, cluster: ClusterReference, min_available: int) -> DisruptionBudget:
        return DisruptionBudget(
            namespace=cluster.namespace,
            name=self.budget_name,
            min_available=min_available,
            selector={APP_LABEL: self._mon_app_label},
        )

    async def get_budget(self, namespace: str) -> DisruptionBudget | None:
        """Return the monitor budget, or None when it does not exist."""
        try:
            return await self._store.get_disruption_budget(namespace, self.budget_name)
        except NotFoundError:
            return None

    async def reconcile(self, cluster: ClusterReference) -> PDBAction:
        """Run one convergence pass for ``cluster``.

        Store errors other than not-found propagate to the caller.
        """
        threshold = self._validator.required_min_available(cluster.quorum_size)
        if threshold is None:
            self._log.info(
                "Monitor count of cluster %s/%s not known yet, leaving %s unmanaged",
                cluster.namespace,
                cluster.name,
                self.budget_name,
            )
            return PDBAction.SKIPPED

        desired = self.desired_budget(cluster, threshold)
        existing = await self.get_budget(cluster.namespace)
        if existing is None:
            await self._store.create_disruption_budget(desired)
            self._log.info(
                "Created PodDisruptionBudget %s/%s with minAvailable=%d",
                cluster.namespace,
                self.budget_name,
                threshold,
            )
            return PDBAction.CREATED

        outcome = self._validator.is_consistent(cluster.quorum_size, existing.min_available)
        if outcome is QuorumConsistency.INVALID:
            self._log.warning(
                "Mon count %d not consistent with minAvailable %d in %s/%s",
                cluster.quorum_size,
                existing.min_available,
                cluster.namespace,
                self.budget_name,
            )
        elif existing.selector != desired.selector:
            self._log.warning(
                "PodDisruptionBudget %s/%s selects %s instead of %s",
                cluster.namespace,
                self.budget_name,
                existing.selector,
                desired.selector,
            )
        else:
            self._log.debug(
                "PodDisruptionBudget %s/%s already at minAvailable=%d",
                cluster.namespace,
                self.budget_name,
                threshold,
            )
            return PDBAction.UNCHANGED

        updated = existing.model_copy(
            update={"min_available": threshold, "selector": desired.selector}
        )
        await self._store.update_disruption_budget(updated)
        self._log.info(
            "Updated PodDisruptionBudget %s/%s minAvailable %d -> %d",
            cluster.namespace,
            self.budget_name,
            existing.min_available,
            threshold,
        )
        return PDBAction.UPDATED


class MonPDBAuditor:
    """Logs monitor budgets that are inconsistent with the declared quorum."""

    def __init__(
        self,
        store: ResourceStore,
        cluster_map: ClusterMap,
        validator: QuorumValidator | None = None,
        *,
        log: logging.Logger | None = None,
    ) -> None:
        self._store = store
        self._cluster_map = cluster_map
        self._validator = validator or QuorumValidator()
        self._log = log or logger

    async def audit(self, budget: DisruptionBudget) -> QuorumConsistency | None:
        """Evaluate ``budget``; returns None when it is not evaluated."""
        if not self._validator.applies_to(budget.name):
            return None
        self._log.debug("Monitor PodDisruptionBudget %s/%s observed", budget.namespace, budget.name)

        cluster_name = self._cluster_map.get(budget.namespace)
        if cluster_name is None:
            clusters = await self._store.list_clusters(budget.namespace)
            if not clusters:
                return None
            cluster = clusters[0]
        else:
            try:
                cluster = await self._store.get_cluster(budget.namespace, cluster_name)
            except NotFoundError:
                return None

        outcome = self._validator.evaluate_budget(budget, cluster.quorum_size)
        if outcome is QuorumConsistency.INVALID:
            self._log.warning(
                "Mon count %d of cluster %s/%s not consistent with minAvailable %d in %s",
                cluster.quorum_size,
                budget.namespace,
                cluster.metadata.name,
                budget.min_available,
                budget.name,
            )
        return outcome
