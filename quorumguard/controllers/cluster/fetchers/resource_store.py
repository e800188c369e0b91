"""Resource store protocol - the controller's view of the Kubernetes API."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Protocol

from quorumguard.constants.enums import ResourceKind
from quorumguard.models.cluster.cluster_info import CephClusterResource
from quorumguard.models.events.watch_event import RawWatchEvent
from quorumguard.models.pdb.disruption_budget import DisruptionBudget


class ResourceStore(Protocol):
    """Typed, namespaced get/list/create/update plus watch subscriptions.

    Lookups of absent objects raise ``NotFoundError``; other failures raise
    ``ResourceStoreError`` subclasses.
    """

    async def check_connection(self) -> bool: ...

    async def get_cluster(self, namespace: str, name: str) -> CephClusterResource: ...

    async def list_clusters(self, namespace: str) -> list[CephClusterResource]: ...

    async def get_disruption_budget(self, namespace: str, name: str) -> DisruptionBudget: ...

    async def create_disruption_budget(self, budget: DisruptionBudget) -> DisruptionBudget: ...

    async def update_disruption_budget(self, budget: DisruptionBudget) -> DisruptionBudget: ...

    def watch(
        self,
        kind: ResourceKind,
        *,
        namespace: str | None = None,
        label_selector: str | None = None,
    ) -> AsyncGenerator[RawWatchEvent, None]: ...
