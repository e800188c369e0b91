"""Data models for quorumguard."""

from quorumguard.models.cluster.cluster_info import (
    CephClusterResource,
    ClusterReference,
    DeploymentResource,
    ObjectMeta,
    StorageChildResource,
)
from quorumguard.models.events.watch_event import (
    RawWatchEvent,
    ReconcileRequest,
    WatchEvent,
)
from quorumguard.models.pdb.disruption_budget import DisruptionBudget

__all__ = [
    "CephClusterResource",
    "ClusterReference",
    "DeploymentResource",
    "DisruptionBudget",
    "ObjectMeta",
    "RawWatchEvent",
    "ReconcileRequest",
    "StorageChildResource",
    "WatchEvent",
]
