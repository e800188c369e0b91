"""Controllers module for quorumguard.

This module provides the cluster disruption controller and the kubectl
adapters it reads and writes cluster state through.
"""

from __future__ import annotations

# Base classes
from quorumguard.controllers.base import BaseController, ReconcileResult

# Cluster access
from quorumguard.controllers.cluster import (
    KubectlResourceStore,
    KubectlRunner,
    ResourceParser,
    ResourceStore,
)

# Disruption domain
from quorumguard.controllers.disruption import (
    ClusterDisruptionController,
    ClusterMap,
    EventRouter,
    MonPDBAuditor,
    PDBLifecycleManager,
    QuorumValidator,
    ReconcileQueue,
)

__all__ = [
    # Base
    "BaseController",
    # Domain Controllers
    "ClusterDisruptionController",
    "ClusterMap",
    "EventRouter",
    # Cluster access
    "KubectlResourceStore",
    "KubectlRunner",
    "MonPDBAuditor",
    "PDBLifecycleManager",
    "QuorumValidator",
    "ReconcileQueue",
    "ReconcileResult",
    "ResourceParser",
    "ResourceStore",
]
