"""Cluster disruption domain: keeps the monitor PDB in line with the quorum."""

from quorumguard.controllers.disruption.cluster_map import ClusterMap
from quorumguard.controllers.disruption.controller import ClusterDisruptionController
from quorumguard.controllers.disruption.event_router import EventRouter
from quorumguard.controllers.disruption.pdb_manager import MonPDBAuditor, PDBLifecycleManager
from quorumguard.controllers.disruption.quorum_validator import QuorumValidator
from quorumguard.controllers.disruption.work_queue import QueueShutDown, ReconcileQueue

__all__ = [
    "ClusterDisruptionController",
    "ClusterMap",
    "EventRouter",
    "MonPDBAuditor",
    "PDBLifecycleManager",
    "QueueShutDown",
    "QuorumValidator",
    "ReconcileQueue",
]
