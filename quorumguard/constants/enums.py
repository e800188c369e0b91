"""All enum definitions for the disruption controller.

This module consolidates all enumerations used throughout the package.
"""

from enum import Enum

# =============================================================================
# Watch Enums
# =============================================================================

class ResourceKind(Enum):
    """Resource kinds observed by the controller."""

    CEPH_CLUSTER = "CephCluster"
    DEPLOYMENT = "Deployment"
    CEPH_BLOCK_POOL = "CephBlockPool"
    CEPH_FILESYSTEM = "CephFilesystem"
    CEPH_OBJECT_STORE = "CephObjectStore"
    POD_DISRUPTION_BUDGET = "PodDisruptionBudget"


class EventVerb(Enum):
    """Verbs of a watch event."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


# Child resources whose presence alone may change the required tolerance
STORAGE_CHILD_KINDS: tuple[ResourceKind, ...] = (
    ResourceKind.CEPH_BLOCK_POOL,
    ResourceKind.CEPH_FILESYSTEM,
    ResourceKind.CEPH_OBJECT_STORE,
)


# =============================================================================
# Validation / Lifecycle Enums
# =============================================================================

class QuorumConsistency(Enum):
    """Outcome of comparing a budget with the monitor quorum size."""

    VALID = "valid"
    INVALID = "invalid"
    UNKNOWN = "unknown"


class PDBAction(Enum):
    """Action taken by one PDB convergence pass."""

    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"


# =============================================================================
# Command Error Enums
# =============================================================================

class ExitErrorKind(Enum):
    """Recognised failure shapes of an external command invocation."""

    PROCESS_EXIT = "process_exit"
    CODED_EXIT = "coded_exit"
    TOOL_WRAPPER = "tool_wrapper"
    OS_ERRNO = "os_errno"
    UNRECOGNISED = "unrecognised"


__all__ = [
    "STORAGE_CHILD_KINDS",
    "EventVerb",
    "ExitErrorKind",
    "PDBAction",
    "QuorumConsistency",
    "ResourceKind",
]
