"""Scalar constants for the disruption controller.

Resource names, label values and kubectl resource identifiers with Final hints.
"""

from typing import Final

# ============================================================================
# Application
# ============================================================================

APP_TITLE: Final = "quorumguard"
CONTROLLER_NAME: Final = "clusterdisruption-controller"

# ============================================================================
# Rook / Ceph conventions
# ============================================================================

MON_PDB_NAME: Final = "mon-pdb"
APP_LABEL: Final = "app"
MON_APP_NAME: Final = "rook-ceph-mon"
OSD_APP_NAME: Final = "rook-ceph-osd"

# ============================================================================
# kubectl resource identifiers (fully qualified to avoid short-name clashes)
# ============================================================================

RESOURCE_CEPH_CLUSTER: Final = "cephclusters.ceph.rook.io"
RESOURCE_CEPH_BLOCK_POOL: Final = "cephblockpools.ceph.rook.io"
RESOURCE_CEPH_FILESYSTEM: Final = "cephfilesystems.ceph.rook.io"
RESOURCE_CEPH_OBJECT_STORE: Final = "cephobjectstores.ceph.rook.io"
RESOURCE_DEPLOYMENT: Final = "deployments.apps"
RESOURCE_PDB: Final = "poddisruptionbudgets.policy"

PDB_API_VERSION: Final = "policy/v1"

__all__ = [
    "APP_LABEL",
    "APP_TITLE",
    "CONTROLLER_NAME",
    "MON_APP_NAME",
    "MON_PDB_NAME",
    "OSD_APP_NAME",
    "PDB_API_VERSION",
    "RESOURCE_CEPH_BLOCK_POOL",
    "RESOURCE_CEPH_CLUSTER",
    "RESOURCE_CEPH_FILESYSTEM",
    "RESOURCE_CEPH_OBJECT_STORE",
    "RESOURCE_DEPLOYMENT",
    "RESOURCE_PDB",
]
