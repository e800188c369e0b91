"""Constants module for quorumguard.

Centralized constants organized by domain:
- enums.py: All Enum class definitions
- values.py: Scalar constants (names, labels, kubectl resources)
- timeouts.py: Timeout and delay values
- limits.py: Limit values (max/min)
- defaults.py: Default values for settings
"""

from quorumguard.constants.defaults import (
    CONFIG_PATH_ENV_VAR,
    WORKER_COUNT_DEFAULT,
)
from quorumguard.constants.enums import (
    STORAGE_CHILD_KINDS,
    EventVerb,
    ExitErrorKind,
    PDBAction,
    QuorumConsistency,
    ResourceKind,
)
from quorumguard.constants.limits import MAX_WORKERS
from quorumguard.constants.timeouts import (
    CLUSTER_REQUEST_TIMEOUT,
    KUBECTL_COMMAND_TIMEOUT,
)
from quorumguard.constants.values import (
    MON_APP_NAME,
    MON_PDB_NAME,
    OSD_APP_NAME,
)

__all__ = [
    # Timeouts
    "CLUSTER_REQUEST_TIMEOUT",
    "CONFIG_PATH_ENV_VAR",
    "KUBECTL_COMMAND_TIMEOUT",
    "MAX_WORKERS",
    # Names
    "MON_APP_NAME",
    "MON_PDB_NAME",
    "OSD_APP_NAME",
    "STORAGE_CHILD_KINDS",
    "WORKER_COUNT_DEFAULT",
    # Enums
    "EventVerb",
    "ExitErrorKind",
    "PDBAction",
    "QuorumConsistency",
    "ResourceKind",
]
