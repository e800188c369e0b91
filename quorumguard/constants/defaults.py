"""Default values for settings.

All default values used in the OperatorSettings model.
"""

from typing import Final

from quorumguard.constants.timeouts import (
    CLUSTER_REQUEST_TIMEOUT,
    KUBECTL_COMMAND_TIMEOUT,
    REQUEUE_DELAY,
    WATCH_RESTART_DELAY,
)

# ============================================================================
# Controller defaults
# ============================================================================

WORKER_COUNT_DEFAULT: Final = 2
REQUEUE_DELAY_DEFAULT: Final = REQUEUE_DELAY
WATCH_RESTART_DELAY_DEFAULT: Final = WATCH_RESTART_DELAY

# ============================================================================
# kubectl defaults
# ============================================================================

REQUEST_TIMEOUT_DEFAULT: Final = CLUSTER_REQUEST_TIMEOUT
COMMAND_TIMEOUT_DEFAULT: Final = KUBECTL_COMMAND_TIMEOUT

# Environment variable naming the settings file
CONFIG_PATH_ENV_VAR: Final = "QUORUMGUARD_CONFIG"

__all__ = [
    "COMMAND_TIMEOUT_DEFAULT",
    "CONFIG_PATH_ENV_VAR",
    "REQUEST_TIMEOUT_DEFAULT",
    "REQUEUE_DELAY_DEFAULT",
    "WATCH_RESTART_DELAY_DEFAULT",
    "WORKER_COUNT_DEFAULT",
]
