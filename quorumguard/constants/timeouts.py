"""Timeout constants for the disruption controller.

All timeout and delay values for kubectl requests, watches and requeues.
"""

from typing import Final

# ============================================================================
# API/Cluster timeouts (string format for kubectl)
# ============================================================================

CLUSTER_REQUEST_TIMEOUT: Final = "30s"

# Process-level command timeout (must be greater than request timeout)
KUBECTL_COMMAND_TIMEOUT: Final = 45

# ============================================================================
# Loop delays (float, in seconds)
# ============================================================================

REQUEUE_DELAY: Final = 10.0
WATCH_RESTART_DELAY: Final = 5.0
CLUSTER_CHECK_TIMEOUT: Final = 12.0

__all__ = [
    "CLUSTER_CHECK_TIMEOUT",
    "CLUSTER_REQUEST_TIMEOUT",
    "KUBECTL_COMMAND_TIMEOUT",
    "REQUEUE_DELAY",
    "WATCH_RESTART_DELAY",
]
