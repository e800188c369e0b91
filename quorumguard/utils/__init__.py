"""Utility helpers for quorumguard."""

from quorumguard.utils.exit_status import (
    UNKNOWN_EXIT_STATUS,
    ExitStatus,
    exit_status,
    is_transient_error,
)

__all__ = ["UNKNOWN_EXIT_STATUS", "ExitStatus", "exit_status", "is_transient_error"]
