"""Limit constants for the disruption controller."""

from typing import Final

# ============================================================================
# Controller limits
# ============================================================================

MAX_WORKERS: Final = 8
MIN_WORKERS: Final = 1

# Depth bound when unwrapping nested command errors
MAX_ERROR_UNWRAP_DEPTH: Final = 16

__all__ = [
    "MAX_ERROR_UNWRAP_DEPTH",
    "MAX_WORKERS",
    "MIN_WORKERS",
]
