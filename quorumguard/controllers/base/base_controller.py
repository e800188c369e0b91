"""Base controller for quorumguard.

This module provides the foundation shared by reconcile controllers: a
result wrapper and the abstract connection/reconcile contract.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from quorumguard.models.events.watch_event import ReconcileRequest

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    """Result wrapper for one reconcile pass."""

    success: bool
    data: Any | None = None
    error: str | None = None
    duration_ms: float = 0.0
    requeue: bool = False


class BaseController(ABC):
    """Base controller class.

    Subclasses implement connection checking and a single reconcile pass;
    scheduling of passes is left to the caller.
    """

    @abstractmethod
    async def check_connection(self) -> bool:
        """Check if the resource store is available.

        Returns:
            True if connection is available, False otherwise
        """
        ...

    @abstractmethod
    async def reconcile(self, request: ReconcileRequest) -> ReconcileResult:
        """Run one level-triggered pass for ``request``.

        Returns:
            ReconcileResult describing the pass
        """
        ...
