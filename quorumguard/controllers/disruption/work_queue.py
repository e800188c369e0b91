"""Deduplicating reconcile work queue."""

from __future__ import annotations

import asyncio

from quorumguard.models.events.watch_event import ReconcileRequest


class QueueShutDown(Exception):
    """Raised by ``get`` once the queue has been shut down."""


class ReconcileQueue:
    """Work queue with controller semantics.

    - A request already waiting is not queued twice.
    - A request being processed is never handed to a second worker; if it is
      added again meanwhile it is queued once more when ``done`` is called.

    Must be used from a single event loop.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[ReconcileRequest | None] = asyncio.Queue()
        self._pending: set[ReconcileRequest] = set()
        self._processing: set[ReconcileRequest] = set()
        self._dirty: set[ReconcileRequest] = set()
        self._delayed: set[asyncio.TimerHandle] = set()
        self._getters = 0
        self._shutdown = False

    def __len__(self) -> int:
        return len(self._pending)

    @property
    def is_shut_down(self) -> bool:
        return self._shutdown

    def add(self, request: ReconcileRequest) -> bool:
        """Queue ``request``; returns False when it was not queued now."""
        if self._shutdown:
            return False
        if request in self._processing:
            self._dirty.add(request)
            return False
        if request in self._pending:
            return False
        self._pending.add(request)
        self._queue.put_nowait(request)
        return True

    def add_after(self, request: ReconcileRequest, delay: float) -> None:
        """Queue ``request`` once ``delay`` seconds have passed."""
        if self._shutdown:
            return
        if delay <= 0:
            self.add(request)
            return
        loop = asyncio.get_running_loop()

        def _fire() -> None:
            self._delayed.discard(handle)
            self.add(request)

        handle = loop.call_later(delay, _fire)
        self._delayed.add(handle)

    async def get(self) -> ReconcileRequest:
        """Wait for the next request; raises ``QueueShutDown`` once closed."""
        if self._shutdown:
            raise QueueShutDown
        self._getters += 1
        try:
            request = await self._queue.get()
        finally:
            self._getters -= 1
        if request is None or self._shutdown:
            raise QueueShutDown
        self._pending.discard(request)
        self._processing.add(request)
        return request

    def done(self, request: ReconcileRequest) -> None:
        """Mark ``request`` finished, re-queueing it if it was added meanwhile."""
        self._processing.discard(request)
        if request in self._dirty:
            self._dirty.discard(request)
            self.add(request)

    def shutdown(self) -> None:
        """Drop waiting work and wake every blocked ``get``."""
        self._shutdown = True
        for handle in self._delayed:
            handle.cancel()
        self._delayed.clear()
        self._pending.clear()
        self._dirty.clear()
        while not self._queue.empty():
            self._queue.get_nowait()
        for _ in range(self._getters):
            self._queue.put_nowait(None)
