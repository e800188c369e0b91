"""Watch fetcher - streams ``kubectl get --watch`` output as raw watch events."""

from __future__ import annotations

import asyncio
import codecs
import inspect
import json
import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import aclosing, suppress
from typing import Any

from quorumguard.constants.enums import EventVerb, ResourceKind
from quorumguard.constants.timeouts import WATCH_RESTART_DELAY
from quorumguard.models.events.watch_event import RawWatchEvent

logger = logging.getLogger(__name__)

_WATCH_TYPE_VERBS = {
    "ADDED": EventVerb.CREATE,
    "MODIFIED": EventVerb.UPDATE,
    "DELETED": EventVerb.DELETE,
}


class JsonStreamDecoder:
    """Incrementally decodes a stream of concatenated JSON documents."""

    def __init__(self) -> None:
        self._decoder = json.JSONDecoder()
        self._bytes = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    def feed(self, chunk: bytes) -> list[Any]:
        """Add a chunk and return every document completed by it."""
        self._buffer += self._bytes.decode(chunk)
        documents: list[Any] = []
        while True:
            self._buffer = self._buffer.lstrip()
            if not self._buffer:
                break
            try:
                document, end = self._decoder.raw_decode(self._buffer)
            except json.JSONDecodeError:
                break  # incomplete document, wait for more input
            documents.append(document)
            self._buffer = self._buffer[end:]
        return documents


class WatchFetcher:
    """Runs one kubectl watch per subscription and tracks last-seen objects.

    ``kubectl --output-watch-events`` only carries the new object, so the
    previous version of each object is remembered to fill ``old_raw`` on
    updates. The watch process is restarted after it exits until the
    consuming task is cancelled.
    """

    _READ_CHUNK_SIZE = 65536
    _TERMINATE_TIMEOUT = 5.0
    _STDERR_TAIL_BYTES = 4096

    def __init__(
        self,
        build_command: Callable[[tuple[str, ...]], list[str]],
        *,
        restart_delay: float = WATCH_RESTART_DELAY,
        spawn: Callable[..., Awaitable[asyncio.subprocess.Process]] | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self._build_command = build_command
        self._restart_delay = restart_delay
        self._spawn = spawn or asyncio.create_subprocess_exec
        self._log = log or logger

    @staticmethod
    def build_watch_args(
        resource: str,
        *,
        namespace: str | None = None,
        label_selector: str | None = None,
    ) -> tuple[str, ...]:
        args: list[str] = ["get", resource]
        if namespace:
            args.extend(["-n", namespace])
        else:
            args.append("--all-namespaces")
        if label_selector:
            args.extend(["-l", label_selector])
        args.extend(["--watch", "--output-watch-events", "-o", "json"])
        return tuple(args)

    @staticmethod
    def _object_key(raw: Any) -> tuple[str, str] | None:
        if not isinstance(raw, dict):
            return None
        metadata = raw.get("metadata")
        if not isinstance(metadata, dict):
            return None
        return (str(metadata.get("namespace", "")), str(metadata.get("name", "")))

    @staticmethod
    def to_raw_event(
        kind: ResourceKind,
        document: Any,
        known: dict[tuple[str, str], Any],
    ) -> RawWatchEvent | None:
        """Convert one watch document, updating ``known`` in place."""
        if not isinstance(document, dict):
            return None
        verb = _WATCH_TYPE_VERBS.get(str(document.get("type", "")))
        if verb is None:
            return None
        raw = document.get("object")
        key = WatchFetcher._object_key(raw)
        if key is None:
            return RawWatchEvent(kind=kind, verb=verb, new_raw=raw)

        if verb is EventVerb.DELETE:
            known.pop(key, None)
            return RawWatchEvent(kind=kind, verb=verb, new_raw=raw)

        previous = known.get(key)
        known[key] = raw
        if previous is None:
            return RawWatchEvent(kind=kind, verb=EventVerb.CREATE, new_raw=raw)
        # Objects re-listed after a restart arrive as ADDED and become updates
        return RawWatchEvent(kind=kind, verb=EventVerb.UPDATE, new_raw=raw, old_raw=previous)

    async def _terminate(self, process: asyncio.subprocess.Process) -> None:
        if process.returncode is not None:
            return
        with suppress(ProcessLookupError):
            process.terminate()
        try:
            await asyncio.wait_for(process.wait(), timeout=self._TERMINATE_TIMEOUT)
        except asyncio.TimeoutError:
            with suppress(ProcessLookupError):
                process.kill()
            await process.wait()

    async def _drain_stderr(self, stream: asyncio.StreamReader, tail: bytearray) -> None:
        """Consume stderr as it is written, keeping only the last bytes."""
        while True:
            chunk = await stream.read(self._READ_CHUNK_SIZE)
            if not chunk:
                return
            tail.extend(chunk)
            del tail[: -self._STDERR_TAIL_BYTES]

    async def watch(
        self,
        kind: ResourceKind,
        resource: str,
        *,
        namespace: str | None = None,
        label_selector: str | None = None,
    ) -> AsyncGenerator[RawWatchEvent, None]:
        """Yield raw events for ``resource`` until cancelled."""
        args = self.build_watch_args(
            resource, namespace=namespace, label_selector=label_selector
        )
        cmd = self._build_command(args)
        known: dict[tuple[str, str], Any] = {}
        while True:
            self._log.info("Starting watch for %s (namespace=%s)", kind.value, namespace or "all")
            try:
                process = await self._spawn(
                    *cmd,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as exc:
                self._log.error(
                    "Cannot start watch for %s: %s; retrying in %.1fs",
                    kind.value,
                    exc,
                    self._restart_delay,
                )
                await asyncio.sleep(self._restart_delay)
                continue

            decoder = JsonStreamDecoder()
            stderr_tail = bytearray()
            drain: asyncio.Task[None] | None = None
            if process.stderr is not None:
                drain = asyncio.create_task(self._drain_stderr(process.stderr, stderr_tail))
            try:
                assert process.stdout is not None
                while True:
                    chunk = await process.stdout.read(self._READ_CHUNK_SIZE)
                    if not chunk:
                        break
                    for document in decoder.feed(chunk):
                        event = self.to_raw_event(kind, document, known)
                        if event is not None:
                            yield event
                await process.wait()
                if drain is not None:
                    await asyncio.wait({drain}, timeout=self._TERMINATE_TIMEOUT)
                self._log.warning(
                    "Watch for %s exited with code %s: %s; restarting in %.1fs",
                    kind.value,
                    process.returncode,
                    stderr_tail.decode("utf-8", errors="replace").strip() or "no output",
                    self._restart_delay,
                )
            finally:
                await self._terminate(process)
                if drain is not None and not drain.done():
                    drain.cancel()
            await asyncio.sleep(self._restart_delay)


async def follow_watch(
    subscribe: Callable[[], AsyncGenerator[RawWatchEvent, None]],
    handle: Callable[[RawWatchEvent], Awaitable[object] | object],
    *,
    name: str,
    restart_delay: float = WATCH_RESTART_DELAY,
    log: logging.Logger | None = None,
) -> None:
    """Feed every event of a subscription to ``handle``, resubscribing forever.

    A subscription that ends or fails is reopened after ``restart_delay``;
    only cancellation stops the loop.
    """
    log = log or logger
    while True:
        try:
            async with aclosing(subscribe()) as stream:
                async for raw_event in stream:
                    result = handle(raw_event)
                    if inspect.isawaitable(result):
                        await result
        except Exception as exc:
            log.error(
                "Watch stream %s failed: %s; resubscribing in %.1fs", name, exc, restart_delay
            )
        else:
            log.warning("Watch stream %s ended; resubscribing in %.1fs", name, restart_delay)
        await asyncio.sleep(restart_delay)
