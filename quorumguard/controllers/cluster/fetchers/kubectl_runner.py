"""kubectl runner - executes kubectl commands for the resource store."""

from __future__ import annotations

import asyncio
import logging
import subprocess

from quorumguard.constants.timeouts import (
    CLUSTER_REQUEST_TIMEOUT,
    KUBECTL_COMMAND_TIMEOUT,
)
from quorumguard.exceptions import KubectlError

logger = logging.getLogger(__name__)


class KubectlRunner:
    """Runs kubectl with an optional context and bounded timeouts."""

    def __init__(
        self,
        context: str | None = None,
        *,
        request_timeout: str = CLUSTER_REQUEST_TIMEOUT,
        command_timeout: int = KUBECTL_COMMAND_TIMEOUT,
        log: logging.Logger | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            context: Optional Kubernetes context name.
            request_timeout: Value passed to ``--request-timeout``.
            command_timeout: Process-level timeout in seconds.
            log: Logger overriding the module logger.
        """
        self.context = context
        self.request_timeout = request_timeout
        self.command_timeout = command_timeout
        self._log = log or logger

    def build_command(self, args: tuple[str, ...]) -> list[str]:
        cmd = ["kubectl"]
        if self.context:
            cmd.extend(["--context", self.context])
        cmd.extend(args)
        return cmd

    def run_sync(self, args: tuple[str, ...], input_text: str | None = None) -> str:
        """Run a kubectl command synchronously (thread-safe wrapper target)."""
        cmd = self.build_command(args)
        try:
            result = subprocess.run(
                cmd,
                input=input_text,
                capture_output=True,
                text=True,
                timeout=self.command_timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise KubectlError(
                f"kubectl timed out after {self.command_timeout}s", cause=exc, args=args
            ) from exc
        except OSError as exc:
            raise KubectlError(str(exc), cause=exc, args=args) from exc

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            cause = subprocess.CalledProcessError(
                result.returncode, cmd, output=result.stdout, stderr=result.stderr
            )
            raise KubectlError(stderr, cause=cause, args=args) from cause
        return result.stdout

    async def run(self, args: tuple[str, ...], input_text: str | None = None) -> str:
        self._log.debug("Running kubectl %s", " ".join(args))
        return await asyncio.to_thread(self.run_sync, args, input_text)
