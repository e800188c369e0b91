"""Exception types raised by the resource store and the kubectl runner."""

from __future__ import annotations


class ResourceStoreError(Exception):
    """Base exception for resource store failures."""


class NotFoundError(ResourceStoreError):
    """Raised when a requested resource does not exist."""

    def __init__(self, kind: str, namespace: str, name: str) -> None:
        super().__init__(f"{kind} {namespace}/{name} not found")
        self.kind = kind
        self.namespace = namespace
        self.name = name


class TransientStoreError(ResourceStoreError):
    """Raised for timeouts, conflicts and connectivity failures worth retrying."""


class ConflictError(TransientStoreError):
    """Raised when a write races with another writer."""


class CodedExitError(Exception):
    """A command failure carrying an explicit numeric exit code."""

    def __init__(self, code: int, message: str = "") -> None:
        super().__init__(message or f"command exited with code {code}")
        self.code = code


class KubectlError(Exception):
    """Wrapper for a failed kubectl invocation.

    The message is the command's stderr; ``cause`` holds the underlying
    failure (process exit, timeout, OS error or another wrapper).
    """

    def __init__(
        self,
        stderr: str,
        *,
        cause: BaseException | None = None,
        args: tuple[str, ...] = (),
    ) -> None:
        super().__init__(stderr or "kubectl command failed")
        self.stderr = stderr
        self.cause = cause
        self.command_args = args


__all__ = [
    "CodedExitError",
    "ConflictError",
    "KubectlError",
    "NotFoundError",
    "ResourceStoreError",
    "TransientStoreError",
]
