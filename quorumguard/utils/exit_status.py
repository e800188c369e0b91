"""Exit status extraction for failed command invocations.

Failures are first tagged with one of the ``ExitErrorKind`` shapes the
command layer can produce; the status is then looked up per tag. A failure
that matches no shape yields ``UNKNOWN_EXIT_STATUS``, which callers treat as
"transience unclear" rather than success or hard failure.
"""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from typing import NamedTuple, cast

from quorumguard.constants.enums import ExitErrorKind
from quorumguard.constants.limits import MAX_ERROR_UNWRAP_DEPTH
from quorumguard.exceptions import (
    CodedExitError,
    KubectlError,
    TransientStoreError,
)


class ExitStatus(NamedTuple):
    """Exit code and whether it could be determined."""

    code: int
    known: bool


UNKNOWN_EXIT_STATUS = ExitStatus(0, False)

_TRANSIENT_ERROR_TOKENS = (
    "timed out",
    "timeout",
    "deadline exceeded",
    "i/o timeout",
    "connection refused",
    "connection reset by peer",
    "transport is closing",
    "unable to connect to the server",
    "too many requests",
    "the object has been modified",
    "tls handshake",
)


def error_kind(error: BaseException | None) -> ExitErrorKind:
    """Tag an error with the failure shape it represents."""
    if isinstance(error, subprocess.CalledProcessError):
        return ExitErrorKind.PROCESS_EXIT
    if isinstance(error, CodedExitError):
        return ExitErrorKind.CODED_EXIT
    if isinstance(error, KubectlError):
        return ExitErrorKind.TOOL_WRAPPER
    if isinstance(error, OSError) and error.errno is not None:
        return ExitErrorKind.OS_ERRNO
    return ExitErrorKind.UNRECOGNISED


def _process_exit_status(error: subprocess.CalledProcessError) -> int:
    # Negative return codes mean the process was killed by a signal and never exited.
    return error.returncode if error.returncode >= 0 else -1


_DIRECT_STATUS: dict[ExitErrorKind, Callable[..., int]] = {
    ExitErrorKind.PROCESS_EXIT: _process_exit_status,
    ExitErrorKind.CODED_EXIT: lambda error: int(error.code),
    ExitErrorKind.OS_ERRNO: lambda error: int(error.errno),
}


def exit_status(error: BaseException | None) -> ExitStatus:
    """Return the exit status carried by ``error``.

    Tool wrappers are unwrapped through their ``cause`` until a shape with a
    status is reached. Never raises.
    """
    current = error
    for _ in range(MAX_ERROR_UNWRAP_DEPTH):
        kind = error_kind(current)
        if kind is ExitErrorKind.TOOL_WRAPPER:
            current = cast(KubectlError, current).cause
            continue
        extractor = _DIRECT_STATUS.get(kind)
        if extractor is None:
            return UNKNOWN_EXIT_STATUS
        try:
            return ExitStatus(extractor(current), True)
        except (TypeError, ValueError):
            return UNKNOWN_EXIT_STATUS
    return UNKNOWN_EXIT_STATUS


def is_transient_error(error: BaseException) -> bool:
    """Return True when a store or command failure is worth retrying later."""
    if isinstance(error, (TransientStoreError, subprocess.TimeoutExpired)):
        return True
    if isinstance(error, KubectlError) and isinstance(error.cause, subprocess.TimeoutExpired):
        return True
    message = str(error).lower()
    return any(token in message for token in _TRANSIENT_ERROR_TOKENS)


__all__ = [
    "UNKNOWN_EXIT_STATUS",
    "ExitStatus",
    "error_kind",
    "exit_status",
    "is_transient_error",
]
