"""Translation of socket level errors into failure outcomes."""

from __future__ import annotations

import errno
import socket
from typing import Optional, Sequence

from uptimer.domain.entities.outcome import FailureKind, Outcome

_UNREACHABLE_ERRNOS = {
    errno.ENETUNREACH,
    errno.EHOSTUNREACH,
    errno.ENETDOWN,
    errno.EHOSTDOWN,
}

# When several addresses fail, the first family in this order wins.
_KIND_PRECEDENCE = (
    FailureKind.REFUSED,
    FailureKind.TIMEOUT,
    FailureKind.UNREACHABLE,
    FailureKind.RESOLUTION,
    FailureKind.IO,
)


def failure_from_os_error(exc: OSError) -> Outcome:
    """Classify a connect error into one of the probe failure families."""

    if isinstance(exc, socket.gaierror):
        return Outcome.failed(
            FailureKind.RESOLUTION, f"address resolution failed: {_describe(exc)}"
        )
    if isinstance(exc, ConnectionRefusedError):
        return Outcome.failed(FailureKind.REFUSED, "connection refused")
    if isinstance(exc, TimeoutError):
        return Outcome.failed(FailureKind.TIMEOUT, "connection timed out")
    if exc.errno in _UNREACHABLE_ERRNOS:
        return Outcome.failed(
            FailureKind.UNREACHABLE, f"host unreachable: {_describe(exc)}"
        )
    return Outcome.failed(FailureKind.IO, f"I/O error: {_describe(exc)}")


def failure_from_os_errors(errors: Sequence[OSError]) -> Outcome:
    """Classify the connect errors of every address a host resolved to."""

    if not errors:
        return Outcome.failed(FailureKind.IO, "I/O error: no connection attempted")

    outcomes = [failure_from_os_error(exc) for exc in errors]
    for kind in _KIND_PRECEDENCE:
        for outcome in outcomes:
            if outcome.kind is kind:
                return outcome
    return outcomes[0]


def find_os_error(exc: BaseException) -> Optional[OSError]:
    """Walk the ``__cause__``/``__context__`` chain for the originating OSError.

    An error carrying an errno is preferred over a generic wrapper OSError.
    """

    first: Optional[OSError] = None
    current: Optional[BaseException] = exc
    seen = set()
    while current is not None and id(current) not in seen:
        if isinstance(current, OSError):
            if current.errno is not None or isinstance(current, socket.gaierror):
                return current
            first = first or current
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return first


def _describe(exc: OSError) -> str:
    return exc.strerror or str(exc) or exc.__class__.__name__
