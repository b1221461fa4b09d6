"""Outcome of probing one host with one checker."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class FailureKind(str, Enum):
    """Machine readable family of a probe failure."""

    RESOLUTION = "resolution"
    REFUSED = "refused"
    UNREACHABLE = "unreachable"
    TIMEOUT = "timeout"
    IO = "io"
    HTTP_STATUS = "http_status"
    INTERNAL = "internal"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class Outcome:
    """Success, or failure with a human readable reason."""

    success: bool
    reason: Optional[str] = None
    kind: Optional[FailureKind] = None
    latency_ms: Optional[float] = None
    attempts: int = 1
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def passed(cls) -> "Outcome":
        return cls(success=True)

    @classmethod
    def failed(cls, kind: FailureKind, reason: str) -> "Outcome":
        return cls(success=False, reason=reason, kind=kind)

    @property
    def retryable(self) -> bool:
        return not self.success and self.kind not in (
            FailureKind.INTERNAL,
            FailureKind.CANCELLED,
        )
