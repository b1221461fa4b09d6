"""
Report domain entities.

This module defines the immutable value objects produced by aggregating the
outcomes of one execution pass: per-host results grouped per check and per
service, plus a realm-wide summary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Tuple

from uptimer.domain.entities.outcome import FailureKind, Outcome


class HealthStatus(str, Enum):
    """Roll-up availability for a check, a service or the realm."""

    UP = "up"
    DEGRADED = "degraded"
    DOWN = "down"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class HostResult:
    """Outcome of one check against one host."""

    host: str
    outcome: Outcome


@dataclass(frozen=True, slots=True)
class CheckReport:
    """Results of one check across every host of its service."""

    name: str
    checker: str
    status: HealthStatus
    hosts: Tuple[HostResult, ...] = ()

    def outcomes_for(self, host: str) -> List[Outcome]:
        """Return every outcome recorded for ``host``, in host order."""
        return [result.outcome for result in self.hosts if result.host == host]


@dataclass(frozen=True, slots=True)
class ServiceReport:
    """Results for one service; ``position`` is its index in the realm."""

    name: str
    position: int
    status: HealthStatus
    checks: Tuple[CheckReport, ...] = ()
    description: Optional[str] = None
    tags: Optional[Tuple[str, ...]] = None

    def check(self, name: str) -> Optional[CheckReport]:
        for check in self.checks:
            if check.name == name:
                return check
        return None


@dataclass(frozen=True, slots=True)
class FailingTriple:
    """A (service, check, host) triple whose probe failed."""

    service: str
    check: str
    host: str
    reason: str
    kind: Optional[FailureKind] = None


@dataclass(frozen=True, slots=True)
class ReportSummary:
    """Realm-wide counts and the ordered list of failures."""

    total: int = 0
    successes: int = 0
    failures: int = 0
    cancelled: int = 0
    failing: Tuple[FailingTriple, ...] = ()


@dataclass(frozen=True, slots=True)
class Report:
    """Aggregated view of all outcomes for one execution pass."""

    status: HealthStatus
    services: Tuple[ServiceReport, ...] = ()
    summary: ReportSummary = field(default_factory=ReportSummary)
    duplicate_service_names: Tuple[str, ...] = ()
    duplicate_hosts: Tuple[Tuple[str, str], ...] = ()
    cancelled: bool = False
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def healthy(self) -> bool:
        return self.summary.failures == 0

    def services_named(self, name: str) -> List[ServiceReport]:
        """Return every service group called ``name``, in realm order."""
        return [service for service in self.services if service.name == name]

    def outcome(self, service: str, check: str, host: str) -> Optional[Outcome]:
        """Return the first outcome recorded for the given triple."""
        for service_report in self.services_named(service):
            check_report = service_report.check(check)
            if check_report is None:
                continue
            outcomes = check_report.outcomes_for(host)
            if outcomes:
                return outcomes[0]
        return None
