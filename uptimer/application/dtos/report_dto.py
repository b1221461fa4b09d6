"""DTOs for serializing execution reports."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from uptimer.domain.entities.outcome import FailureKind
from uptimer.domain.entities.report import (
    CheckReport,
    FailingTriple,
    HealthStatus,
    HostResult,
    Report,
    ReportSummary,
    ServiceReport,
)


class HostResultDTO(BaseModel):
    """Outcome of one check against one host."""

    host: str = Field(description="Host the check ran against")
    success: bool = Field(description="Whether the probe succeeded")
    reason: Optional[str] = Field(default=None, description="Failure reason")
    kind: Optional[FailureKind] = Field(default=None, description="Failure family")
    latency_ms: Optional[float] = Field(
        default=None, description="Probe duration in milliseconds"
    )
    attempts: int = Field(default=1, description="Number of probe attempts")
    checked_at: datetime = Field(description="Timestamp of the last attempt")

    @classmethod
    def from_domain(cls, result: HostResult) -> "HostResultDTO":
        outcome = result.outcome
        return cls(
            host=result.host,
            success=outcome.success,
            reason=outcome.reason,
            kind=outcome.kind,
            latency_ms=outcome.latency_ms,
            attempts=outcome.attempts,
            checked_at=outcome.checked_at,
        )


class CheckReportDTO(BaseModel):
    name: str
    checker: str
    status: HealthStatus
    hosts: List[HostResultDTO] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, check: CheckReport) -> "CheckReportDTO":
        return cls(
            name=check.name,
            checker=check.checker,
            status=check.status,
            hosts=[HostResultDTO.from_domain(result) for result in check.hosts],
        )


class ServiceReportDTO(BaseModel):
    name: str
    position: int = Field(description="Index of the service in the realm")
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    status: HealthStatus
    checks: List[CheckReportDTO] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, service: ServiceReport) -> "ServiceReportDTO":
        return cls(
            name=service.name,
            position=service.position,
            description=service.description,
            tags=list(service.tags) if service.tags is not None else None,
            status=service.status,
            checks=[CheckReportDTO.from_domain(check) for check in service.checks],
        )


class FailingTripleDTO(BaseModel):
    service: str
    check: str
    host: str
    reason: str
    kind: Optional[FailureKind] = None

    @classmethod
    def from_domain(cls, failure: FailingTriple) -> "FailingTripleDTO":
        return cls(
            service=failure.service,
            check=failure.check,
            host=failure.host,
            reason=failure.reason,
            kind=failure.kind,
        )


class ReportSummaryDTO(BaseModel):
    total: int
    successes: int
    failures: int
    cancelled: int = 0
    failing: List[FailingTripleDTO] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, summary: ReportSummary) -> "ReportSummaryDTO":
        return cls(
            total=summary.total,
            successes=summary.successes,
            failures=summary.failures,
            cancelled=summary.cancelled,
            failing=[FailingTripleDTO.from_domain(item) for item in summary.failing],
        )


class DuplicateHostDTO(BaseModel):
    service: str
    host: str


class ReportDTO(BaseModel):
    """Serializable representation of one execution pass."""

    status: HealthStatus = Field(description="Overall realm status")
    cancelled: bool = Field(default=False, description="Run was aborted")
    started_at: datetime
    finished_at: datetime
    summary: ReportSummaryDTO
    services: List[ServiceReportDTO] = Field(default_factory=list)
    duplicate_service_names: List[str] = Field(
        default_factory=list, description="Service names used more than once"
    )
    duplicate_hosts: List[DuplicateHostDTO] = Field(
        default_factory=list, description="Hosts listed more than once by a service"
    )

    @classmethod
    def from_domain(cls, report: Report) -> "ReportDTO":
        return cls(
            status=report.status,
            cancelled=report.cancelled,
            started_at=report.started_at,
            finished_at=report.finished_at,
            summary=ReportSummaryDTO.from_domain(report.summary),
            services=[ServiceReportDTO.from_domain(s) for s in report.services],
            duplicate_service_names=list(report.duplicate_service_names),
            duplicate_hosts=[
                DuplicateHostDTO(service=service, host=host)
                for service, host in report.duplicate_hosts
            ],
        )

    model_config = {
        "json_schema_extra": {
            "example": {
                "status": "degraded",
                "cancelled": False,
                "started_at": "2024-09-09T12:00:00Z",
                "finished_at": "2024-09-09T12:00:01Z",
                "summary": {
                    "total": 2,
                    "successes": 1,
                    "failures": 1,
                    "cancelled": 0,
                    "failing": [
                        {
                            "service": "web",
                            "check": "reachability",
                            "host": "web-2",
                            "reason": "connection refused",
                            "kind": "refused",
                        }
                    ],
                },
                "services": [],
                "duplicate_service_names": [],
                "duplicate_hosts": [],
            }
        }
    }
