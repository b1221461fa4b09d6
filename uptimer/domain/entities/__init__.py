"""
Domain Entities Package

This package contains the realm configuration model, work items, outcomes
and the aggregated report.
"""

from .errors import (
    ConfigurationError,
    DomainError,
    EngineSetupError,
    UnknownCheckerError,
)
from .outcome import FailureKind, Outcome
from .realm import (
    Check,
    CheckerConfig,
    DummyCheckerConfig,
    HttpCheckerConfig,
    Realm,
    Service,
    TcpCheckerConfig,
)
from .report import (
    CheckReport,
    FailingTriple,
    HealthStatus,
    HostResult,
    Report,
    ReportSummary,
    ServiceReport,
)
from .work_item import WorkItem

__all__ = [
    "Realm",
    "Service",
    "Check",
    "CheckerConfig",
    "DummyCheckerConfig",
    "TcpCheckerConfig",
    "HttpCheckerConfig",
    "WorkItem",
    "Outcome",
    "FailureKind",
    "Report",
    "ReportSummary",
    "ServiceReport",
    "CheckReport",
    "HostResult",
    "FailingTriple",
    "HealthStatus",
    "DomainError",
    "ConfigurationError",
    "EngineSetupError",
    "UnknownCheckerError",
]
