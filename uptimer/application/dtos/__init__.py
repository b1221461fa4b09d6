"""
DTOs Package - Application Layer

This package contains Data Transfer Objects (DTOs) used to validate
configuration documents and to serialize execution reports.
"""

from .realm_dto import (
    CheckDTO,
    DummyCheckerDTO,
    HttpCheckerDTO,
    RealmDTO,
    ServiceDTO,
    TcpCheckerDTO,
)
from .report_dto import (
    CheckReportDTO,
    FailingTripleDTO,
    HostResultDTO,
    ReportDTO,
    ReportSummaryDTO,
    ServiceReportDTO,
)

__all__ = [
    "RealmDTO",
    "ServiceDTO",
    "CheckDTO",
    "DummyCheckerDTO",
    "TcpCheckerDTO",
    "HttpCheckerDTO",
    "ReportDTO",
    "ReportSummaryDTO",
    "ServiceReportDTO",
    "CheckReportDTO",
    "HostResultDTO",
    "FailingTripleDTO",
]
