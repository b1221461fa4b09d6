"""Domain services: realm expansion and report aggregation."""

from .aggregation import build_report, status_for
from .expansion import expand_realm

__all__ = ["build_report", "expand_realm", "status_for"]
