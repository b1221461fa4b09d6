"""
Domain Layer Package

This package contains the core rules of the monitor: the realm model, the
checker port, realm expansion and report aggregation. It has no
dependencies on frameworks or network code.
"""

# Re-export submodules
from uptimer.domain import entities, ports, services

__all__ = ["entities", "ports", "services"]
