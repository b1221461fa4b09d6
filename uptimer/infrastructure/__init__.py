"""
Infrastructure Layer Package

This package contains implementations of interfaces defined in the
domain layer: the network checkers and the execution engine that
dispatches them.
"""

from uptimer.infrastructure import checkers, services

__all__ = ["checkers", "services"]
