"""
Domain Errors

This module defines custom error classes for domain-specific exceptions.
Probe failures are never raised; they are reported as outcomes.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for domain errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(DomainError):
    """Raised when a realm document cannot be turned into a Realm."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)

    @property
    def errors(self) -> list:
        return list(self.details.get("errors", []))


class EngineSetupError(DomainError):
    """Raised when the execution engine cannot start a run."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class UnknownCheckerError(EngineSetupError):
    """Raised when no checker implementation is registered for a tag."""

    def __init__(self, tag: str, details: Optional[Dict[str, Any]] = None):
        message = f"No checker registered for tag '{tag}'"
        super().__init__(message, {"tag": tag, **(details or {})})
        self.tag = tag
