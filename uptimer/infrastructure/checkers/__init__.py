"""Checker implementations and the tag registry that resolves them."""

from .dummy import DummyChecker
from .errors import failure_from_os_error, failure_from_os_errors
from .http import HttpChecker
from .registry import CheckerFactory, CheckerRegistry, build_default_registry
from .tcp import TcpChecker

__all__ = [
    "CheckerFactory",
    "CheckerRegistry",
    "DummyChecker",
    "HttpChecker",
    "TcpChecker",
    "build_default_registry",
    "failure_from_os_error",
    "failure_from_os_errors",
]
