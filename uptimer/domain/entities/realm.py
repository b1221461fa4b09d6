"""
Realm domain entities.

A realm is the declarative description of everything to monitor: services,
the checks each service requires and the hosts those checks run against.
These value objects carry no behaviour beyond basic invariants.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Optional, Tuple

from uptimer.domain.entities.errors import ConfigurationError

MAX_PORT = 65535


@dataclass(frozen=True, slots=True)
class CheckerConfig:
    """Base for checker configurations; ``tag`` is the document discriminator."""

    tag: ClassVar[str] = ""


@dataclass(frozen=True, slots=True)
class DummyCheckerConfig(CheckerConfig):
    """Checker that always succeeds."""

    tag: ClassVar[str] = "dummy"


@dataclass(frozen=True, slots=True)
class TcpCheckerConfig(CheckerConfig):
    """Checker that opens a TCP connection to ``port`` on each host."""

    tag: ClassVar[str] = "tcp"

    port: int

    def __post_init__(self) -> None:
        _validate_port(self.port)


@dataclass(frozen=True, slots=True)
class HttpCheckerConfig(CheckerConfig):
    """Checker that issues a single HTTP GET against each host."""

    tag: ClassVar[str] = "http"

    port: Optional[int] = None
    path: str = "/"
    scheme: str = "http"
    expected_status: Optional[int] = None

    def __post_init__(self) -> None:
        if self.port is not None:
            _validate_port(self.port)
        if self.scheme not in ("http", "https"):
            raise ConfigurationError(
                f"Unsupported HTTP scheme '{self.scheme}'",
                details={"scheme": self.scheme},
            )


def _validate_port(port: int) -> None:
    if not 0 <= port <= MAX_PORT:
        raise ConfigurationError(
            f"Port {port} is outside the range 0-{MAX_PORT}",
            details={"port": port},
        )


@dataclass(frozen=True, slots=True)
class Check:
    """A named binding of one checker configuration to a service."""

    name: str
    checker: CheckerConfig


@dataclass(frozen=True, slots=True)
class Service:
    """A service to monitor, composed of checks run against every host."""

    name: str
    checks: Tuple[Check, ...] = ()
    hosts: Tuple[str, ...] = ()
    description: Optional[str] = None
    tags: Optional[Tuple[str, ...]] = None

    @property
    def work_item_count(self) -> int:
        return len(self.checks) * len(self.hosts)


@dataclass(frozen=True, slots=True)
class Realm:
    """Top level holder of all monitored services."""

    services: Tuple[Service, ...] = field(default_factory=tuple)

    @property
    def work_item_count(self) -> int:
        return sum(service.work_item_count for service in self.services)
