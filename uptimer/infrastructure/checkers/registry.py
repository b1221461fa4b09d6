"""Tag to checker factory table."""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from uptimer.domain.entities.errors import UnknownCheckerError
from uptimer.domain.entities.realm import (
    CheckerConfig,
    DummyCheckerConfig,
    HttpCheckerConfig,
    TcpCheckerConfig,
)
from uptimer.domain.ports.checker import IChecker, ICheckerResolver
from uptimer.infrastructure.checkers.dummy import DummyChecker
from uptimer.infrastructure.checkers.http import HttpChecker
from uptimer.infrastructure.checkers.tcp import TcpChecker
from uptimer.shared.consts import DEFAULT_HTTP_TIMEOUT_S

CheckerFactory = Callable[[Any], IChecker]


class CheckerRegistry(ICheckerResolver):
    """Resolve checker configurations to checker instances by tag.

    Adding a checker variant means registering a factory for its tag; the
    execution engine never needs to change.
    """

    def __init__(
        self, factories: Optional[Mapping[str, CheckerFactory]] = None
    ) -> None:
        self._factories: Dict[str, CheckerFactory] = dict(factories or {})

    @property
    def tags(self) -> Tuple[str, ...]:
        return tuple(sorted(self._factories))

    def register(self, tag: str, factory: CheckerFactory) -> None:
        if not tag:
            raise ValueError("Checker tag must not be empty")
        self._factories[tag] = factory

    def resolve(self, config: CheckerConfig) -> IChecker:
        factory = self._factories.get(config.tag)
        if factory is None:
            raise UnknownCheckerError(
                config.tag or type(config).__name__,
                details={"registered": list(self.tags)},
            )
        return factory(config)


def build_default_registry(
    *,
    http_timeout: float = DEFAULT_HTTP_TIMEOUT_S,
    http_verify_tls: bool = True,
) -> CheckerRegistry:
    """Registry with every checker shipped by the package."""

    def _dummy(config: DummyCheckerConfig) -> IChecker:
        return DummyChecker()

    def _tcp(config: TcpCheckerConfig) -> IChecker:
        return TcpChecker(port=config.port)

    def _http(config: HttpCheckerConfig) -> IChecker:
        return HttpChecker(
            port=config.port,
            path=config.path,
            scheme=config.scheme,
            expected_status=config.expected_status,
            timeout=http_timeout,
            verify=http_verify_tls,
        )

    return CheckerRegistry(
        {
            DummyCheckerConfig.tag: _dummy,
            TcpCheckerConfig.tag: _tcp,
            HttpCheckerConfig.tag: _http,
        }
    )
