from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import pytest

from uptimer.domain.entities.errors import UnknownCheckerError
from uptimer.domain.entities.outcome import FailureKind, Outcome
from uptimer.domain.entities.realm import (
    Check,
    CheckerConfig,
    DummyCheckerConfig,
    Realm,
    Service,
    TcpCheckerConfig,
)

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class StaticOutcomeChecker:
    """Returns a configured outcome per host, success for unknown hosts."""

    def __init__(self, outcomes: Optional[Mapping[str, Outcome]] = None) -> None:
        self.outcomes = dict(outcomes or {})
        self.calls: List[str] = []

    async def check(self, host: str) -> Outcome:
        self.calls.append(host)
        return self.outcomes.get(host, Outcome.passed())


class SleepingChecker:
    """Sleeps ``delay`` seconds per call and tracks peak concurrency."""

    def __init__(self, delay: float) -> None:
        self.delay = delay
        self.in_flight = 0
        self.peak = 0
        self.completed: List[str] = []

    async def check(self, host: str) -> Outcome:
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        self.completed.append(host)
        return Outcome.passed()


class RaisingChecker:
    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    async def check(self, host: str) -> Outcome:
        raise self.exc


class FlakyChecker:
    """Fails with ``kind`` for the first ``failures`` calls, then succeeds."""

    def __init__(self, failures: int, kind: FailureKind = FailureKind.REFUSED) -> None:
        self.failures = failures
        self.kind = kind
        self.calls = 0

    async def check(self, host: str) -> Outcome:
        self.calls += 1
        if self.calls <= self.failures:
            return Outcome.failed(self.kind, "flaky failure")
        return Outcome.passed()


class StaticResolver:
    """Resolves each config tag to a fixed checker instance."""

    def __init__(self, checkers: Dict[str, Any]) -> None:
        self.checkers = checkers
        self.resolved: List[CheckerConfig] = []

    def resolve(self, config: CheckerConfig) -> Any:
        self.resolved.append(config)
        try:
            return self.checkers[config.tag]
        except KeyError:
            raise UnknownCheckerError(config.tag) from None


def make_service(
    name: str,
    hosts: List[str],
    checks: Optional[List[Check]] = None,
    **kwargs: Any,
) -> Service:
    if checks is None:
        checks = [Check(name="noop", checker=DummyCheckerConfig())]
    return Service(name=name, checks=tuple(checks), hosts=tuple(hosts), **kwargs)


@pytest.fixture()
def realm_document() -> Dict[str, Any]:
    return {
        "services": [
            {
                "name": "sn1",
                "description": "sd1",
                "tags": ["t1", "t2"],
                "checks": [
                    {"name": "cn1", "dummy": {}},
                    {"name": "cn2", "tcp": {"port": 22}},
                ],
                "hosts": ["localhost"],
            },
            {
                "name": "sn2",
                "description": "sd2",
                "tags": ["t1", "t2"],
                "checks": [{"name": "cn2", "tcp": {"port": 22}}],
                "hosts": ["localhost"],
            },
        ]
    }


@pytest.fixture()
def mixed_realm() -> Realm:
    return Realm(
        services=(
            make_service(
                "web",
                ["web-1", "web-2"],
                checks=[
                    Check(name="noop", checker=DummyCheckerConfig()),
                    Check(name="https", checker=TcpCheckerConfig(port=443)),
                ],
                description="Web tier",
                tags=("prod",),
            ),
            make_service("db", ["db-1"]),
        )
    )


@pytest.fixture()
def dummy_resolver() -> StaticResolver:
    checker = StaticOutcomeChecker()
    return StaticResolver({"dummy": checker, "tcp": checker, "http": checker})
