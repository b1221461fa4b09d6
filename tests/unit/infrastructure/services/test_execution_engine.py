from __future__ import annotations

import asyncio
import time

import pytest

from uptimer.domain.entities.errors import EngineSetupError, UnknownCheckerError
from uptimer.domain.entities.outcome import FailureKind, Outcome
from uptimer.domain.entities.realm import Check, Realm, TcpCheckerConfig
from uptimer.domain.entities.report import HealthStatus
from uptimer.infrastructure.checkers.tcp import TcpChecker
from uptimer.infrastructure.services.execution_engine import (
    ExecutionEngine,
    default_max_concurrency,
    run_realm,
)
from tests.conftest import (
    FlakyChecker,
    RaisingChecker,
    SleepingChecker,
    StaticOutcomeChecker,
    StaticResolver,
    make_service,
)


def _realm_with_hosts(count: int) -> Realm:
    return Realm(services=(make_service("svc", [f"h{i}" for i in range(count)]),))


def _engine(checker, **kwargs) -> ExecutionEngine:
    return ExecutionEngine(StaticResolver({"dummy": checker, "tcp": checker}), **kwargs)


def test_default_concurrency_is_bounded() -> None:
    assert 1 <= default_max_concurrency() <= 64


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_concurrency": 0},
        {"check_timeout": 0},
        {"check_timeout": -1.0},
        {"check_timeout": float("nan")},
        {"check_timeout": float("inf")},
        {"retries": -1},
        {"retry_backoff": -0.1},
        {"retry_backoff": float("nan")},
    ],
)
def test_invalid_parameters_raise_setup_error(kwargs) -> None:
    with pytest.raises(EngineSetupError):
        _engine(StaticOutcomeChecker(), **kwargs)


@pytest.mark.asyncio
async def test_one_outcome_per_work_item(mixed_realm) -> None:
    checker = StaticOutcomeChecker(
        {"web-2": Outcome.failed(FailureKind.REFUSED, "connection refused")}
    )

    report = await _engine(checker).run(mixed_realm)

    assert report.summary.total == mixed_realm.work_item_count == 5
    assert report.summary.successes == 3
    assert report.summary.failures == 2
    assert report.status is HealthStatus.DEGRADED
    assert sorted(checker.calls) == sorted(["web-1", "web-2"] * 2 + ["db-1"])
    assert report.started_at <= report.finished_at


@pytest.mark.asyncio
async def test_outcomes_are_stamped(mixed_realm) -> None:
    report = await _engine(StaticOutcomeChecker()).run(mixed_realm)

    outcome = report.outcome("web", "https", "web-2")
    assert outcome.latency_ms is not None and outcome.latency_ms >= 0
    assert outcome.attempts == 1


@pytest.mark.asyncio
async def test_empty_realm_produces_empty_report() -> None:
    report = await _engine(StaticOutcomeChecker()).run(Realm())

    assert report.summary.total == 0
    assert report.services == ()


@pytest.mark.asyncio
async def test_raising_checker_is_isolated() -> None:
    realm = Realm(
        services=(
            make_service("bad", ["a", "b"]),
            make_service(
                "good", ["c"], checks=[Check(name="port", checker=TcpCheckerConfig(1))]
            ),
        )
    )
    engine = ExecutionEngine(
        StaticResolver(
            {
                "dummy": RaisingChecker(RuntimeError("boom")),
                "tcp": StaticOutcomeChecker(),
            }
        )
    )

    report = await engine.run(realm)

    assert report.summary.total == 3
    failure = report.outcome("bad", "noop", "a")
    assert failure.kind is FailureKind.INTERNAL
    assert failure.reason == "internal checker error: RuntimeError: boom"
    assert report.outcome("good", "port", "c").success is True


class _SelfCancellingChecker:
    """Raises CancelledError from inside the checker for host ``bad``."""

    async def check(self, host: str) -> Outcome:
        if host == "bad":
            raise asyncio.CancelledError()
        return Outcome.passed()


@pytest.mark.asyncio
@pytest.mark.parametrize("with_cancel_event", [False, True])
async def test_checker_raising_cancelled_error_is_isolated(with_cancel_event) -> None:
    realm = Realm(services=(make_service("svc", ["a", "bad", "c"]),))
    cancel_event = asyncio.Event() if with_cancel_event else None

    report = await _engine(_SelfCancellingChecker()).run(
        realm, cancel_event=cancel_event
    )

    assert report.cancelled is False
    assert report.summary.total == 3
    assert report.summary.successes == 2
    failure = report.outcome("svc", "noop", "bad")
    assert failure.kind is FailureKind.INTERNAL
    assert failure.reason == "internal checker error: CancelledError"


@pytest.mark.asyncio
async def test_slow_checks_time_out() -> None:
    engine = _engine(SleepingChecker(delay=5), check_timeout=0.05)

    started = time.perf_counter()
    report = await engine.run(_realm_with_hosts(3))
    elapsed = time.perf_counter() - started

    assert elapsed < 2
    assert report.summary.failures == 3
    outcome = report.outcome("svc", "noop", "h0")
    assert outcome.kind is FailureKind.TIMEOUT
    assert outcome.reason == "timed out after 0.05s"


@pytest.mark.asyncio
async def test_hanging_tcp_connect_times_out(monkeypatch) -> None:
    async def _hang(sock, address):
        await asyncio.sleep(10)

    monkeypatch.setattr(asyncio.get_running_loop(), "sock_connect", _hang)
    engine = ExecutionEngine(
        StaticResolver({"dummy": TcpChecker(port=9)}), check_timeout=0.05
    )
    realm = Realm(services=(make_service("svc", ["192.0.2.1"]),))

    started = time.perf_counter()
    report = await engine.run(realm)
    elapsed = time.perf_counter() - started

    assert elapsed < 2
    assert report.outcome("svc", "noop", "192.0.2.1").kind is FailureKind.TIMEOUT


@pytest.mark.asyncio
async def test_concurrency_limit_of_one_serializes_checks() -> None:
    checker = SleepingChecker(delay=0.05)

    started = time.perf_counter()
    await _engine(checker, max_concurrency=1).run(_realm_with_hosts(4))
    elapsed = time.perf_counter() - started

    assert checker.peak == 1
    assert elapsed >= 4 * 0.05 * 0.9


@pytest.mark.asyncio
async def test_checks_run_concurrently_up_to_the_limit() -> None:
    checker = SleepingChecker(delay=0.2)

    started = time.perf_counter()
    await _engine(checker, max_concurrency=4).run(_realm_with_hosts(4))
    elapsed = time.perf_counter() - started

    assert checker.peak == 4
    assert elapsed < 4 * 0.2


@pytest.mark.asyncio
async def test_concurrency_never_exceeds_the_limit() -> None:
    checker = SleepingChecker(delay=0.01)

    report = await _engine(checker, max_concurrency=3).run(_realm_with_hosts(20))

    assert checker.peak == 3
    assert report.summary.successes == 20


@pytest.mark.asyncio
async def test_cancel_event_abandons_in_flight_checks() -> None:
    fast = StaticOutcomeChecker()
    slow = SleepingChecker(delay=10)
    realm = Realm(
        services=(
            make_service("fast", ["a"]),
            make_service(
                "slow",
                ["b", "c"],
                checks=[Check(name="p", checker=TcpCheckerConfig(1))],
            ),
        )
    )
    engine = ExecutionEngine(StaticResolver({"dummy": fast, "tcp": slow}))
    cancel_event = asyncio.Event()
    asyncio.get_running_loop().call_later(0.1, cancel_event.set)

    started = time.perf_counter()
    report = await engine.run(realm, cancel_event=cancel_event)

    assert time.perf_counter() - started < 2
    assert report.cancelled is True
    assert report.summary.total == 3
    assert report.summary.cancelled == 2
    assert report.outcome("fast", "noop", "a").success is True
    assert report.outcome("slow", "p", "b").kind is FailureKind.CANCELLED


@pytest.mark.asyncio
async def test_unset_cancel_event_has_no_effect(mixed_realm) -> None:
    report = await _engine(StaticOutcomeChecker()).run(
        mixed_realm, cancel_event=asyncio.Event()
    )

    assert report.cancelled is False
    assert report.summary.successes == 5


@pytest.mark.asyncio
async def test_unknown_checker_fails_before_probing() -> None:
    checker = StaticOutcomeChecker()
    engine = ExecutionEngine(StaticResolver({"tcp": checker}))

    with pytest.raises(UnknownCheckerError):
        await engine.run(_realm_with_hosts(2))

    assert checker.calls == []


@pytest.mark.asyncio
async def test_retries_recover_transient_failures() -> None:
    checker = FlakyChecker(failures=2)
    engine = _engine(checker, retries=2, retry_backoff=0)

    report = await engine.run(_realm_with_hosts(1))

    outcome = report.outcome("svc", "noop", "h0")
    assert outcome.success is True
    assert outcome.attempts == 3
    assert checker.calls == 3


@pytest.mark.asyncio
async def test_retries_are_bounded() -> None:
    checker = FlakyChecker(failures=5)
    engine = _engine(checker, retries=1, retry_backoff=0)

    report = await engine.run(_realm_with_hosts(1))

    outcome = report.outcome("svc", "noop", "h0")
    assert outcome.success is False
    assert outcome.attempts == 2
    assert checker.calls == 2


@pytest.mark.asyncio
async def test_internal_errors_are_not_retried() -> None:
    checker = FlakyChecker(failures=5, kind=FailureKind.INTERNAL)

    await _engine(checker, retries=3, retry_backoff=0).run(_realm_with_hosts(1))

    assert checker.calls == 1


@pytest.mark.asyncio
async def test_run_realm_helper(mixed_realm, dummy_resolver) -> None:
    report = await run_realm(mixed_realm, dummy_resolver, max_concurrency=2)

    assert report.summary.total == 5
    assert report.healthy


def _shape(report):
    return (
        report.status,
        [
            (
                service.name,
                service.position,
                [
                    (check.name, [(r.host, r.outcome.success) for r in check.hosts])
                    for check in service.checks
                ],
            )
            for service in report.services
        ],
        [(f.service, f.check, f.host, f.reason) for f in report.summary.failing],
    )


@pytest.mark.asyncio
async def test_repeated_runs_produce_the_same_report_shape(mixed_realm) -> None:
    checker = StaticOutcomeChecker(
        {
            "web-2": Outcome.failed(FailureKind.REFUSED, "connection refused"),
            "db-1": Outcome.failed(FailureKind.TIMEOUT, "timed out"),
        }
    )
    engine = _engine(checker, max_concurrency=2)

    first = await engine.run(mixed_realm)
    second = await engine.run(mixed_realm)

    assert _shape(first) == _shape(second)
    assert [(f.service, f.check, f.host) for f in first.summary.failing] == [
        ("web", "noop", "web-2"),
        ("web", "https", "web-2"),
        ("db", "noop", "db-1"),
    ]
