"""Execution engine: expands a realm, probes every work item, builds the report."""

from __future__ import annotations

import asyncio
import dataclasses
import math
import os
from datetime import datetime, timezone
from time import perf_counter
from typing import List, Optional, Sequence, Tuple

from uptimer.domain.entities.errors import EngineSetupError
from uptimer.domain.entities.outcome import FailureKind, Outcome
from uptimer.domain.entities.realm import Realm
from uptimer.domain.entities.report import Report
from uptimer.domain.entities.work_item import WorkItem
from uptimer.domain.ports.checker import ICheckerResolver
from uptimer.domain.services.aggregation import build_report
from uptimer.domain.services.expansion import expand_realm
from uptimer.shared import get_logger
from uptimer.shared.consts import (
    CONCURRENCY_PER_CPU,
    DEFAULT_CHECK_TIMEOUT_S,
    DEFAULT_RETRY_BACKOFF_S,
    MAX_DEFAULT_CONCURRENCY,
)

logger = get_logger(__name__)

ItemResult = Tuple[WorkItem, Outcome]


def default_max_concurrency() -> int:
    """A small multiple of the available CPUs, capped."""
    return min(MAX_DEFAULT_CONCURRENCY, (os.cpu_count() or 1) * CONCURRENCY_PER_CPU)


class ExecutionEngine:
    """Run every (service, check, host) of a realm with bounded concurrency.

    Each probe is bound to ``check_timeout`` seconds. Probe failures and
    exceptions raised by checkers become failure outcomes; only invalid engine
    parameters or an unresolvable checker tag raise ``EngineSetupError``.
    """

    def __init__(
        self,
        resolver: ICheckerResolver,
        *,
        max_concurrency: Optional[int] = None,
        check_timeout: float = DEFAULT_CHECK_TIMEOUT_S,
        retries: int = 0,
        retry_backoff: float = DEFAULT_RETRY_BACKOFF_S,
    ) -> None:
        if max_concurrency is None:
            max_concurrency = default_max_concurrency()
        if max_concurrency < 1:
            raise EngineSetupError(
                "Concurrency bound must be at least 1",
                details={"max_concurrency": max_concurrency},
            )
        if not (check_timeout > 0 and math.isfinite(check_timeout)):
            raise EngineSetupError(
                "Check timeout must be a finite number of seconds greater than 0",
                details={"check_timeout": check_timeout},
            )
        if retries < 0:
            raise EngineSetupError(
                "Retries must not be negative", details={"retries": retries}
            )
        if not (retry_backoff >= 0 and math.isfinite(retry_backoff)):
            raise EngineSetupError(
                "Retry backoff must be a finite, non-negative number of seconds",
                details={"retry_backoff": retry_backoff},
            )

        self._resolver = resolver
        self._max_concurrency = max_concurrency
        self._check_timeout = check_timeout
        self._retries = retries
        self._retry_backoff = retry_backoff

    @property
    def max_concurrency(self) -> int:
        return self._max_concurrency

    @property
    def check_timeout(self) -> float:
        return self._check_timeout

    def expand(self, realm: Realm) -> List[WorkItem]:
        """Materialize the realm's work items; raises on unknown checker tags."""
        return expand_realm(realm, self._resolver)

    async def run(
        self, realm: Realm, *, cancel_event: Optional[asyncio.Event] = None
    ) -> Report:
        """Execute one pass over ``realm`` and aggregate the outcomes.

        Setting ``cancel_event`` abandons in-flight checks; outcomes already
        collected are kept and the report is marked as cancelled.
        """

        items = self.expand(realm)
        started_at = datetime.now(timezone.utc)
        logger.info(
            "engine.run.started",
            services=len(realm.services),
            work_items=len(items),
            max_concurrency=self._max_concurrency,
            check_timeout=self._check_timeout,
        )

        results, cancelled = await self.execute(items, cancel_event=cancel_event)

        report = build_report(
            realm,
            results,
            cancelled=cancelled,
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
        )
        logger.info(
            "engine.run.completed",
            status=report.status.value,
            total=report.summary.total,
            successes=report.summary.successes,
            failures=report.summary.failures,
            cancelled=cancelled,
        )
        return report

    async def execute(
        self,
        items: Sequence[WorkItem],
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Tuple[List[ItemResult], bool]:
        """Probe ``items`` and pair each with its outcome.

        Returns the results in item order and whether the run was cancelled.
        Every item gets exactly one outcome; items abandoned by cancellation
        get a ``cancelled`` failure.
        """

        slots: List[Optional[Outcome]] = [None] * len(items)
        semaphore = asyncio.Semaphore(self._max_concurrency)
        abandoned = asyncio.Event()
        tasks = [
            asyncio.create_task(
                self._dispatch(position, item, semaphore, slots, abandoned)
            )
            for position, item in enumerate(items)
        ]

        cancelled = False
        if tasks:
            if cancel_event is None:
                await asyncio.gather(*tasks)
            else:
                cancelled = await self._wait_or_cancel(tasks, cancel_event, abandoned)

        results: List[ItemResult] = []
        for item, outcome in zip(items, slots):
            if outcome is None:
                outcome = Outcome.failed(
                    FailureKind.CANCELLED, "check cancelled before completion"
                )
            results.append((item, outcome))
        return results, cancelled

    async def _wait_or_cancel(
        self,
        tasks: List["asyncio.Task[None]"],
        cancel_event: asyncio.Event,
        abandoned: asyncio.Event,
    ) -> bool:
        all_done = asyncio.ensure_future(asyncio.wait(tasks))
        cancel_waiter = asyncio.ensure_future(cancel_event.wait())
        try:
            await asyncio.wait(
                {all_done, cancel_waiter}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            cancel_waiter.cancel()
            all_done.cancel()

        if all(task.done() for task in tasks):
            await asyncio.gather(*tasks)
            return False

        pending = sum(1 for task in tasks if not task.done())
        logger.warning("engine.run.cancelled", pending=pending)
        abandoned.set()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        return True

    async def _dispatch(
        self,
        position: int,
        item: WorkItem,
        semaphore: asyncio.Semaphore,
        slots: List[Optional[Outcome]],
        abandoned: asyncio.Event,
    ) -> None:
        async with semaphore:
            slots[position] = await self._probe_with_retries(item, abandoned)

    async def _probe_with_retries(
        self, item: WorkItem, abandoned: asyncio.Event
    ) -> Outcome:
        attempt = 1
        while True:
            outcome = await self._probe(item, abandoned)
            if outcome.success or not outcome.retryable or attempt > self._retries:
                return dataclasses.replace(outcome, attempts=attempt)

            backoff = self._retry_backoff * (2 ** (attempt - 1))
            logger.debug(
                "engine.check.retry",
                item=item.label,
                attempt=attempt,
                reason=outcome.reason,
                backoff=backoff,
            )
            await asyncio.sleep(backoff)
            attempt += 1

    async def _probe(self, item: WorkItem, abandoned: asyncio.Event) -> Outcome:
        start = perf_counter()
        try:
            outcome = await asyncio.wait_for(
                item.checker.check(item.host), timeout=self._check_timeout
            )
            if not isinstance(outcome, Outcome):
                raise TypeError(
                    f"checker returned {type(outcome).__name__}, expected Outcome"
                )
        except asyncio.TimeoutError:
            outcome = Outcome.failed(
                FailureKind.TIMEOUT, f"timed out after {self._check_timeout:g}s"
            )
        except asyncio.CancelledError as exc:
            if abandoned.is_set() or _cancel_requested():
                raise
            # Raised by the checker itself, not by a cancellation of this run.
            outcome = self._internal_failure(item, exc)
        except Exception as exc:
            outcome = self._internal_failure(item, exc)

        latency_ms = (perf_counter() - start) * 1000
        if not outcome.success:
            logger.debug(
                "engine.check.failed",
                item=item.label,
                kind=outcome.kind.value if outcome.kind else None,
                reason=outcome.reason,
            )
        return dataclasses.replace(
            outcome, latency_ms=latency_ms, checked_at=datetime.now(timezone.utc)
        )

    def _internal_failure(self, item: WorkItem, exc: BaseException) -> Outcome:
        logger.error(
            "engine.check.internal_error",
            item=item.label,
            checker=repr(item.checker),
            error=str(exc),
            exc_info=exc,
        )
        detail = exc.__class__.__name__
        if str(exc):
            detail = f"{detail}: {exc}"
        return Outcome.failed(FailureKind.INTERNAL, f"internal checker error: {detail}")


def _cancel_requested() -> bool:
    """Whether the running task itself has been asked to cancel (3.11+)."""
    task = asyncio.current_task()
    cancelling = getattr(task, "cancelling", None)
    return bool(cancelling is not None and cancelling())


async def run_realm(
    realm: Realm,
    resolver: ICheckerResolver,
    *,
    max_concurrency: Optional[int] = None,
    check_timeout: float = DEFAULT_CHECK_TIMEOUT_S,
    retries: int = 0,
    cancel_event: Optional[asyncio.Event] = None,
) -> Report:
    """Build an engine for the given parameters and run one pass over ``realm``."""

    engine = ExecutionEngine(
        resolver,
        max_concurrency=max_concurrency,
        check_timeout=check_timeout,
        retries=retries,
    )
    return await engine.run(realm, cancel_event=cancel_event)
