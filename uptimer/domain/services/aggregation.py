"""Domain service that reduces work item outcomes into a report."""

from collections import Counter, defaultdict
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from uptimer.domain.entities.outcome import FailureKind, Outcome
from uptimer.domain.entities.realm import Realm
from uptimer.domain.entities.report import (
    CheckReport,
    FailingTriple,
    HealthStatus,
    HostResult,
    Report,
    ReportSummary,
    ServiceReport,
)
from uptimer.domain.entities.work_item import WorkItem

ItemResult = Tuple[WorkItem, Outcome]


def status_for(outcomes: Iterable[Outcome]) -> HealthStatus:
    """Roll a group of outcomes up into a single status."""

    total = 0
    successes = 0
    for outcome in outcomes:
        total += 1
        if outcome.success:
            successes += 1

    if total == 0:
        return HealthStatus.UNKNOWN
    if successes == total:
        return HealthStatus.UP
    if successes == 0:
        return HealthStatus.DOWN
    return HealthStatus.DEGRADED


def build_report(
    realm: Realm,
    results: Sequence[ItemResult],
    *,
    cancelled: bool = False,
    started_at: Optional[datetime] = None,
    finished_at: Optional[datetime] = None,
) -> Report:
    """Group ``results`` per service, check and host in realm order.

    Services are grouped by position, so two services sharing a name stay
    separate; such names and repeated hosts are listed on the report. The
    output depends only on the realm and the outcomes, never on the order in
    which ``results`` were collected.
    """

    ordered = sorted(results, key=lambda pair: pair[0].index)

    grouped: Dict[Tuple[int, int], List[ItemResult]] = defaultdict(list)
    for item, outcome in ordered:
        grouped[(item.service_index, item.check_index)].append((item, outcome))

    services: List[ServiceReport] = []
    for service_index, service in enumerate(realm.services):
        checks: List[CheckReport] = []
        service_outcomes: List[Outcome] = []
        for check_index, check in enumerate(service.checks):
            pairs = grouped.get((service_index, check_index), [])
            hosts = tuple(
                HostResult(host=item.host, outcome=outcome) for item, outcome in pairs
            )
            outcomes = [result.outcome for result in hosts]
            service_outcomes.extend(outcomes)
            checks.append(
                CheckReport(
                    name=check.name,
                    checker=check.checker.tag,
                    status=status_for(outcomes),
                    hosts=hosts,
                )
            )
        services.append(
            ServiceReport(
                name=service.name,
                position=service_index,
                status=status_for(service_outcomes),
                checks=tuple(checks),
                description=service.description,
                tags=service.tags,
            )
        )

    failing = tuple(
        FailingTriple(
            service=item.service_name,
            check=item.check_name,
            host=item.host,
            reason=outcome.reason or "unknown failure",
            kind=outcome.kind,
        )
        for item, outcome in ordered
        if not outcome.success
    )
    successes = sum(1 for _, outcome in ordered if outcome.success)
    summary = ReportSummary(
        total=len(ordered),
        successes=successes,
        failures=len(ordered) - successes,
        cancelled=sum(
            1 for _, outcome in ordered if outcome.kind is FailureKind.CANCELLED
        ),
        failing=failing,
    )

    now = datetime.now(timezone.utc)
    return Report(
        status=status_for(outcome for _, outcome in ordered),
        services=tuple(services),
        summary=summary,
        duplicate_service_names=_duplicate_service_names(realm),
        duplicate_hosts=_duplicate_hosts(realm),
        cancelled=cancelled,
        started_at=started_at or now,
        finished_at=finished_at or now,
    )


def _duplicate_service_names(realm: Realm) -> Tuple[str, ...]:
    counts = Counter(service.name for service in realm.services)
    seen: List[str] = []
    for service in realm.services:
        if counts[service.name] > 1 and service.name not in seen:
            seen.append(service.name)
    return tuple(seen)


def _duplicate_hosts(realm: Realm) -> Tuple[Tuple[str, str], ...]:
    duplicates: List[Tuple[str, str]] = []
    for service in realm.services:
        counts = Counter(service.hosts)
        for host in service.hosts:
            entry = (service.name, host)
            if counts[host] > 1 and entry not in duplicates:
                duplicates.append(entry)
    return tuple(duplicates)
