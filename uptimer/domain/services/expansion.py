"""Domain service that expands a realm into work items."""

from typing import List

from uptimer.domain.entities.realm import Realm
from uptimer.domain.entities.work_item import WorkItem
from uptimer.domain.ports.checker import ICheckerResolver


def expand_realm(realm: Realm, resolver: ICheckerResolver) -> List[WorkItem]:
    """Flatten ``realm`` into one work item per (service, check, host).

    Items are emitted in service order, then check order, then host order.
    Repeated triples are kept. Each check's checker is resolved once and
    shared by all of that check's hosts.

    Raises:
        UnknownCheckerError: If a check uses a tag the resolver cannot handle.
    """

    items: List[WorkItem] = []

    for service_index, service in enumerate(realm.services):
        for check_index, check in enumerate(service.checks):
            checker = resolver.resolve(check.checker)
            for host_index, host in enumerate(service.hosts):
                items.append(
                    WorkItem(
                        index=len(items),
                        service_index=service_index,
                        check_index=check_index,
                        host_index=host_index,
                        service_name=service.name,
                        check_name=check.name,
                        host=host,
                        checker=checker,
                    )
                )

    return items
