"""The atomic unit of execution produced by realm expansion."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

if TYPE_CHECKING:
    from uptimer.domain.ports.checker import IChecker


@dataclass(frozen=True, slots=True)
class WorkItem:
    """One (service, check, host) triple with its resolved checker.

    ``index`` is the item's position in expansion order, which is also the
    (service, check, host) order used for deterministic reporting.
    """

    index: int
    service_index: int
    check_index: int
    host_index: int
    service_name: str
    check_name: str
    host: str
    checker: "IChecker"

    @property
    def triple(self) -> Tuple[str, str, str]:
        return (self.service_name, self.check_name, self.host)

    @property
    def label(self) -> str:
        return f"{self.service_name}.{self.check_name}.{self.host}"
