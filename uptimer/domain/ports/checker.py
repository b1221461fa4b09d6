"""Domain port for checker strategies."""

from __future__ import annotations

from typing import Protocol

from uptimer.domain.entities.outcome import Outcome
from uptimer.domain.entities.realm import CheckerConfig


class IChecker(Protocol):
    """A protocol-specific probe run against a single host.

    Implementations perform at most one probe per call, never retry, hold no
    mutable state shared between calls and return failures as outcomes.
    Deadlines are enforced by the caller through task cancellation.
    """

    async def check(self, host: str) -> Outcome:
        """Probe ``host`` and report success or a described failure."""
        ...


class ICheckerResolver(Protocol):
    """Maps a checker configuration onto a ready-to-use checker."""

    def resolve(self, config: CheckerConfig) -> IChecker:
        """Return the checker for ``config``.

        Raises:
            UnknownCheckerError: If no implementation handles the config tag.
        """
        ...
