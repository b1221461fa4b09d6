"""Checker that always succeeds."""

from __future__ import annotations

from uptimer.domain.entities.outcome import Outcome
from uptimer.domain.ports.checker import IChecker


class DummyChecker(IChecker):
    """Placeholder checker used to exercise the engine without the network."""

    async def check(self, host: str) -> Outcome:
        return Outcome.passed()

    def __repr__(self) -> str:
        return "DummyChecker()"
