"""Checker that tests TCP reachability of a port."""

from __future__ import annotations

import asyncio
import socket
from typing import Any, List, Tuple

from uptimer.domain.entities.outcome import FailureKind, Outcome
from uptimer.domain.ports.checker import IChecker
from uptimer.infrastructure.checkers.errors import (
    failure_from_os_error,
    failure_from_os_errors,
)


class TcpChecker(IChecker):
    """Open a connection to ``host:port`` and close it straight away.

    Every address the host resolves to is tried in turn until one accepts.
    Only reachability is tested; nothing is sent over the connection.
    """

    def __init__(self, port: int) -> None:
        self._port = port

    @property
    def port(self) -> int:
        return self._port

    async def check(self, host: str) -> Outcome:
        if not host:
            return Outcome.failed(
                FailureKind.RESOLUTION, "address resolution failed: empty host name"
            )

        loop = asyncio.get_running_loop()
        try:
            addresses = await loop.getaddrinfo(
                host, self._port, type=socket.SOCK_STREAM
            )
        except OSError as exc:
            return failure_from_os_error(exc)
        if not addresses:
            return Outcome.failed(
                FailureKind.RESOLUTION,
                f"address resolution failed: no addresses for {host}",
            )

        errors: List[OSError] = []
        for family, sock_type, proto, _, sockaddr in addresses:
            try:
                await self._connect(loop, family, sock_type, proto, sockaddr)
            except OSError as exc:
                errors.append(exc)
            else:
                return Outcome.passed()
        return failure_from_os_errors(errors)

    async def _connect(
        self,
        loop: asyncio.AbstractEventLoop,
        family: int,
        sock_type: int,
        proto: int,
        sockaddr: Tuple[Any, ...],
    ) -> None:
        sock = socket.socket(family, sock_type, proto)
        try:
            sock.setblocking(False)
            await loop.sock_connect(sock, sockaddr)
        finally:
            sock.close()

    def __repr__(self) -> str:
        return f"TcpChecker(port={self._port})"
