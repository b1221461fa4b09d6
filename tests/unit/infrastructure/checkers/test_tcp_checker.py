from __future__ import annotations

import asyncio
import socket

import pytest

from uptimer.domain.entities.outcome import FailureKind
from uptimer.infrastructure.checkers.tcp import TcpChecker


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.mark.asyncio
async def test_tcp_checker_succeeds_against_listening_port() -> None:
    accepted = []

    async def _on_connect(reader, writer) -> None:
        accepted.append(True)
        writer.close()

    server = await asyncio.start_server(_on_connect, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    try:
        outcome = await TcpChecker(port=port).check("127.0.0.1")
    finally:
        server.close()
        await server.wait_closed()

    assert outcome.success is True
    assert outcome.reason is None


@pytest.mark.asyncio
async def test_tcp_checker_reports_refused_connection() -> None:
    outcome = await TcpChecker(port=_free_port()).check("127.0.0.1")

    assert outcome.success is False
    assert outcome.kind is FailureKind.REFUSED
    assert outcome.reason == "connection refused"


@pytest.mark.asyncio
async def test_tcp_checker_reports_resolution_failure() -> None:
    outcome = await TcpChecker(port=22).check("no-such-host.invalid")

    assert outcome.success is False
    assert outcome.kind is FailureKind.RESOLUTION
    assert outcome.reason.startswith("address resolution failed")


@pytest.mark.asyncio
async def test_tcp_checker_rejects_empty_host() -> None:
    outcome = await TcpChecker(port=22).check("")

    assert outcome.kind is FailureKind.RESOLUTION


@pytest.mark.asyncio
async def test_tcp_checker_classifies_os_errors(monkeypatch) -> None:
    async def _timeout(sock, address):
        raise TimeoutError("connect timed out")

    monkeypatch.setattr(asyncio.get_running_loop(), "sock_connect", _timeout)

    outcome = await TcpChecker(port=22).check("192.0.2.1")

    assert outcome.kind is FailureKind.TIMEOUT
    assert outcome.reason == "connection timed out"


def test_tcp_checker_repr() -> None:
    checker = TcpChecker(port=22)

    assert checker.port == 22
    assert repr(checker) == "TcpChecker(port=22)"


def _fake_getaddrinfo(*hosts: str):
    async def _getaddrinfo(host, port, *args, **kwargs):
        return [
            (socket.AF_INET, socket.SOCK_STREAM, socket.IPPROTO_TCP, "", (ip, port))
            for ip in hosts
        ]

    return _getaddrinfo


@pytest.mark.asyncio
async def test_tcp_checker_reports_refused_for_every_address(monkeypatch) -> None:
    loop = asyncio.get_running_loop()
    monkeypatch.setattr(
        loop, "getaddrinfo", _fake_getaddrinfo("127.0.0.1", "127.0.0.2")
    )

    outcome = await TcpChecker(port=_free_port()).check("localhost")

    assert outcome.kind is FailureKind.REFUSED
    assert outcome.reason == "connection refused"


@pytest.mark.asyncio
async def test_tcp_checker_falls_back_to_next_address(monkeypatch) -> None:
    server = await asyncio.start_server(lambda r, w: w.close(), "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    loop = asyncio.get_running_loop()
    monkeypatch.setattr(
        loop, "getaddrinfo", _fake_getaddrinfo("127.0.0.2", "127.0.0.1")
    )
    try:
        outcome = await TcpChecker(port=port).check("localhost")
    finally:
        server.close()
        await server.wait_closed()

    assert outcome.success is True


@pytest.mark.asyncio
async def test_tcp_checker_reports_empty_resolution(monkeypatch) -> None:
    monkeypatch.setattr(asyncio.get_running_loop(), "getaddrinfo", _fake_getaddrinfo())

    outcome = await TcpChecker(port=22).check("nowhere")

    assert outcome.kind is FailureKind.RESOLUTION
