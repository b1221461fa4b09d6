"""Checker that issues a single HTTP GET request."""

from __future__ import annotations

from typing import Optional

import httpx

from uptimer.domain.entities.outcome import FailureKind, Outcome
from uptimer.domain.ports.checker import IChecker
from uptimer.infrastructure.checkers.errors import failure_from_os_error, find_os_error
from uptimer.shared.consts import DEFAULT_HTTP_TIMEOUT_S


class HttpChecker(IChecker):
    """GET ``scheme://host[:port]path`` and judge the response status.

    Without ``expected_status`` any status below 400 counts as success.
    """

    def __init__(
        self,
        *,
        port: Optional[int] = None,
        path: str = "/",
        scheme: str = "http",
        expected_status: Optional[int] = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT_S,
        verify: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._port = port
        self._path = path if path.startswith("/") else f"/{path}"
        self._scheme = scheme
        self._expected_status = expected_status
        self._timeout = timeout
        self._verify = verify
        self._transport = transport

    def url_for(self, host: str) -> str:
        if ":" in host and not host.startswith("["):
            host = f"[{host}]"
        port_part = f":{self._port}" if self._port is not None else ""
        return f"{self._scheme}://{host}{port_part}{self._path}"

    async def check(self, host: str) -> Outcome:
        if not host:
            return Outcome.failed(
                FailureKind.RESOLUTION, "address resolution failed: empty host name"
            )

        url = self.url_for(host)
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                verify=self._verify,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
        except httpx.TimeoutException:
            return Outcome.failed(FailureKind.TIMEOUT, "HTTP request timed out")
        except httpx.RequestError as exc:
            os_error = find_os_error(exc)
            if os_error is not None:
                return failure_from_os_error(os_error)
            return Outcome.failed(FailureKind.IO, f"HTTP request failed: {exc}")

        status_code = response.status_code
        if self._expected_status is not None:
            ok = status_code == self._expected_status
        else:
            ok = status_code < 400

        if ok:
            return Outcome.passed()
        return Outcome.failed(FailureKind.HTTP_STATUS, f"HTTP {status_code}")

    def __repr__(self) -> str:
        return (
            f"HttpChecker(scheme={self._scheme!r}, port={self._port}, "
            f"path={self._path!r}, expected_status={self._expected_status})"
        )
