"""HTTP readiness probe."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit

import httpx

from .base import Probe, ProbeError, ProbeHTTPConfig, _join_host_port

DEFAULT_TIMEOUT = 1.0


@dataclass
class HTTPProbe(Probe):
    """Succeeds when the endpoint answers with a 2xx or 3xx status."""

    config: ProbeHTTPConfig
    initial_delay: float = 0.0
    period: float = 0.0
    timeout: float = 0.0

    def _url(self) -> str:
        parts = urlsplit(self.config.path)
        scheme = self.config.scheme or "http"
        if self.config.port:
            netloc = _join_host_port(self.config.host or "localhost", self.config.port)
        else:
            netloc = self.config.host or "localhost"
        return urlunsplit((scheme, netloc, parts.path, parts.query, parts.fragment))

    def _headers(self) -> list[tuple[str, str]]:
        headers: list[tuple[str, str]] = []
        host = None
        for header in self.config.headers:
            if header.name.lower() == "host":
                host = header.value
            else:
                headers.append((header.name, header.value))
        has_user_agent = any(name.lower() == "user-agent" and value for name, value in headers)
        if not has_user_agent and self.config.user_agent:
            headers.append(("User-Agent", self.config.user_agent))
        if host is not None:
            headers.append(("Host", host))
        return headers

    async def check(self) -> None:
        url = self._url()
        method = self.config.method.upper() or "GET"
        async with httpx.AsyncClient(
            timeout=self.timeout or DEFAULT_TIMEOUT,
            proxy=self.config.proxy,
            trust_env=False,
            follow_redirects=True,
        ) as client:
            try:
                response = await client.request(method, url, headers=self._headers())
            except httpx.HTTPError as exc:
                reason = str(exc) or type(exc).__name__
                raise ProbeError(f"http probe failed ({method} {url}): {reason}") from exc
        status = f"{response.status_code} {response.reason_phrase}"
        if not 200 <= response.status_code < 400:
            raise ProbeError(f"http probe failed ({method} {url}): {status}")
        logger_info(f"http probe success ({method} {url}): {status}")


def logger_info(message: str) -> None:
    from .base import logger

    logger.info("%s", message)