"""Probe interface, probe configuration and waiting for readiness."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULT_PERIOD = 10.0


class ProbeError(Exception):
    """Raised when a probe check fails."""


@dataclass
class Header:
    """An HTTP header to send with a probe request."""

    name: str
    value: str


@dataclass
class ProbeHTTPConfig:
    """Settings of an HTTP probe."""

    scheme: str = ""
    host: str = ""
    port: str = ""
    path: str = ""
    method: str = ""
    headers: list[Header] = field(default_factory=list)
    user_agent: str = ""
    proxy: str | None = None


@dataclass
class ProbeTCPConfig:
    """Settings of a TCP probe."""

    host: str = ""
    port: str = ""


class Probe(ABC):
    """A readiness check; times are in seconds."""

    initial_delay: float = 0.0
    period: float = 0.0

    @abstractmethod
    async def check(self) -> None:
        """Run the check once, raising an exception on failure."""


def _join_host_port(host: str, port: str) -> str:
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


async def wait(probe: Probe) -> None:
    """Wait until the probe succeeds, checking it every period."""
    if probe.initial_delay > 0:
        await asyncio.sleep(probe.initial_delay)
    period = probe.period or DEFAULT_PERIOD
    while True:
        try:
            await probe.check()
        except Exception as exc:
            logger.info("%s", exc)
        else:
            return
        await asyncio.sleep(period)