"""TCP readiness probe."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from .base import Probe, ProbeError, ProbeTCPConfig, _join_host_port, logger

DEFAULT_TIMEOUT = 1.0


@dataclass
class TCPProbe(Probe):
    """Succeeds when a TCP connection can be opened."""

    config: ProbeTCPConfig
    initial_delay: float = 0.0
    period: float = 0.0
    timeout: float = 0.0

    async def check(self) -> None:
        addr = _join_host_port(self.config.host, self.config.port)
        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(self.config.host, self.config.port),
                self.timeout or DEFAULT_TIMEOUT,
            )
        except (OSError, asyncio.TimeoutError) as exc:
            reason = str(exc) or type(exc).__name__
            raise ProbeError(f"tcp probe failed ({addr}): {reason}") from exc
        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            pass
        logger.info("tcp probe success (%s)", addr)