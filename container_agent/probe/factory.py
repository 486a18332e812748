"""Building probes from configuration."""

from __future__ import annotations

from dataclasses import dataclass

from .base import Probe, ProbeHTTPConfig, ProbeTCPConfig
from .http import HTTPProbe
from .tcp import TCPProbe


@dataclass
class ProbeConfig:
    """Probe configuration; exactly one of ``http`` and ``tcp`` is expected."""

    http: ProbeHTTPConfig | None = None
    tcp: ProbeTCPConfig | None = None
    initial_delay_seconds: int = 0
    period_seconds: int = 0
    timeout_seconds: int = 0


def new_probe(config: ProbeConfig) -> Probe | None:
    """Create the probe described by ``config``, or ``None`` if none is set."""
    timing = (
        float(config.initial_delay_seconds),
        float(config.period_seconds),
        float(config.timeout_seconds),
    )
    if config.http is not None:
        return HTTPProbe(config.http, *timing)
    if config.tcp is not None:
        return TCPProbe(config.tcp, *timing)
    return None