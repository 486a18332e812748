"""Network interface traffic metrics."""

from __future__ import annotations

import time

import psutil

from .generator import Generator, GraphDefsParam
from .sanitize import sanitize_metric_key

STATS_TTL = 10 * 60.0


class InterfaceGenerator(Generator):
    """Reports received and sent bytes per second for each interface.

    Virtual ethernet pairs (``veth*``) are ignored. The first call, and any
    call after ten minutes without one, only records a baseline.
    """

    def __init__(self) -> None:
        self._prev_stats = None
        self._prev_time = 0.0

    async def generate(self) -> dict[str, float]:
        stats = self._interface_stats()
        now = time.monotonic()
        if self._prev_stats is None or self._prev_time < now - STATS_TTL:
            self._prev_stats = stats
            self._prev_time = now
            return {}

        delta = now - self._prev_time
        values: dict[str, float] = {}
        for name, prev in self._prev_stats.items():
            curr = stats.get(name)
            if curr is None:
                continue
            prefix = "interface." + sanitize_metric_key(name)
            values[prefix + ".rxBytes.delta"] = (curr.bytes_recv - prev.bytes_recv) / delta
            values[prefix + ".txBytes.delta"] = (curr.bytes_sent - prev.bytes_sent) / delta

        self._prev_stats = stats
        self._prev_time = now
        return values

    @staticmethod
    def _interface_stats():
        counters = psutil.net_io_counters(pernic=True)
        return {name: s for name, s in counters.items() if not name.startswith("veth")}

    async def get_graph_defs(self) -> list[GraphDefsParam]:
        return []