"""Host memory and CPU information."""

from __future__ import annotations

import os

import psutil


def _usable_cpus() -> int:
    if hasattr(os, "sched_getaffinity"):
        return len(os.sched_getaffinity(0))
    return os.cpu_count() or 1


class HostInfoGenerator:
    """Reads total host memory and the number of usable CPU cores."""

    def generate(self) -> tuple[float, float]:
        """Return ``(memory_total_bytes, cpu_cores)``."""
        return float(psutil.virtual_memory().total), float(_usable_cpus())