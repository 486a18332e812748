"""Container metrics of an ECS task."""

from __future__ import annotations

import time
from collections.abc import Mapping, MutableMapping
from typing import Any, Protocol

from ...metric.generator import Generator, GraphDefsParam
from ...metric.sanitize import sanitize_metric_key

KIB = 1024
MIB = 1024 * KIB

STATS_TTL = 10 * 60.0


class _HostInfo(Protocol):
    def generate(self) -> tuple[float, float]: ...


class _TaskClient(Protocol):
    async def get_task_metadata(self) -> Mapping[str, Any]: ...

    async def get_task_stats(self) -> Mapping[str, Any]: ...


def _cpu_total(stats: Mapping[str, Any]) -> int:
    cpu_stats = stats.get("cpu_stats") or {}
    usage = cpu_stats.get("cpu_usage") or {}
    return usage.get("total_usage", 0)


def calculate_cpu_metrics(
    prev: Mapping[str, Any], curr: Mapping[str, Any], time_delta: float
) -> float:
    """Return the CPU used between two samples, where one core is 100.0.

    ``time_delta`` is the time between the samples in seconds.
    """
    used = _cpu_total(curr) - _cpu_total(prev)
    return used / (time_delta * 1e9) * 100


def calculate_memory_metrics(stats: Mapping[str, Any]) -> float:
    """Return the memory in use, not counting the page cache."""
    memory = stats.get("memory_stats") or {}
    cache = (memory.get("stats") or {}).get("cache", 0)
    return float(memory.get("usage", 0) - cache)


def calculate_interface_metrics(
    name: str,
    prev: Mapping[str, Any],
    curr: Mapping[str, Any],
    time_delta: float,
    values: MutableMapping[str, float],
) -> None:
    """Add per-second received and sent bytes of each interface to ``values``."""
    curr_networks = curr.get("networks") or {}
    for interface, prev_value in (prev.get("networks") or {}).items():
        curr_value = curr_networks.get(interface)
        if curr_value is None:
            continue
        prefix = "interface." + name + "-" + sanitize_metric_key(interface)
        values[prefix + ".rxBytes.delta"] = (
            curr_value.get("rx_bytes", 0) - prev_value.get("rx_bytes", 0)
        ) / time_delta
        values[prefix + ".txBytes.delta"] = (
            curr_value.get("tx_bytes", 0) - prev_value.get("tx_bytes", 0)
        ) / time_delta


class MetricGenerator(Generator):
    """Reports CPU, memory and interface metrics of each container in the task.

    The first call, and any call after ten minutes without one, only records
    a baseline and returns no values.
    """

    def __init__(self, client: _TaskClient, host_info_generator: _HostInfo) -> None:
        self._client = client
        self._host_info = host_info_generator
        self._host_mem_total: float | None = None
        self._host_num_cores: float | None = None
        self._prev_stats: Mapping[str, Any] | None = None
        self._prev_time = 0.0

    async def generate(self) -> dict[str, float]:
        stats = await self._client.get_task_stats()

        if self._host_mem_total is None or self._host_num_cores is None:
            mem_total, cpu_cores = self._host_info.generate()
            if self._host_mem_total is None:
                self._host_mem_total = mem_total
            if self._host_num_cores is None:
                self._host_num_cores = cpu_cores

        now = time.perf_counter()
        if self._prev_stats is None or self._prev_time < now - STATS_TTL:
            self._prev_stats = stats
            self._prev_time = now
            return {}

        meta = await self._client.get_task_metadata()

        delta = now - self._prev_time
        values: dict[str, float] = {}
        for container in meta.get("Containers") or []:
            docker_id = container.get("DockerId", "")
            # Stats of a volume container can be null.
            prev = self._prev_stats.get(docker_id)
            if prev is None:
                continue
            curr = stats.get(docker_id)
            if curr is None:
                continue

            name = sanitize_metric_key(container.get("Name", ""))
            values["container.cpu." + name + ".usage"] = calculate_cpu_metrics(prev, curr, delta)
            values["container.cpu." + name + ".limit"] = self._cpu_limit(meta)
            values["container.memory." + name + ".usage"] = calculate_memory_metrics(curr)
            values["container.memory." + name + ".limit"] = self._memory_limit(container, meta)

            calculate_interface_metrics(name, prev, curr, delta, values)

        self._prev_stats = stats
        self._prev_time = now
        return values

    async def get_graph_defs(self) -> list[GraphDefsParam]:
        return []

    def _memory_limit(self, container: Mapping[str, Any], meta: Mapping[str, Any]) -> float:
        container_memory = (container.get("Limits") or {}).get("Memory")
        if container_memory:
            return float(container_memory * MIB)
        task_memory = (meta.get("Limits") or {}).get("Memory")
        if task_memory:
            return float(task_memory * MIB)
        return float(self._host_mem_total or 0.0)

    def _cpu_limit(self, meta: Mapping[str, Any]) -> float:
        # The container CPU limit means cpu.shares, so use the task or host limit.
        task_cpu = (meta.get("Limits") or {}).get("CPU")
        if task_cpu:
            return float(task_cpu) * 100
        return float(self._host_num_cores or 0.0) * 100