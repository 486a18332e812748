"""Container metrics of a Kubernetes pod."""

from __future__ import annotations

import re
import time
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any, Protocol

from ...metric.generator import Generator, GraphDefsParam
from ...metric.sanitize import sanitize_metric_key

STATS_TTL = 10 * 60.0

_NUMBER = re.compile(r"([+-]?(?:\d+(?:\.\d*)?|\.\d+))(.*)", re.DOTALL)
_EXPONENT = re.compile(r"[eE]([+-]?\d+)")

_BINARY_SUFFIXES = {
    "Ki": 1024,
    "Mi": 1024**2,
    "Gi": 1024**3,
    "Ti": 1024**4,
    "Pi": 1024**5,
    "Ei": 1024**6,
}
_DECIMAL_SUFFIXES = {
    "n": -9,
    "u": -6,
    "m": -3,
    "": 0,
    "k": 3,
    "M": 6,
    "G": 9,
    "T": 12,
    "P": 15,
    "E": 18,
}


class _HostInfo(Protocol):
    def generate(self) -> tuple[float, float]: ...


class _PodClient(Protocol):
    async def get_pod(self) -> Mapping[str, Any]: ...

    async def get_pod_stats(self) -> Mapping[str, Any]: ...


def parse_quantity(quantity: str) -> Decimal:
    """Parse a Kubernetes resource quantity such as ``250m`` or ``128Mi``."""
    match = _NUMBER.fullmatch(quantity.strip())
    if match is None:
        raise ValueError(f"quantities must match the regular expression: {quantity!r}")
    try:
        number = Decimal(match.group(1))
    except InvalidOperation as exc:
        raise ValueError(f"invalid quantity: {quantity!r}") from exc
    suffix = match.group(2)
    if suffix in _BINARY_SUFFIXES:
        return number * _BINARY_SUFFIXES[suffix]
    if suffix in _DECIMAL_SUFFIXES:
        return number.scaleb(_DECIMAL_SUFFIXES[suffix])
    exponent = _EXPONENT.fullmatch(suffix)
    if exponent is not None:
        return number.scaleb(int(exponent.group(1)))
    raise ValueError(f"unable to parse quantity's suffix: {quantity!r}")


def calculate_cpu_metrics(
    prev: Mapping[str, Any], curr: Mapping[str, Any], delta: float
) -> float:
    """Return the CPU used between two samples, where one core is 100.0.

    ``delta`` is the time between the samples in seconds.
    """
    used = curr["cpu"]["usageCoreNanoSeconds"] - prev["cpu"]["usageCoreNanoSeconds"]
    return used / (delta * 1e9) * 100


def _limits(container: Mapping[str, Any]) -> Mapping[str, Any]:
    return (container.get("resources") or {}).get("limits") or {}


class MetricGenerator(Generator):
    """Reports CPU and memory metrics of each container in the pod.

    The first call, and any call after ten minutes without one, only records
    a baseline and returns no values.
    """

    def __init__(self, client: _PodClient, host_info_generator: _HostInfo) -> None:
        self._client = client
        self._host_info = host_info_generator
        self._host_mem_total: float | None = None
        self._host_num_cores: float | None = None
        self._prev_stats: Mapping[str, Any] | None = None
        self._prev_time = 0.0

    def _ensure_host_info(self) -> None:
        if self._host_mem_total is None or self._host_num_cores is None:
            mem_total, cpu_cores = self._host_info.generate()
            if self._host_mem_total is None:
                self._host_mem_total = mem_total
            if self._host_num_cores is None:
                self._host_num_cores = cpu_cores

    async def generate(self) -> dict[str, float]:
        stats = await self._client.get_pod_stats()
        self._ensure_host_info()

        now = time.perf_counter()
        if self._prev_stats is None or self._prev_time < now - STATS_TTL:
            self._prev_stats = stats
            self._prev_time = now
            return {}

        pod = await self._client.get_pod()

        delta = now - self._prev_time
        spec_containers = (pod.get("spec") or {}).get("containers") or []
        curr_containers = stats.get("containers") or []
        values: dict[str, float] = {}
        for prev in self._prev_stats.get("containers") or []:
            for curr in curr_containers:
                if curr.get("name") != prev.get("name"):
                    continue
                container_name = curr.get("name", "")
                name = sanitize_metric_key(container_name)
                values["container.cpu." + name + ".usage"] = calculate_cpu_metrics(
                    prev, curr, delta
                )
                working_set = (curr.get("memory") or {}).get("workingSetBytes")
                if working_set is not None:
                    values["container.memory." + name + ".usage"] = float(working_set)
                spec = next(
                    (c for c in spec_containers if c.get("name") == container_name), None
                )
                if spec is not None:
                    values["container.cpu." + name + ".limit"] = self.cpu_limit(spec)
                    values["container.memory." + name + ".limit"] = self.memory_limit(spec)

        self._prev_stats = stats
        self._prev_time = now
        return values

    async def get_graph_defs(self) -> list[GraphDefsParam]:
        return []

    def memory_limit(self, container: Mapping[str, Any]) -> float:
        """Return the container's memory limit in bytes, or the host's memory."""
        self._ensure_host_info()
        limit = float(self._host_mem_total or 0.0)
        raw = _limits(container).get("memory")
        if raw:
            try:
                value = parse_quantity(str(raw))
            except ValueError:
                return limit
            limit = float(int(value)) if value == value.to_integral_value() else 0.0
        return limit

    def cpu_limit(self, container: Mapping[str, Any]) -> float:
        """Return the container's CPU limit where one core is 100.0."""
        self._ensure_host_info()
        limit = float(self._host_num_cores or 0.0) * 100
        raw = _limits(container).get("cpu")
        if raw is not None:
            try:
                limit = float(parse_quantity(str(raw))) * 100
            except ValueError:
                pass
        return limit