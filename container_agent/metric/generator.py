"""Metric generator interface and the value types sent to the monitoring service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class GraphDefsMetric:
    """One metric line within a graph definition."""

    name: str
    display_name: str = ""
    is_stacked: bool = False


@dataclass
class GraphDefsParam:
    """A graph definition for a group of custom metrics."""

    name: str
    display_name: str = ""
    unit: str = ""
    metrics: list[GraphDefsMetric] = field(default_factory=list)


@dataclass
class MetricValue:
    """A single metric sample with its Unix timestamp."""

    name: str
    time: int
    value: float


class Generator(ABC):
    """Produces metric values and graph definitions."""

    @abstractmethod
    async def generate(self) -> dict[str, float]:
        """Return the current metric values keyed by metric name."""

    @abstractmethod
    async def get_graph_defs(self) -> list[GraphDefsParam]:
        """Return the graph definitions for the generated metrics."""