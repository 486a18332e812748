"""Buffered posting of metric values and graph definitions."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from .generator import GraphDefsParam, MetricValue

logger = logging.getLogger(__name__)

MAX_BATCHES_PER_POST = 3
MAX_PENDING_BATCHES = 60 * 6


class MetricClient(ABC):
    """The part of the monitoring service API that metrics are posted to."""

    @abstractmethod
    async def post_host_metric_values_by_host_id(
        self, host_id: str, metric_values: Sequence[MetricValue]
    ) -> None:
        """Post metric values for a host."""

    @abstractmethod
    async def create_graph_defs(self, graph_defs: Sequence[GraphDefsParam]) -> None:
        """Register graph definitions."""


class Sender:
    """Posts metric batches, keeping unsent ones to retry later.

    Nothing is posted until the host id is known. Each post sends the three
    oldest pending batches at most; failed batches are kept, up to six hours
    worth of one-minute batches.
    """

    def __init__(self, client: MetricClient) -> None:
        self._client = client
        self._host_id = ""
        self._pending: list[list[MetricValue]] = []
        self._lock = asyncio.Lock()

    async def post(self, metric_values: Sequence[MetricValue]) -> None:
        """Queue a batch and post the oldest pending batches."""
        async with self._lock:
            self._pending.append(list(metric_values))
            if not self._host_id:
                return
            batches = self._pending[:MAX_BATCHES_PER_POST]
            payload = [value for batch in batches for value in batch]
            try:
                await self._client.post_host_metric_values_by_host_id(self._host_id, payload)
            except Exception as exc:
                logger.warning("failed to post metric values but will retry posting: %s", exc)
            else:
                del self._pending[: len(batches)]
            if len(self._pending) > MAX_PENDING_BATCHES:
                del self._pending[:-MAX_PENDING_BATCHES]

    def set_host_id(self, host_id: str) -> None:
        """Set the host id that metrics are posted for."""
        self._host_id = host_id

    async def post_graph_defs(self, graph_defs: Sequence[GraphDefsParam]) -> None:
        """Post graph definitions, if there are any."""
        if not graph_defs:
            return
        await self._client.create_graph_defs(list(graph_defs))