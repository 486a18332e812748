"""Concurrent collection of metrics from many generators."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from .generator import Generator, GraphDefsParam

logger = logging.getLogger(__name__)


class Collector:
    """Runs every generator concurrently and merges what they produce.

    A generator that fails is logged and left out of the result.
    """

    def __init__(self, generators: Iterable[Generator]) -> None:
        self._generators = list(generators)

    async def _gather(self, calls):
        results = await asyncio.gather(*calls, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.error("%s", result)
            elif isinstance(result, BaseException):
                raise result
            else:
                yield result

    async def collect(self) -> dict[str, float]:
        """Return the merged metric values of all generators."""
        values: dict[str, float] = {}
        async for result in self._gather(g.generate() for g in self._generators):
            if result:
                values.update(result)
        return values

    async def collect_graph_defs(self) -> list[GraphDefsParam]:
        """Return the graph definitions of all generators."""
        graph_defs: list[GraphDefsParam] = []
        async for result in self._gather(g.get_graph_defs() for g in self._generators):
            if result:
                graph_defs.extend(result)
        return graph_defs