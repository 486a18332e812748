"""Periodic collection and posting of metrics."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable

from .collector import Collector
from .generator import Generator, MetricValue
from .sender import MetricClient, Sender

COLLECT_TIMEOUT = 60.0


class Manager:
    """Collects metrics on every tick and posts them."""

    def __init__(self, generators: Iterable[Generator], client: MetricClient) -> None:
        self._collector = Collector(generators)
        self._sender = Sender(client)

    async def run(self, interval: float) -> None:
        """Collect and post every ``interval`` seconds until cancelled.

        Raises the error of the first collection round that fails.
        """
        loop = asyncio.get_running_loop()
        failure: asyncio.Future[None] = loop.create_future()
        tasks: set[asyncio.Task] = set()

        def on_done(task: asyncio.Task) -> None:
            tasks.discard(task)
            if task.cancelled():
                return
            exc = task.exception()
            if exc is not None and not failure.done():
                failure.set_exception(exc)

        deadline = loop.time() + interval
        try:
            while True:
                done, _ = await asyncio.wait(
                    {failure}, timeout=max(0.0, deadline - loop.time())
                )
                if failure in done:
                    failure.result()
                task = asyncio.create_task(
                    asyncio.wait_for(self._collect_and_post_values(), COLLECT_TIMEOUT)
                )
                tasks.add(task)
                task.add_done_callback(on_done)
                deadline += interval
        finally:
            for task in list(tasks):
                task.cancel()
            if failure.done():
                if not failure.cancelled():
                    failure.exception()
            else:
                failure.cancel()

    def set_host_id(self, host_id: str) -> None:
        """Set the host id that metrics are posted for."""
        self._sender.set_host_id(host_id)

    async def _collect_and_post_values(self) -> None:
        now = int(time.time())
        values = await self._collector.collect()
        if not values:
            return
        await self._sender.post(
            [MetricValue(name=name, time=now, value=value) for name, value in values.items()]
        )

    async def collect_and_post_graph_defs(self) -> None:
        """Collect graph definitions from all generators and post them."""
        graph_defs = await self._collector.collect_graph_defs()
        await self._sender.post_graph_defs(graph_defs)