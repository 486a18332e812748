"""The ECS platform."""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Mapping
from enum import Enum
from typing import Any, Protocol

from ...metric.generator import Generator
from ...metric.hostinfo import HostInfoGenerator
from ...metric.interface import InterfaceGenerator
from ..base import Platform, SpecGenerator
from .metric import MetricGenerator
from .spec import Provider
from .spec import SpecGenerator as ECSSpecGenerator
from .taskmetadata import TaskMetadataClient

logger = logging.getLogger(__name__)

EXECUTION_ENV_FARGATE = "AWS_ECS_FARGATE"
EXECUTION_ENV_EC2 = "AWS_ECS_EC2"
# Handled internally; not an environment variable value set by ECS.
EXECUTION_ENV_ECS_EXTERNAL = "ECS_EXTERNAL"

TASK_METADATA_WAIT_FOR_READY_INTERVAL = 3.0

_PROVIDERS = {
    EXECUTION_ENV_FARGATE: Provider.FARGATE,
    EXECUTION_ENV_EC2: Provider.ECS,
    EXECUTION_ENV_ECS_EXTERNAL: Provider.ECS_ANYWHERE,
}


class NetworkMode(str, Enum):
    """Network modes of an ECS task."""

    BRIDGE = "bridge"
    HOST = "host"
    AWSVPC = "awsvpc"

    def __str__(self) -> str:
        return self.value


_NETWORK_MODES = {
    "default": NetworkMode.BRIDGE,
    "bridge": NetworkMode.BRIDGE,
    "host": NetworkMode.HOST,
    "awsvpc": NetworkMode.AWSVPC,
}


class _TaskMetadataGetter(Protocol):
    async def get_task_metadata(self) -> Mapping[str, Any]: ...


def is_running(status: str) -> bool:
    """Report whether a task status means running."""
    return status == "RUNNING"


def resolve_provider(execution_env: str) -> Provider:
    """Return the provider for an ECS execution environment."""
    try:
        return _PROVIDERS[execution_env]
    except KeyError:
        raise ValueError(f'unknown execution env: "{execution_env}"') from None


def detect_network_mode(meta: Mapping[str, Any]) -> NetworkMode:
    """Return the network mode of the task's first container."""
    containers = meta.get("Containers") or []
    if not containers:
        raise ValueError("there are no containers")
    networks = containers[0].get("Networks") or []
    if not networks:
        raise ValueError("there are no networks")
    mode = networks[0].get("NetworkMode", "")
    try:
        return _NETWORK_MODES[mode]
    except KeyError:
        raise ValueError(f"unsupported NetworkMode: {mode}") from None


async def get_task_metadata(client: _TaskMetadataGetter, interval: float) -> Mapping[str, Any]:
    """Fetch task metadata, retrying every ``interval`` seconds until it succeeds.

    The endpoint fails until every container of the task has been created.
    """
    while True:
        try:
            return await client.get_task_metadata()
        except Exception as exc:
            logger.info("wait for the task API to be ready: %r", str(exc))
        await asyncio.sleep(interval)


async def create_ecs_platform(
    metadata_uri: str,
    execution_env: str,
    ignore_container: re.Pattern[str] | str | None = None,
) -> ECSPlatform:
    """Create the ECS platform once the task metadata endpoint is ready."""
    provider = resolve_provider(execution_env)
    client = TaskMetadataClient(metadata_uri, ignore_container)
    try:
        meta = await get_task_metadata(client, TASK_METADATA_WAIT_FOR_READY_INTERVAL)
        network_mode = detect_network_mode(meta)
    except BaseException:
        await client.aclose()
        raise
    return ECSPlatform(client, provider, network_mode)


class ECSPlatform(Platform):
    """Platform of a container running in an ECS task."""

    def __init__(self, client: Any, provider: Provider, network_mode: NetworkMode) -> None:
        self.client = client
        self.provider = provider
        self.network_mode = network_mode

    def get_metric_generators(self) -> list[Generator]:
        generators: list[Generator] = [MetricGenerator(self.client, HostInfoGenerator())]
        if self.network_mode != NetworkMode.BRIDGE:
            generators.append(InterfaceGenerator())
        return generators

    def get_spec_generators(self) -> list[SpecGenerator]:
        return [ECSSpecGenerator(self.client, self.provider)]

    async def get_custom_identifier(self) -> str:
        return ""

    async def status_running(self) -> bool:
        try:
            meta = await self.client.get_task_metadata()
        except Exception as exc:
            logger.warning("failed to get metadata: %s", exc)
            return False
        return is_running(meta.get("KnownStatus", ""))