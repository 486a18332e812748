"""Platform interface, platform types and host spec values."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..metric.generator import Generator


class PlatformType(str, Enum):
    """Supported platform types."""

    ECS = "ecs"
    ECS_AWSVPC = "ecs_awsvpc"
    ECS_V3 = "ecs_v3"
    FARGATE = "fargate"
    KUBERNETES = "kubernetes"
    EKS_ON_FARGATE = "eks_fargate"
    NONE = "none"
    ECS_ANYWHERE = "ecs_anywhere"

    def __str__(self) -> str:
        return self.value


@dataclass
class Cloud:
    """Cloud provider name and its metadata."""

    provider: str
    meta_data: Any = None


@dataclass
class CloudHostname:
    """Cloud information together with the host name to report."""

    cloud: Cloud | None
    hostname: str


class SpecGenerator(ABC):
    """Produces host spec information."""

    @abstractmethod
    async def generate(self) -> Any:
        """Return a spec value such as a :class:`CloudHostname`."""


class Platform(ABC):
    """Provides metric and spec generators and status for a platform."""

    @abstractmethod
    def get_metric_generators(self) -> list[Generator]:
        """Return the metric generators of the platform."""

    @abstractmethod
    def get_spec_generators(self) -> list[SpecGenerator]:
        """Return the spec generators of the platform."""

    @abstractmethod
    async def get_custom_identifier(self) -> str:
        """Return the custom identifier of the host, or an empty string."""

    @abstractmethod
    async def status_running(self) -> bool:
        """Report whether the workload is running."""