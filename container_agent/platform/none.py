"""A platform with no metrics and no specs."""

from __future__ import annotations

from ..metric.generator import Generator
from .base import Platform, SpecGenerator


class NonePlatform(Platform):
    """Platform used when the agent runs outside any known orchestrator."""

    def get_metric_generators(self) -> list[Generator]:
        return []

    def get_spec_generators(self) -> list[SpecGenerator]:
        return []

    async def get_custom_identifier(self) -> str:
        return ""

    async def status_running(self) -> bool:
        return True