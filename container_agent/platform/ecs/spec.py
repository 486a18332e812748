"""Host spec of an ECS task."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Protocol

from ..base import Cloud, CloudHostname
from ..base import SpecGenerator as _BaseSpecGenerator

_HEALTH_STATUS = {"UNKNOWN": 0, "HEALTHY": 1, "UNHEALTHY": 2}


class Provider(str, Enum):
    """Cloud providers an ECS task can run on."""

    ECS = "ecs"
    FARGATE = "fargate"
    ECS_ANYWHERE = "ecs-anywhere"

    def __str__(self) -> str:
        return self.value


class _TaskMetadataGetter(Protocol):
    async def get_task_metadata(self) -> Mapping[str, Any]: ...


def _path_base(path: str) -> str:
    if not path:
        return "."
    path = path.rstrip("/")
    if not path:
        return "/"
    return path.rsplit("/", 1)[-1]


def get_task_id(task_arn: str) -> str:
    """Return the task id, the last element of the ARN's resource."""
    if not task_arn.startswith("arn:"):
        raise ValueError("arn: invalid prefix")
    sections = task_arn.split(":", 5)
    if len(sections) != 6:
        raise ValueError("arn: not enough sections")
    return _path_base(sections[5])


def _compact(fields: Mapping[str, Any]) -> dict[str, Any]:
    return {
        key: value
        for key, value in fields.items()
        if not (value is None or value == "" or (isinstance(value, (list, dict)) and not value))
    }


def _limits(limits: Mapping[str, Any] | None) -> dict[str, Any]:
    limits = limits or {}
    cpu = limits.get("CPU")
    memory = limits.get("Memory")
    return _compact(
        {
            "cpu": None if cpu is None else float(cpu),
            "memory": None if memory is None else int(memory),
        }
    )


def _port(port: Mapping[str, Any]) -> dict[str, Any]:
    return _compact(
        {
            "container_port": port.get("ContainerPort") or None,
            "protocol": port.get("Protocol"),
            "host_port": port.get("HostPort") or None,
        }
    )


def _network(network: Mapping[str, Any]) -> dict[str, Any]:
    return _compact(
        {
            "network_mode": network.get("NetworkMode"),
            "ipv4_addresses": network.get("IPv4Addresses"),
            "ipv6_addresses": network.get("IPv6Addresses"),
        }
    )


def _health(health: Mapping[str, Any]) -> dict[str, Any]:
    status = health.get("status")
    code = _HEALTH_STATUS.get(status, 0) if isinstance(status, str) else int(status or 0)
    return _compact(
        {
            "status": code or None,
            "status_since": health.get("statusSince"),
            "exit_code": health.get("exitCode") or None,
            "output": health.get("output"),
        }
    )


def _container(c: Mapping[str, Any]) -> dict[str, Any]:
    spec = _compact(
        {
            "docker_id": c.get("DockerId"),
            "docker_name": c.get("DockerName"),
            "name": c.get("Name"),
            "image": c.get("Image"),
            "image_id": c.get("ImageID"),
            "ports": [_port(p) for p in c.get("Ports") or []],
            "labels": c.get("Labels"),
            "desired_status": c.get("DesiredStatus"),
            "known_status": c.get("KnownStatus"),
            "exit_code": c.get("ExitCode"),
            "created_at": c.get("CreatedAt"),
            "started_at": c.get("StartedAt"),
            "finished_at": c.get("FinishedAt"),
            "type": c.get("Type"),
            "networks": [_network(n) for n in c.get("Networks") or []],
            "health": _health(c["Health"]) if c.get("Health") is not None else None,
        }
    )
    spec["limits"] = _limits(c.get("Limits"))
    if c.get("Health") is not None:
        spec["health"] = _health(c["Health"])
    return spec


def generate_spec(meta: Mapping[str, Any]) -> dict[str, Any]:
    """Build the task spec reported as cloud metadata.

    Empty values are left out, as in the JSON form of the spec; ``limits``
    is always present.
    """
    task_arn = meta.get("TaskARN", "")
    spec = _compact(
        {
            "cluster": meta.get("Cluster"),
            "task": get_task_id(task_arn),
            "task_arn": task_arn,
            "task_family": meta.get("Family"),
            "task_version": meta.get("Revision"),
            "desired_status": meta.get("DesiredStatus"),
            "known_status": meta.get("KnownStatus"),
            "containers": [_container(c) for c in meta.get("Containers") or []],
            "pull_started_at": meta.get("PullStartedAt"),
            "pull_stopped_at": meta.get("PullStoppedAt"),
            "execution_stopped_at": meta.get("ExecutionStoppedAt"),
        }
    )
    spec["limits"] = _limits(meta.get("Limits"))
    return spec


class SpecGenerator(_BaseSpecGenerator):
    """Reports the task spec with the task id as host name."""

    def __init__(self, client: _TaskMetadataGetter, provider: Provider | str) -> None:
        self._client = client
        self._provider = provider

    async def generate(self) -> CloudHostname:
        meta = await self._client.get_task_metadata()
        spec = generate_spec(meta)
        return CloudHostname(
            cloud=Cloud(provider=str(self._provider), meta_data=spec),
            hostname=spec["task"],
        )