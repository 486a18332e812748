"""Host spec of a Kubernetes pod."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from ..base import Cloud, CloudHostname, PlatformType
from ..base import SpecGenerator as _BaseSpecGenerator


class _PodGetter(Protocol):
    async def get_pod(self) -> Mapping[str, Any]: ...


def _is_empty(value: Any) -> bool:
    return (
        value is None
        or value is False
        or value == ""
        or (isinstance(value, (list, dict)) and not value)
    )


def _compact(fields: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in fields.items() if not _is_empty(value)}


def _owner_reference(ref: Mapping[str, Any]) -> dict[str, Any]:
    return _compact({"kind": ref.get("kind"), "name": ref.get("name"), "uid": ref.get("uid")})


def _condition(cond: Mapping[str, Any]) -> dict[str, Any]:
    return _compact({"type": cond.get("type"), "status": cond.get("status")})


def _port(port: Mapping[str, Any]) -> dict[str, Any]:
    spec = {
        "containerport": int(port.get("containerPort") or 0),
        "hostport": int(port.get("hostPort") or 0),
        "name": port.get("name") or "",
        "protocol": port.get("protocol") or "",
    }
    if port.get("hostIP"):
        spec["hostip"] = port["hostIP"]
    return spec


def _container(c: Mapping[str, Any], container_ids: Mapping[str, str]) -> dict[str, Any]:
    name = c.get("name") or ""
    limits = (c.get("resources") or {}).get("limits") or {}
    spec: dict[str, Any] = {"name": name}
    spec.update(
        _compact(
            {
                "image": c.get("image"),
                "command": c.get("command"),
                "args": c.get("args"),
            }
        )
    )
    spec["resources"] = {"limits": {str(k): str(v) for k, v in limits.items()}} if limits else {}
    spec.update(
        _compact(
            {
                "ports": [_port(p) for p in c.get("ports") or []],
                "containerID": container_ids.get(name),
            }
        )
    )
    return spec


def build_pod_spec(pod: Mapping[str, Any]) -> dict[str, Any]:
    """Build the pod spec reported as cloud metadata.

    Empty values are left out, as in the JSON form of the spec.
    """
    meta = pod.get("metadata") or {}
    pod_spec = pod.get("spec") or {}
    status = pod.get("status") or {}

    container_ids: dict[str, str] = {}
    for cs in status.get("containerStatuses") or []:
        container_ids.setdefault(cs.get("name") or "", cs.get("containerID") or "")

    return _compact(
        {
            "namespace": meta.get("namespace"),
            "name": meta.get("name"),
            "uid": meta.get("uid"),
            "resourceVersion": meta.get("resourceVersion"),
            "labels": meta.get("labels"),
            "ownerReferences": [_owner_reference(r) for r in meta.get("ownerReferences") or []],
            "hostNetwork": bool(pod_spec.get("hostNetwork")),
            "nodeName": pod_spec.get("nodeName"),
            "containers": [
                _container(c, container_ids) for c in pod_spec.get("containers") or []
            ],
            "phase": status.get("phase"),
            "hostIP": status.get("hostIP"),
            "podIP": status.get("podIP"),
            "conditions": [_condition(c) for c in status.get("conditions") or []],
            "startTime": status.get("startTime"),
        }
    )


class SpecGenerator(_BaseSpecGenerator):
    """Reports the pod spec with the pod name as host name."""

    def __init__(self, client: _PodGetter) -> None:
        self._client = client

    async def generate(self) -> CloudHostname:
        pod = await self._client.get_pod()
        spec = build_pod_spec(pod)
        return CloudHostname(
            cloud=Cloud(provider=str(PlatformType.KUBERNETES), meta_data=spec),
            hostname=(pod.get("metadata") or {}).get("name") or "",
        )