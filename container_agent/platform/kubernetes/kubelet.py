"""Client of the Kubelet API for a single pod."""

from __future__ import annotations

import posixpath
import re
from typing import Any

import httpx

from ..ecs.taskmetadata import StatusCodeError

DEFAULT_PORT = "10250"
DEFAULT_READ_ONLY_PORT = "10255"

PODS_PATH = "/pods"
STATS_PATH = "/stats/summary"


def _join_path(base: str, endpoint: str) -> str:
    parts = [part.strip("/") for part in (base, endpoint)]
    return posixpath.normpath("/" + "/".join(part for part in parts if part))


class KubeletClient:
    """Fetches the pod and its stats from the Kubelet.

    Containers whose name matches ``ignore_container`` are left out of the
    results. A non-empty ``token`` is sent as a bearer token.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        token: str,
        base_url: str,
        namespace: str,
        name: str,
        ignore_container: re.Pattern[str] | str | None = None,
    ) -> None:
        self._http = http_client
        self._token = token
        self._url = httpx.URL(base_url)
        self._namespace = namespace
        self._name = name
        if isinstance(ignore_container, str):
            ignore_container = re.compile(ignore_container)
        self._ignore_container = ignore_container

    async def _get(self, endpoint: str) -> Any:
        url = self._url.copy_with(path=_join_path(self._url.path, endpoint))
        headers = {"Authorization": "Bearer " + self._token} if self._token else {}
        response = await self._http.get(url, headers=headers)
        if response.status_code != 200:
            raise StatusCodeError(
                response.status_code, str(response.request.url), response.content
            )
        return response.json()

    def _kept(self, containers: list[dict[str, Any]] | None) -> list[dict[str, Any]]:
        pattern = self._ignore_container
        return [
            container
            for container in containers or []
            if pattern is None or not pattern.search(container.get("name", ""))
        ]

    def _not_found(self) -> LookupError:
        return LookupError(f"pod {self._namespace}.{self._name} not found")

    async def get_pod(self) -> dict[str, Any]:
        """Return the pod object of the configured pod."""
        pod_list = await self._get(PODS_PATH) or {}
        for pod in pod_list.get("items") or []:
            meta = pod.get("metadata") or {}
            if meta.get("namespace", "") == self._namespace and meta.get("name", "") == self._name:
                break
        else:
            raise self._not_found()
        if self._ignore_container is not None:
            spec = pod.get("spec") or {}
            spec["containers"] = self._kept(spec.get("containers"))
            pod["spec"] = spec
        return pod

    async def get_pod_stats(self) -> dict[str, Any]:
        """Return the stats summary entry of the configured pod."""
        summary = await self._get(STATS_PATH) or {}
        for stats in summary.get("pods") or []:
            ref = stats.get("podRef") or {}
            if ref.get("namespace", "") == self._namespace and ref.get("name", "") == self._name:
                break
        else:
            raise self._not_found()
        if self._ignore_container is not None:
            stats["containers"] = self._kept(stats.get("containers"))
        return stats