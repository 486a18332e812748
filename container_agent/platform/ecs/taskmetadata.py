"""Client of the ECS task metadata endpoint."""

from __future__ import annotations

import posixpath
import re
from typing import Any

import httpx

METADATA_PATH = "/task"
STATS_PATH = "/task/stats"
TIMEOUT = 3.0

_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
    '"': '\\"',
}


def _quote(data: bytes) -> str:
    text = data.decode("utf-8", errors="replace")
    parts = []
    for ch in text:
        code = ord(ch)
        if ch in _ESCAPES:
            parts.append(_ESCAPES[ch])
        elif ch.isprintable():
            parts.append(ch)
        elif code < 0x100:
            parts.append(f"\\x{code:02x}")
        elif code < 0x10000:
            parts.append(f"\\u{code:04x}")
        else:
            parts.append(f"\\U{code:08x}")
    return '"' + "".join(parts) + '"'


def _join_path(base: str, endpoint: str) -> str:
    joined = "/".join(part for part in (base, endpoint) if part)
    return posixpath.normpath(joined) if joined else ""


class StatusCodeError(Exception):
    """Raised when the endpoint answers with a status other than 200."""

    def __init__(self, status_code: int, url: str, body: bytes) -> None:
        super().__init__(f"got status code {status_code} (url: {url}, body: {_quote(body)})")
        self.status_code = status_code
        self.url = url
        self.body = body


class TaskMetadataClient:
    """Fetches task metadata and container stats, bypassing any proxy.

    Containers whose name matches ``ignore_container`` are left out.
    """

    def __init__(
        self,
        metadata_uri: str,
        ignore_container: re.Pattern[str] | str | None = None,
    ) -> None:
        self._url = httpx.URL(metadata_uri)
        if isinstance(ignore_container, str):
            ignore_container = re.compile(ignore_container)
        self._ignore_container = ignore_container
        self._http = httpx.AsyncClient(timeout=TIMEOUT, trust_env=False)

    async def __aenter__(self) -> TaskMetadataClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP connections."""
        await self._http.aclose()

    async def _get(self, endpoint: str) -> Any:
        url = self._url.copy_with(path=_join_path(self._url.path, endpoint))
        response = await self._http.get(url)
        if response.status_code != 200:
            raise StatusCodeError(response.status_code, str(response.request.url), response.content)
        return response.json()

    async def get_task_metadata(self) -> dict[str, Any]:
        """Return the task metadata document."""
        data = await self._get(METADATA_PATH) or {}
        if self._ignore_container is not None:
            pattern = self._ignore_container
            data["Containers"] = [
                container
                for container in data.get("Containers") or []
                if not pattern.search(container.get("Name", ""))
            ]
        return data

    async def get_task_stats(self) -> dict[str, Any]:
        """Return the stats of the task's containers keyed by docker id."""
        all_stats = await self._get(STATS_PATH) or {}
        meta = await self.get_task_metadata()
        result: dict[str, Any] = {}
        for container in meta.get("Containers") or []:
            docker_id = container.get("DockerId", "")
            if docker_id in all_stats:
                result[docker_id] = all_stats[docker_id]
        return result