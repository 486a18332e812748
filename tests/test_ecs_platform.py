import asyncio

import httpx
import pytest
import respx

from container_agent.metric.interface import InterfaceGenerator
from container_agent.platform.ecs.metric import MetricGenerator
from container_agent.platform.ecs.platform import (
    ECSPlatform,
    NetworkMode,
    create_ecs_platform,
    detect_network_mode,
    get_task_metadata,
    is_running,
    resolve_provider,
)
from container_agent.platform.ecs.spec import Provider
from container_agent.platform.ecs.spec import SpecGenerator as ECSSpecGenerator


@pytest.mark.parametrize(
    "status, expected",
    [("running", False), ("Running", False), ("RUNNING", True), ("PENDING", False), ("", False)],
)
def test_is_running(status, expected):
    assert is_running(status) is expected


@pytest.mark.parametrize(
    "env, expected",
    [
        ("AWS_ECS_FARGATE", Provider.FARGATE),
        ("AWS_ECS_EC2", Provider.ECS),
        ("ECS_EXTERNAL", Provider.ECS_ANYWHERE),
    ],
)
def test_resolve_provider(env, expected):
    assert resolve_provider(env) is expected


@pytest.mark.parametrize("env", ["unknown", ""])
def test_resolve_provider_unknown(env):
    with pytest.raises(ValueError, match="unknown execution env"):
        resolve_provider(env)


def _meta(mode):
    return {"Containers": [{"Networks": [{"NetworkMode": mode}]}]}


@pytest.mark.parametrize(
    "meta",
    [
        {},
        {"Containers": [{}]},
        {"Containers": [{"Networks": [{}]}]},
        _meta("nat"),
    ],
)
def test_detect_network_mode_errors(meta):
    with pytest.raises(ValueError):
        detect_network_mode(meta)


@pytest.mark.parametrize(
    "mode, expected",
    [
        ("default", NetworkMode.BRIDGE),
        ("bridge", NetworkMode.BRIDGE),
        ("host", NetworkMode.HOST),
        ("awsvpc", NetworkMode.AWSVPC),
    ],
)
def test_detect_network_mode(mode, expected):
    assert detect_network_mode(_meta(mode)) is expected


class FlakyClient:
    def __init__(self, failures, meta=None):
        self.failures = failures
        self.meta = meta if meta is not None else {}
        self.calls = 0

    async def get_task_metadata(self):
        self.calls += 1
        if self.failures is None or self.calls <= self.failures:
            raise RuntimeError("/task api error")
        return self.meta


@pytest.mark.asyncio
async def test_get_task_metadata_retries_until_success():
    client = FlakyClient(3, {"KnownStatus": "RUNNING"})
    meta = await get_task_metadata(client, 0.01)
    assert meta == {"KnownStatus": "RUNNING"}
    assert client.calls == 4


@pytest.mark.asyncio
async def test_get_task_metadata_stops_when_cancelled():
    client = FlakyClient(None)
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(get_task_metadata(client, 0.01), 0.1)
    assert client.calls >= 1


@pytest.mark.asyncio
async def test_status_running():
    platform = ECSPlatform(FlakyClient(0, {"KnownStatus": "RUNNING"}), Provider.ECS, NetworkMode.HOST)
    assert await platform.status_running() is True
    pending = ECSPlatform(FlakyClient(0, {"KnownStatus": "PENDING"}), Provider.ECS, NetworkMode.HOST)
    assert await pending.status_running() is False


@pytest.mark.asyncio
async def test_status_running_on_error():
    platform = ECSPlatform(FlakyClient(None), Provider.ECS, NetworkMode.HOST)
    assert await platform.status_running() is False


@pytest.mark.asyncio
async def test_custom_identifier_is_empty():
    platform = ECSPlatform(FlakyClient(0), Provider.ECS, NetworkMode.HOST)
    assert await platform.get_custom_identifier() == ""


@pytest.mark.parametrize(
    "mode, expected",
    [
        (NetworkMode.BRIDGE, [MetricGenerator]),
        (NetworkMode.HOST, [MetricGenerator, InterfaceGenerator]),
        (NetworkMode.AWSVPC, [MetricGenerator, InterfaceGenerator]),
    ],
)
def test_metric_generators(mode, expected):
    platform = ECSPlatform(FlakyClient(0), Provider.ECS, mode)
    assert [type(g) for g in platform.get_metric_generators()] == expected


def test_spec_generators():
    platform = ECSPlatform(FlakyClient(0), Provider.FARGATE, NetworkMode.AWSVPC)
    assert [type(g) for g in platform.get_spec_generators()] == [ECSSpecGenerator]


@pytest.mark.asyncio
async def test_create_ecs_platform():
    meta = {
        "TaskARN": "arn:aws:ecs:us-east-1:000000000000:task/task-id",
        "Containers": [
            {"DockerId": "a", "Name": "app", "Networks": [{"NetworkMode": "awsvpc"}]}
        ],
    }
    with respx.mock:
        respx.get("http://metadata.test/v3/task").mock(return_value=httpx.Response(200, json=meta))
        platform = await create_ecs_platform("http://metadata.test/v3", "AWS_ECS_FARGATE", None)
        try:
            assert platform.network_mode is NetworkMode.AWSVPC
            assert platform.provider is Provider.FARGATE
        finally:
            await platform.client.aclose()


@pytest.mark.asyncio
async def test_create_ecs_platform_unknown_env():
    with pytest.raises(ValueError, match="unknown execution env"):
        await create_ecs_platform("http://metadata.test/v3", "unknown", None)