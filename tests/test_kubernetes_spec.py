import copy

import pytest

from container_agent.platform.base import Cloud, CloudHostname
from container_agent.platform.kubernetes.spec import SpecGenerator, build_pod_spec

POD = {
    "metadata": {
        "name": "myapp",
        "namespace": "default",
        "uid": "00000000-0000-0000-0000-000000000001",
        "resourceVersion": "112885",
        "labels": {"app": "myapp"},
    },
    "spec": {
        "containers": [
            {
                "name": "nginx",
                "image": "nginx:alpine",
                "ports": [{"name": "httpd", "containerPort": 80, "protocol": "TCP"}],
                "resources": {},
            },
            {
                "name": "mackerel-container-agent",
                "image": "mackerel-container-agent:0.0.1",
                "resources": {"limits": {"cpu": "250m", "memory": "128Mi"}},
            },
        ],
        "nodeName": "docker-for-desktop",
    },
    "status": {
        "phase": "Running",
        "conditions": [
            {"type": "Initialized", "status": "True"},
            {"type": "Ready", "status": "True"},
            {"type": "PodScheduled", "status": "True"},
        ],
        "hostIP": "192.168.65.3",
        "podIP": "10.1.0.6",
        "startTime": "2018-07-30T07:19:40Z",
        "containerStatuses": [
            {"name": "mackerel-container-agent", "containerID": "docker://agent-container-id"},
            {"name": "nginx", "containerID": "docker://nginx-container-id"},
        ],
    },
}

EXPECTED = {
    "name": "myapp",
    "uid": "00000000-0000-0000-0000-000000000001",
    "namespace": "default",
    "resourceVersion": "112885",
    "labels": {"app": "myapp"},
    "nodeName": "docker-for-desktop",
    "containers": [
        {
            "name": "nginx",
            "image": "nginx:alpine",
            "resources": {},
            "ports": [{"containerport": 80, "hostport": 0, "name": "httpd", "protocol": "TCP"}],
            "containerID": "docker://nginx-container-id",
        },
        {
            "name": "mackerel-container-agent",
            "image": "mackerel-container-agent:0.0.1",
            "resources": {"limits": {"cpu": "250m", "memory": "128Mi"}},
            "containerID": "docker://agent-container-id",
        },
    ],
    "phase": "Running",
    "hostIP": "192.168.65.3",
    "podIP": "10.1.0.6",
    "conditions": [
        {"type": "Initialized", "status": "True"},
        {"type": "Ready", "status": "True"},
        {"type": "PodScheduled", "status": "True"},
    ],
    "startTime": "2018-07-30T07:19:40Z",
}


class FakeClient:
    def __init__(self, pod):
        self.pod = pod

    async def get_pod(self):
        return copy.deepcopy(self.pod)


@pytest.mark.asyncio
async def test_generate_spec():
    got = await SpecGenerator(FakeClient(POD)).generate()
    assert got == CloudHostname(
        cloud=Cloud(provider="kubernetes", meta_data=EXPECTED), hostname="myapp"
    )


@pytest.mark.asyncio
async def test_generate_propagates_client_error():
    class Failing:
        async def get_pod(self):
            raise LookupError("pod default.myapp not found")

    with pytest.raises(LookupError, match="not found"):
        await SpecGenerator(Failing()).generate()


def test_build_pod_spec_owner_references_and_host_network():
    pod = copy.deepcopy(POD)
    pod["metadata"]["ownerReferences"] = [
        {"kind": "ReplicaSet", "name": "myapp-1", "uid": "owner-uid", "controller": True}
    ]
    pod["spec"]["hostNetwork"] = True
    spec = build_pod_spec(pod)
    assert spec["ownerReferences"] == [{"kind": "ReplicaSet", "name": "myapp-1", "uid": "owner-uid"}]
    assert spec["hostNetwork"] is True


def test_build_pod_spec_leaves_out_empty_values():
    spec = build_pod_spec({"metadata": {"name": "solo"}, "spec": {"containers": [{"name": "c"}]}})
    assert spec == {"name": "solo", "containers": [{"name": "c", "resources": {}}]}


def test_build_pod_spec_port_host_ip():
    pod = {
        "spec": {
            "containers": [
                {
                    "name": "web",
                    "ports": [{"containerPort": 8080, "hostPort": 80, "hostIP": "10.0.0.1"}],
                }
            ]
        }
    }
    spec = build_pod_spec(pod)
    assert spec["containers"][0]["ports"] == [
        {"containerport": 8080, "hostport": 80, "name": "", "protocol": "", "hostip": "10.0.0.1"}
    ]