import asyncio

import pytest

from container_agent.probe import tcp as tcp_probe
from container_agent.probe.base import ProbeError, ProbeTCPConfig
from container_agent.probe.tcp import TCPProbe


async def _handle(reader, writer):
    writer.close()


@pytest.mark.asyncio
async def test_tcp_probe_ok(monkeypatch):
    monkeypatch.setattr(tcp_probe, "DEFAULT_TIMEOUT", 0.1)
    server = await asyncio.start_server(_handle, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    try:
        probe = TCPProbe(ProbeTCPConfig(host="127.0.0.1", port=str(port)))
        assert await probe.check() is None
    finally:
        server.close()
        await server.wait_closed()


@pytest.mark.asyncio
async def test_tcp_probe_invalid_port(monkeypatch):
    monkeypatch.setattr(tcp_probe, "DEFAULT_TIMEOUT", 0.1)
    probe = TCPProbe(ProbeTCPConfig(host="127.0.0.1", port="1"))
    with pytest.raises(ProbeError, match=r"tcp probe failed \(127\.0\.0\.1:1\)"):
        await probe.check()