from container_agent.probe.base import ProbeHTTPConfig, ProbeTCPConfig
from container_agent.probe.factory import ProbeConfig, new_probe
from container_agent.probe.http import HTTPProbe
from container_agent.probe.tcp import TCPProbe


def test_new_probe_http():
    http_config = ProbeHTTPConfig(host="localhost", path="/healthy")
    probe = new_probe(
        ProbeConfig(http=http_config, initial_delay_seconds=3, period_seconds=5, timeout_seconds=2)
    )
    assert isinstance(probe, HTTPProbe)
    assert probe.config is http_config
    assert (probe.initial_delay, probe.period, probe.timeout) == (3.0, 5.0, 2.0)


def test_new_probe_tcp():
    tcp_config = ProbeTCPConfig(host="localhost", port="8080")
    probe = new_probe(ProbeConfig(tcp=tcp_config, period_seconds=7))
    assert isinstance(probe, TCPProbe)
    assert probe.config is tcp_config
    assert probe.period == 7.0
    assert probe.initial_delay == 0.0


def test_new_probe_prefers_http():
    http_config = ProbeHTTPConfig(host="localhost", path="/ready")
    tcp_config = ProbeTCPConfig(host="localhost", port="8080")
    probe = new_probe(ProbeConfig(http=http_config, tcp=tcp_config))
    assert isinstance(probe, HTTPProbe)
    assert probe.config is http_config
    assert probe.config.path == "/ready"


def test_new_probe_without_settings():
    assert new_probe(ProbeConfig()) is None