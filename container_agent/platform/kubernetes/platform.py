"""The Kubernetes platform."""

from __future__ import annotations

import logging
import re
import ssl
from pathlib import Path
from typing import Any

import httpx

from ...metric.generator import Generator
from ...metric.hostinfo import HostInfoGenerator
from ...metric.interface import InterfaceGenerator
from ..base import Platform, SpecGenerator
from .kubelet import KubeletClient
from .metric import MetricGenerator
from .spec import SpecGenerator as KubernetesSpecGenerator

logger = logging.getLogger(__name__)

TIMEOUT = 3.0

CA_CERTIFICATE_FILE = "/var/run/secrets/kubernetes.io/serviceaccount/ca.crt"
TOKEN_FILE = "/var/run/secrets/kubernetes.io/serviceaccount/token"


def _join_host_port(host: str, port: str) -> str:
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def _ssl_context(ca_cert: bytes | None, insecure_tls: bool) -> ssl.SSLContext:
    if ca_cert:
        try:
            context = ssl.create_default_context(
                cadata=ca_cert.decode("ascii", errors="replace")
            )
        except (ssl.SSLError, ValueError):
            # An unusable certificate leaves the trust store empty.
            context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    else:
        context = ssl.create_default_context()
    if insecure_tls:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def create_http_client(ca_cert: bytes | None, insecure_tls: bool) -> httpx.AsyncClient:
    """Create an HTTP client that never uses a proxy.

    A non-empty ``ca_cert`` replaces the system trust store.
    """
    return httpx.AsyncClient(
        verify=_ssl_context(ca_cert, insecure_tls),
        timeout=TIMEOUT,
        trust_env=False,
    )


def _read_credentials() -> tuple[bytes, str]:
    ca_cert = Path(CA_CERTIFICATE_FILE).read_bytes()
    token = Path(TOKEN_FILE).read_bytes().decode("utf-8", errors="replace")
    return ca_cert, token


def create_kubernetes_platform(
    kubelet_host: str,
    kubelet_port: str,
    use_read_only_port: bool,
    insecure_tls: bool,
    namespace: str,
    pod_name: str,
    ignore_container: re.Pattern[str] | str | None = None,
) -> KubernetesPlatform:
    """Create the platform that talks to the Kubelet directly."""
    ca_cert: bytes | None = None
    token = ""
    scheme = "http"
    if not use_read_only_port:
        scheme = "https"
        ca_cert, token = _read_credentials()
    base_url = f"{scheme}://{_join_host_port(kubelet_host, kubelet_port)}"
    client = KubeletClient(
        create_http_client(ca_cert, insecure_tls),
        token,
        base_url,
        namespace,
        pod_name,
        ignore_container,
    )
    return KubernetesPlatform(client)


def create_eks_on_fargate_platform(
    kubernetes_host: str,
    kubernetes_port: str,
    namespace: str,
    pod_name: str,
    node_name: str,
    ignore_container: re.Pattern[str] | str | None = None,
) -> KubernetesPlatform:
    """Create the platform that reaches the Kubelet through the API server's node proxy."""
    ca_cert, token = _read_credentials()
    base_url = (
        f"https://{_join_host_port(kubernetes_host, kubernetes_port)}"
        f"/api/v1/nodes/{node_name}/proxy"
    )
    client = KubeletClient(
        create_http_client(ca_cert, False),
        token,
        base_url,
        namespace,
        pod_name,
        ignore_container,
    )
    return KubernetesPlatform(client)


class KubernetesPlatform(Platform):
    """Platform of a container running in a Kubernetes pod."""

    def __init__(self, client: Any) -> None:
        self.client = client

    def get_metric_generators(self) -> list[Generator]:
        return [MetricGenerator(self.client, HostInfoGenerator()), InterfaceGenerator()]

    def get_spec_generators(self) -> list[SpecGenerator]:
        return [KubernetesSpecGenerator(self.client)]

    async def get_custom_identifier(self) -> str:
        pod = await self.client.get_pod()
        return str((pod.get("metadata") or {}).get("uid") or "") + ".kubernetes"

    async def status_running(self) -> bool:
        try:
            pod = await self.client.get_pod()
        except Exception as exc:
            logger.warning("failed to get metadata: %s", exc)
            return False
        phase = str((pod.get("status") or {}).get("phase") or "")
        return phase.casefold() == "running"