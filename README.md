# container-agent

An asyncio library for monitoring containerised workloads. It gathers
container CPU, memory and network metrics, describes the task or pod it runs
in, and posts metrics through a client you supply. It understands Amazon ECS
(EC2, Fargate and ECS Anywhere), Kubernetes through the kubelet, and EKS on
Fargate through the Kubernetes API server's node proxy. It can also hold off
start-up until an application answers an HTTP or TCP readiness probe.

## Metrics — `container_agent.metric`

- `generator.Generator` is the interface every metric source implements:
  `await generate()` returns a dict of metric name to value, and
  `await get_graph_defs()` returns a list of `GraphDefsParam` (each holding
  `GraphDefsMetric` entries). `MetricValue` is one named, timestamped sample.
- `collector.Collector` runs its generators concurrently and merges their
  values and graph definitions. A generator that raises is logged and
  skipped; the others still contribute.
- `sender.Sender` queues batches of `MetricValue` until a host id is set,
  then posts up to the three oldest batches at a time through a
  `sender.MetricClient`, an abstract class you implement with
  `post_host_metric_values_by_host_id()` and `create_graph_defs()`. A failed
  post is logged and its batches stay queued; at most 360 batches are kept.
- `manager.Manager` ties the two together: `await run(interval)` collects and
  posts every `interval` seconds until cancelled (each round may take up to
  a minute, and an error raised by a round ends `run` with that error),
  `set_host_id()` releases the queue, and
  `await collect_and_post_graph_defs()` registers graph definitions.
- `interface.InterfaceGenerator` reports received and sent bytes per second
  for each network interface, skipping `veth*` devices.
- `hostinfo.HostInfoGenerator().generate()` returns the host's total memory
  in bytes and the number of usable CPU cores.
- `sanitize.sanitize_metric_key()` replaces every character other than
  letters, digits, `_` and `-` with `_`:

  ```python
  from container_agent.metric.sanitize import sanitize_metric_key

  sanitize_metric_key("foo-^bar.qux#&quux")  # "foo-_bar_qux__quux"
  ```

Rate metrics need two samples: the first call of a generator only records a
baseline and returns no values, and a baseline older than ten minutes is
replaced the same way.

```python
import asyncio

from container_agent.metric.manager import Manager
from container_agent.metric.sender import MetricClient
from container_agent.platform.none import NonePlatform


class PrintClient(MetricClient):
    async def post_host_metric_values_by_host_id(self, host_id, metric_values):
        print(host_id, metric_values)

    async def create_graph_defs(self, graph_defs):
        print(graph_defs)


async def main():
    manager = Manager(NonePlatform().get_metric_generators(), PrintClient())
    manager.set_host_id("example-host")
    await manager.run(60)


asyncio.run(main())
```

## Platforms — `container_agent.platform`

`base.Platform` is the interface for a runtime environment: it hands out
metric generators and spec generators, `await get_custom_identifier()` and
`await status_running()`. `base.PlatformType` lists the platform names.
Spec generators return a `base.CloudHostname`, holding a `base.Cloud`
(provider and metadata) and the host name to report.

- `none.NonePlatform` — no generators, an empty identifier, always running.
- `ecs` — `await platform.create_ecs_platform(metadata_uri, execution_env,
  ignore_container)` builds an `ECSPlatform`. `execution_env` must be
  `AWS_ECS_FARGATE`, `AWS_ECS_EC2` or `ECS_EXTERNAL`; anything else raises
  `ValueError`. It retries the task metadata endpoint every three seconds
  until it answers, detects the network mode from the first container, and
  adds `InterfaceGenerator` unless the task uses bridge networking. The spec
  reports the task id as host name. `taskmetadata.TaskMetadataClient` talks to
  the endpoint directly, never through a proxy, raises `StatusCodeError` on
  any non-200 answer, and is an async context manager (or call `aclose()`).
- `kubernetes` — `platform.create_kubernetes_platform()` reaches the kubelet
  on its secure port, reading the service account CA certificate and token
  from `/var/run/secrets/kubernetes.io/serviceaccount/`, or over plain HTTP on
  its read-only port (`kubelet.DEFAULT_PORT` and
  `kubelet.DEFAULT_READ_ONLY_PORT` hold the usual ports).
  `platform.create_eks_on_fargate_platform()` goes through the API server's
  `/api/v1/nodes/<node>/proxy`. Memory and CPU limits come from the pod spec,
  falling back to the host's totals; `metric.parse_quantity()` reads
  quantities such as `128Mi`, `1G` or `250m`. The custom identifier is the pod
  UID followed by `.kubernetes`, and the pod counts as running when its phase
  is `Running` in any letter case.

Both platform clients accept an optional regular expression (compiled or as a
string); containers whose name matches it are left out of metrics and specs.

## Probes — `container_agent.probe`

`factory.new_probe()` turns a `factory.ProbeConfig` into an `http.HTTPProbe`
or a `tcp.TCPProbe` (configured with `base.ProbeHTTPConfig` or
`base.ProbeTCPConfig`, and for HTTP any `base.Header` entries), or returns
`None` when neither is set. `await base.wait(probe)` sleeps for the probe's
initial delay and then checks it every period (ten seconds by default) until
it succeeds. A failed check raises `base.ProbeError`.

- HTTP probes default to `GET` on `http://localhost`, follow redirects,
  succeed when the final status is 2xx or 3xx, honour a `Host` header, a
  user agent and an explicit proxy (and no proxy from the environment), and
  time out after one second unless told otherwise.
- TCP probes succeed once a connection opens, with the same default timeout.

## What it does not do

- There is no command-line program and no configuration file reader; you
  build the pieces in your own code.
- There is no client for a monitoring service: `MetricClient` is yours to
  implement.
- Host specs are produced by the platforms' spec generators, but nothing here
  collects them into a host record or posts them.
- Probes are HTTP and TCP only; there are no command-running probes and no
  plugin metrics.

## Requirements

Python 3.10 or later, with `httpx` and `psutil`. Tests need the `test` extra.