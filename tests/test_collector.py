import pytest

from container_agent.metric.collector import Collector
from container_agent.metric.generator import Generator, GraphDefsMetric, GraphDefsParam


class _MockGenerator(Generator):
    def __init__(self, values, values_error, graph_defs, graph_error):
        self.values = values
        self.values_error = values_error
        self.graph_defs = graph_defs
        self.graph_error = graph_error

    async def generate(self):
        if self.values_error is not None:
            raise self.values_error
        return self.values

    async def get_graph_defs(self):
        if self.graph_error is not None:
            raise self.graph_error
        return self.graph_defs


def _mock_generators():
    g1 = _MockGenerator(
        {"custom.foo.bar": 10.0, "custom.foo.baz": 20.0, "custom.foo.qux": 30.0},
        None,
        [
            GraphDefsParam(
                name="custom.foo",
                display_name="Foo graph",
                unit="float",
                metrics=[
                    GraphDefsMetric("custom.foo.bar", "Bar", False),
                    GraphDefsMetric("custom.foo.baz", "Baz", False),
                    GraphDefsMetric("custom.foo.qux", "Qux", False),
                ],
            )
        ],
        None,
    )
    g2 = _MockGenerator(
        {
            "custom.qux.a.bar": 12.39,
            "custom.qux.a.baz": 13.41,
            "custom.qux.b.bar": 14.43,
            "custom.qux.b.baz": 15.45,
        },
        None,
        [
            GraphDefsParam(
                name="custom.qux.#",
                display_name="Qux graph",
                unit="percentage",
                metrics=[
                    GraphDefsMetric("custom.qux.#.bar", "Bar", False),
                    GraphDefsMetric("custom.qux.#.baz", "Baz", False),
                ],
            )
        ],
        None,
    )
    g3 = _MockGenerator({"loadavg5": 2.39, "cpu.user.percentage": 29.2}, None, [], None)
    g4 = _MockGenerator(
        {},
        RuntimeError("failed to fetch metrics"),
        [],
        RuntimeError("failed to create graph definition"),
    )
    return [g1, g2, g3, g4]


@pytest.mark.asyncio
async def test_collector_collect():
    values = await Collector(_mock_generators()).collect()
    assert values == {
        "loadavg5": 2.39,
        "cpu.user.percentage": 29.2,
        "custom.foo.bar": 10.0,
        "custom.foo.baz": 20.0,
        "custom.foo.qux": 30.0,
        "custom.qux.a.bar": 12.39,
        "custom.qux.a.baz": 13.41,
        "custom.qux.b.bar": 14.43,
        "custom.qux.b.baz": 15.45,
    }


@pytest.mark.asyncio
async def test_collector_collect_graph_defs_skips_failures():
    graph_defs = await Collector(_mock_generators()).collect_graph_defs()
    assert [g.name for g in graph_defs] == ["custom.foo", "custom.qux.#"]


@pytest.mark.asyncio
async def test_collector_without_generators():
    collector = Collector([])
    assert await collector.collect() == {}
    assert await collector.collect_graph_defs() == []