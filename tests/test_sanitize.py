import pytest

from container_agent.metric.sanitize import sanitize_metric_key


@pytest.mark.parametrize(
    ("src", "expected"),
    [
        ("", ""),
        ("foo.bar", "foo_bar"),
        ("foo-^bar.qux#&quux", "foo-_bar_qux__quux"),
    ],
)
def test_sanitize_metric_key(src, expected):
    assert sanitize_metric_key(src) == expected


def test_sanitize_keeps_allowed_characters():
    key = "Abc_019-xyz"
    assert sanitize_metric_key(key) == key