"""Normalisation of metric key fragments."""

from __future__ import annotations

import re

_DISALLOWED = re.compile(r"[^A-Za-z0-9_-]")


def sanitize_metric_key(key: str) -> str:
    """Replace every character that is not allowed in a metric key with ``_``."""
    return _DISALLOWED.sub("_", key)