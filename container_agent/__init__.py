"""Container monitoring: metrics, host specs per platform and readiness probes."""

__version__ = "0.8.0"