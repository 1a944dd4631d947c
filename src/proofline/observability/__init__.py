from . import names
from .base import LoggingMetricsHook, MetricsHook, NoOpMetricsHook
from .log import configure_logging

__all__ = [
    "LoggingMetricsHook",
    "MetricsHook",
    "NoOpMetricsHook",
    "configure_logging",
    "names",
]
