"""Monitoring module - Prometheus metrics for secret provisioning."""

from buildsecrets.monitoring.recorders import Metrics, track_time
from buildsecrets.monitoring.textfile import write_metrics

__all__ = [
    "Metrics",
    "track_time",
    "write_metrics",
]
