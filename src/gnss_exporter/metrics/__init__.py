"""
Metrics Module
==============

Metric sink abstraction and its Prometheus implementation.
"""

from gnss_exporter.metrics.sink import STATION_LABEL, MetricSink, PrometheusSink

__all__ = [
    "STATION_LABEL",
    "MetricSink",
    "PrometheusSink",
]
