"""
Data Models
===========

Typed values shared between the decoder, the supervisors and the sink.

Models:
    - MetricKind: Enum of exported gauges (value = Prometheus name)
    - DecodedSample: (kind, station, value) triple
"""

from gnss_exporter.models.sample import METRIC_HELP, DecodedSample, MetricKind

__all__ = [
    "MetricKind",
    "METRIC_HELP",
    "DecodedSample",
]
