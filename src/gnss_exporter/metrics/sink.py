"""
Metric Sink
===========

Destination for decoded per-station values.

This module provides the MetricSink protocol that supervisors depend
on, and the PrometheusSink implementation backing the /metrics
endpoint.

Design Rules:
    - Supervisors only see the MetricSink protocol (injected)
    - Last write wins per (metric, station)
    - Safe to call from every station task concurrently
"""

import logging
from typing import Dict, Optional, Protocol

from prometheus_client import CollectorRegistry, Gauge, REGISTRY

from gnss_exporter.models.sample import MetricKind


logger = logging.getLogger(__name__)

STATION_LABEL = "station"


class MetricSink(Protocol):
    """
    Protocol for metric destinations.

    Implemented by:
        - PrometheusSink (production)
        - RecordingSink in tests
    """

    def set_gauge(self, kind: MetricKind, station: str, value: float) -> None:
        """
        Set the current value of one gauge for one station.

        Args:
            kind: Which gauge to update
            station: Station name (label value)
            value: New value
        """
        ...


class PrometheusSink:
    """
    MetricSink backed by prometheus_client gauges.

    One Gauge per MetricKind, each labelled by station, registered on
    the given registry at construction time.

    Attributes:
        registry: CollectorRegistry the gauges live in

    Example:
        sink = PrometheusSink()
        sink.set_gauge(MetricKind.CPU_LOAD, "base-1", 42)
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None) -> None:
        """
        Create and register all gauges.

        Args:
            registry: Target registry. None = global default registry.
        """
        self.registry = registry if registry is not None else REGISTRY
        self._gauges: Dict[MetricKind, Gauge] = {
            kind: Gauge(
                kind.value,
                kind.help,
                labelnames=[STATION_LABEL],
                registry=self.registry,
            )
            for kind in MetricKind
        }
        logger.debug(f"Registered {len(self._gauges)} station gauges")

    def set_gauge(self, kind: MetricKind, station: str, value: float) -> None:
        self._gauges[kind].labels(station).set(value)

    def get_gauge(self, kind: MetricKind, station: str) -> Optional[float]:
        """Current value of a gauge, or None if never set for this station."""
        return self.registry.get_sample_value(kind.value, {STATION_LABEL: station})
