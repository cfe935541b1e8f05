"""
GNSS Exporter
=============

Prometheus exporter for Septentrio GNSS receivers.

The exporter keeps a TCP connection open to each configured receiver,
decodes the SBF (Septentrio Binary Format) stream and publishes
selected health and quality fields as per-station gauges.

Components:
    - sbf: Block constants, checksum and field decoding
    - stream: Frame scanning and per-station connection supervision
    - metrics: MetricSink protocol and Prometheus implementation
    - config: YAML + environment configuration

Example:
    gnss-exporter            # serves /metrics using ./config.yaml
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
