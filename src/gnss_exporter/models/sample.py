"""
Sample Models
=============

Metric kinds and decoded samples passed from the SBF decoder to the
metric sink.

Each MetricKind value is the exported Prometheus metric name, so the
sink can register one gauge per kind without a separate lookup table.
"""

from dataclasses import dataclass
from enum import Enum


class MetricKind(str, Enum):
    """
    Exported per-station gauges.

    Attributes:
        SATELLITES_TRACKED: Satellites tracked (MeasEpoch)
        SATELLITES_USED: Satellites used in the PVT solution (PVTGeodetic)
        JAMMING_STATUS: 0=None, 1=Warning, 2=Critical (RFStatus)
        RECEIVER_CONNECTED: 1 while the station's TCP stream is up
        CPU_LOAD: Receiver CPU load percent (ReceiverStatus)
        TEMPERATURE: Receiver internal temperature (ReceiverStatus)
        UPTIME: Receiver uptime in seconds (ReceiverStatus)
        DISK_FREE: Free internal disk space in bytes (DiskStatus)
        QUALITY_OVERALL: Overall quality indicator 0-10 (QualityInd)
        QUALITY_SIGNALS: GNSS signal quality 0-10 (QualityInd)
        QUALITY_RF: RF power quality 0-10 (QualityInd)
    """

    SATELLITES_TRACKED = "gnss_satellites_tracked_total"
    SATELLITES_USED = "gnss_satellites_used_total"
    JAMMING_STATUS = "gnss_jamming_status_code"
    RECEIVER_CONNECTED = "gnss_receiver_connected"

    CPU_LOAD = "gnss_cpu_load_percent"
    TEMPERATURE = "gnss_temperature_celsius"
    UPTIME = "gnss_uptime_seconds"
    DISK_FREE = "gnss_disk_free_bytes"

    QUALITY_OVERALL = "gnss_quality_overall"
    QUALITY_SIGNALS = "gnss_quality_signals"
    QUALITY_RF = "gnss_quality_rf"

    @property
    def help(self) -> str:
        return METRIC_HELP[self]


METRIC_HELP: dict[MetricKind, str] = {
    MetricKind.SATELLITES_TRACKED: "Satellites visible",
    MetricKind.SATELLITES_USED: "Satellites used in solution",
    MetricKind.JAMMING_STATUS: "0=None, 1=Warning, 2=Critical",
    MetricKind.RECEIVER_CONNECTED: "Connection status",
    MetricKind.CPU_LOAD: "CPU Load (0-100)",
    MetricKind.TEMPERATURE: "Internal Temperature",
    MetricKind.UPTIME: "Receiver Uptime",
    MetricKind.DISK_FREE: "Free internal disk space",
    MetricKind.QUALITY_OVERALL: "Overall Quality Indicator (0-10)",
    MetricKind.QUALITY_SIGNALS: "GNSS Signal Quality (0-10)",
    MetricKind.QUALITY_RF: "RF Power Quality (0-10)",
}


@dataclass(frozen=True, slots=True)
class DecodedSample:
    """
    One decoded value for one station.

    Produced by the SBF decoder, forwarded once to the metric sink,
    then discarded.

    Attributes:
        kind: Which gauge this value updates
        station: Station name (metric label)
        value: Numeric value
    """

    kind: MetricKind
    station: str
    value: float

    def __repr__(self) -> str:
        return f"DecodedSample({self.kind.name}, station={self.station!r}, value={self.value:g})"
