"""
Stream Module
=============

SBF stream ingestion components.

This module provides the ingestion layer of the exporter:
    - Frame: Validated SBF block (header fields + payload)
    - FrameScanner: Sync/resync state machine over a StreamReader
    - StationSupervisor: Per-station connect/scan/decode/reconnect loop

Example:
    from gnss_exporter.stream import StationSupervisor

    supervisor = StationSupervisor(station, sink)
    task = asyncio.create_task(supervisor.run())
"""

from gnss_exporter.stream.frame import Frame
from gnss_exporter.stream.scanner import FrameScanner, ScannerMetrics
from gnss_exporter.stream.supervisor import StationSupervisor, SupervisorMetrics


__all__ = [
    "Frame",
    "FrameScanner",
    "ScannerMetrics",
    "StationSupervisor",
    "SupervisorMetrics",
]
