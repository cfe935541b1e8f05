"""
Station Supervisor
==================

Keeps one receiver's SBF stream connected and decoded.

This module provides the StationSupervisor class which:
    - Connects to the receiver's TCP port with a bounded timeout
    - Feeds the connection into a FrameScanner
    - Decodes every frame and forwards the samples to a MetricSink
    - Publishes the connectivity gauge (0/1)
    - Reconnects forever with fixed delays

State machine:
    DISCONNECTED: connected gauge = 0, try to connect (5s timeout)
        failure -> wait 10s, try again
        success -> CONNECTED
    CONNECTED: connected gauge = 1, scan + decode until the stream ends
        stream end -> close, wait 5s, back to DISCONNECTED

Design Rules:
    - One supervisor per station, run as its own asyncio task
    - No shared state between supervisors except the sink
    - Fixed delays, no backoff growth, no retry limit
    - Transport errors never escape run(); stop() ends it
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional, Tuple

from gnss_exporter.config import StationConfig
from gnss_exporter.metrics.sink import MetricSink
from gnss_exporter.models.sample import MetricKind
from gnss_exporter.sbf.decoder import decode_block
from gnss_exporter.stream.scanner import FrameScanner


logger = logging.getLogger(__name__)


OpenConnection = Callable[
    [str, int],
    Awaitable[Tuple[asyncio.StreamReader, asyncio.StreamWriter]],
]


class SupervisorMetrics:
    """Metrics for StationSupervisor observability."""

    __slots__ = (
        "connect_attempts",
        "connect_failures",
        "connections",
        "frames_received",
        "samples_forwarded",
        "last_frame_at",
    )

    def __init__(self) -> None:
        self.connect_attempts: int = 0
        self.connect_failures: int = 0
        self.connections: int = 0
        self.frames_received: int = 0
        self.samples_forwarded: int = 0
        self.last_frame_at: float = 0.0

    def to_dict(self) -> dict:
        """Export metrics as dict."""
        return {
            "connect_attempts": self.connect_attempts,
            "connect_failures": self.connect_failures,
            "connections": self.connections,
            "frames_received": self.frames_received,
            "samples_forwarded": self.samples_forwarded,
            "last_frame_at": self.last_frame_at,
        }


class StationSupervisor:
    """
    Connection supervisor for one GNSS station.

    Attributes:
        station: Station being supervised
        sink: Destination for decoded samples
        connected: Whether the stream is currently up
        metrics: Operational metrics

    Example:
        supervisor = StationSupervisor(station, sink)

        # Runs until stopped
        task = asyncio.create_task(supervisor.run())

        # Later, stop gracefully
        await supervisor.stop()
        await task
    """

    def __init__(
        self,
        station: StationConfig,
        sink: MetricSink,
        connect_timeout: float = 5.0,
        connect_retry_delay: float = 10.0,
        reconnect_delay: float = 5.0,
        validate_crc: bool = False,
        open_connection: Optional[OpenConnection] = None,
    ) -> None:
        """
        Initialize supervisor.

        Args:
            station: Station to connect to
            sink: MetricSink receiving samples and the connectivity gauge
            connect_timeout: Seconds allowed for one connection attempt
            connect_retry_delay: Seconds to wait after a failed attempt
            reconnect_delay: Seconds to wait after losing a stream
            validate_crc: Passed through to the FrameScanner
            open_connection: Connection factory (default: asyncio.open_connection)
        """
        self.station = station
        self.sink = sink
        self.connect_timeout = connect_timeout
        self.connect_retry_delay = connect_retry_delay
        self.reconnect_delay = reconnect_delay
        self.validate_crc = validate_crc
        self._open_connection = open_connection or asyncio.open_connection

        # State
        self._writer: Optional[asyncio.StreamWriter] = None
        self._connected: bool = False
        self._running: bool = False
        self._stop_event: asyncio.Event = asyncio.Event()

        # Metrics
        self.metrics = SupervisorMetrics()

    @property
    def connected(self) -> bool:
        """Whether the station stream is currently established."""
        return self._connected

    @property
    def running(self) -> bool:
        return self._running

    def status(self) -> dict:
        """Station status for the HTTP surface."""
        return {
            "name": self.station.name,
            "address": self.station.address,
            "connected": self._connected,
            **self.metrics.to_dict(),
        }

    async def run(self) -> None:
        """
        Supervise the station until stopped.

        Never raises for transport errors; they only flip the
        connectivity gauge and trigger a reconnect.
        """
        name = self.station.name
        self._running = True
        self._stop_event.clear()

        logger.info(f"[{name}] Supervisor starting for {self.station.address}")

        while self._running:
            self._set_connected(False)
            self.metrics.connect_attempts += 1

            try:
                reader, writer = await asyncio.wait_for(
                    self._open_connection(self.station.host, self.station.port),
                    timeout=self.connect_timeout,
                )
            except (OSError, asyncio.TimeoutError) as e:
                self.metrics.connect_failures += 1
                logger.warning(
                    f"[{name}] Connection failed ({e!r}). "
                    f"Retrying in {self.connect_retry_delay:g}s..."
                )
                if await self._wait_for_stop(self.connect_retry_delay):
                    break
                continue

            # stop() may have arrived while the connect was pending
            if not self._running:
                await self._close(writer)
                break

            self._writer = writer
            self.metrics.connections += 1
            self._set_connected(True)
            logger.info(f"[{name}] Connected to {self.station.address}")

            try:
                await self._consume(reader)
            except Exception as e:
                logger.exception(f"[{name}] Stream handling error: {e}")
            finally:
                await self._close(writer)

            if not self._running:
                break

            logger.info(
                f"[{name}] Connection lost. "
                f"Reconnecting in {self.reconnect_delay:g}s..."
            )
            if await self._wait_for_stop(self.reconnect_delay):
                break

        self._set_connected(False)
        self._running = False
        logger.info(f"[{name}] Supervisor stopped")

    async def stop(self) -> None:
        """
        Stop supervising gracefully.

        Interrupts any pending delay and closes the live connection,
        which ends the current scan.
        """
        logger.info(f"[{self.station.name}] Supervisor stopping...")
        self._running = False
        self._stop_event.set()

        if self._writer is not None:
            self._writer.close()

    async def _consume(self, reader: asyncio.StreamReader) -> None:
        """Scan frames and forward decoded samples until the stream ends."""
        scanner = FrameScanner(reader, validate_crc=self.validate_crc)

        async for frame in scanner:
            self.metrics.frames_received += 1
            self.metrics.last_frame_at = time.time()

            for sample in decode_block(self.station.name, frame.block_id, frame.payload):
                self.sink.set_gauge(sample.kind, sample.station, sample.value)
                self.metrics.samples_forwarded += 1

        logger.debug(
            f"[{self.station.name}] Scan ended: {scanner.metrics.to_dict()}"
        )

    async def _close(self, writer: asyncio.StreamWriter) -> None:
        self._writer = None
        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            logger.debug(f"[{self.station.name}] Error while closing connection: {e}")

    async def _wait_for_stop(self, delay: float) -> bool:
        """
        Sleep for delay seconds unless stop() is called first.

        Returns:
            True if stop was requested during the wait
        """
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
            return True
        except asyncio.TimeoutError:
            return False

    def _set_connected(self, connected: bool) -> None:
        """Record connectivity; a failing sink never stops supervision."""
        self._connected = connected
        try:
            self.sink.set_gauge(
                MetricKind.RECEIVER_CONNECTED,
                self.station.name,
                1 if connected else 0,
            )
        except Exception as e:
            logger.exception(
                f"[{self.station.name}] Failed to publish connectivity: {e}"
            )
