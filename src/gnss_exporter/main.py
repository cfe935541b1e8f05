"""
GNSS Exporter Main Application
==============================

FastAPI entry point for the exporter.

One StationSupervisor task is started per configured station when the
application starts, and all of them are stopped on shutdown. Every
supervisor writes into the same PrometheusSink, which /metrics renders.

Endpoints:
    GET  /          - Service information
    GET  /health    - Liveness probe (is process alive?)
    GET  /ready     - Readiness probe (supervisors running?)
    GET  /stations  - Per-station status, counters and current gauges
    GET  /metrics   - Prometheus exposition
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List

from fastapi import FastAPI, Response
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from gnss_exporter import __version__
from gnss_exporter.config import StationConfig, load_config, setup_logging
from gnss_exporter.metrics import PrometheusSink
from gnss_exporter.models.sample import MetricKind
from gnss_exporter.stream import StationSupervisor


logger = logging.getLogger(__name__)


# =============================================================================
# Global State
# =============================================================================

settings = load_config()
setup_logging(settings)

# Gauges are registered once per process on the default registry
sink = PrometheusSink()

_supervisors: Dict[str, StationSupervisor] = {}
_tasks: List[asyncio.Task] = []
_startup_time: float = 0.0


def get_supervisors() -> Dict[str, StationSupervisor]:
    return _supervisors


def station_gauges(station: str) -> Dict[str, float]:
    """Gauges published so far for one station, keyed by metric name."""
    return {
        kind.value: value
        for kind in MetricKind
        if (value := sink.get_gauge(kind, station)) is not None
    }


# =============================================================================
# Supervisor Factory
# =============================================================================

def create_supervisor(station: StationConfig) -> StationSupervisor:
    """Create a supervisor for one station from the loaded settings."""
    return StationSupervisor(
        station=station,
        sink=sink,
        connect_timeout=settings.supervisor.connect_timeout_seconds,
        connect_retry_delay=settings.supervisor.connect_retry_delay_seconds,
        reconnect_delay=settings.supervisor.reconnect_delay_seconds,
        validate_crc=settings.stream.validate_crc,
    )


# =============================================================================
# Lifespan Management
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start one supervisor task per station; stop them on shutdown."""
    global _startup_time

    _startup_time = time.time()
    logger.info(
        f"Starting GNSS exporter {__version__} "
        f"with {len(settings.stations)} station(s)"
    )

    for station in settings.stations:
        supervisor = create_supervisor(station)
        _supervisors[station.name] = supervisor
        _tasks.append(
            asyncio.create_task(supervisor.run(), name=f"station:{station.name}")
        )

    yield

    # Shutdown
    logger.info("Shutting down gracefully...")

    for supervisor in _supervisors.values():
        await supervisor.stop()

    for task in _tasks:
        try:
            await asyncio.wait_for(task, timeout=5.0)
        except asyncio.TimeoutError:
            logger.warning(f"Task {task.get_name()} did not stop in time, cancelled")

    _tasks.clear()
    _supervisors.clear()
    logger.info("Shutdown complete")


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="GNSS Exporter",
    description="Prometheus exporter for Septentrio SBF receiver streams",
    version=__version__,
    lifespan=lifespan,
)


@app.get("/")
async def root() -> JSONResponse:
    """Service information endpoint."""
    return JSONResponse({
        "service": "gnss-exporter",
        "version": __version__,
        "stations": [station.name for station in settings.stations],
        "status": "running",
    })


@app.get("/health")
async def health() -> JSONResponse:
    """
    Liveness probe - is the process alive?

    Always returns 200 if the service is running.
    """
    return JSONResponse({
        "status": "healthy",
        "uptime_seconds": round(time.time() - _startup_time, 1),
    })


@app.get("/ready")
async def ready() -> JSONResponse:
    """
    Readiness probe.

    Returns 200 once every configured station has a running supervisor,
    503 otherwise. A station being disconnected does not make the
    exporter unready; that is what gnss_receiver_connected reports.
    """
    running = sum(1 for s in _supervisors.values() if s.running)
    connected = sum(1 for s in _supervisors.values() if s.connected)

    body = {
        "stations_configured": len(settings.stations),
        "stations_running": running,
        "stations_connected": connected,
    }

    if settings.stations and running == len(settings.stations):
        return JSONResponse({"status": "ready", **body})
    return JSONResponse({"status": "not_ready", **body}, status_code=503)


@app.get("/stations")
async def stations() -> JSONResponse:
    """Connection status, counters and current gauges for every station."""
    return JSONResponse({
        "stations": [
            {**s.status(), "gauges": station_gauges(s.station.name)}
            for s in _supervisors.values()
        ],
    })


@app.get("/metrics")
async def metrics() -> Response:
    """Prometheus exposition of all station gauges."""
    return Response(
        content=generate_latest(sink.registry),
        media_type=CONTENT_TYPE_LATEST,
    )


# =============================================================================
# Main Entry Point
# =============================================================================

def main() -> None:
    """Run the exporter with uvicorn."""
    import uvicorn

    uvicorn.run(
        app,
        host=settings.server.host,
        port=settings.server.port,
        reload=False,
    )


if __name__ == "__main__":
    main()
