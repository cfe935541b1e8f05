"""
GNSS Exporter Configuration
===========================

This module handles configuration loading for the exporter.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    GNSS_EXPORTER_CONFIG -> path of the YAML file
    GNSS_SERVER_PORT     -> server.port
    PORT                 -> server.port (takes precedence)
    GNSS_LOG_LEVEL       -> logging.level
    GNSS_LOG_FORMAT      -> logging.format
    GNSS_VALIDATE_CRC    -> stream.validate_crc

Example config.yaml:
    server:
      port: 9101
    stations:
      - name: base-1
        host: 192.168.1.10
        port: 28784

Example:
    from gnss_exporter.config import load_config

    settings = load_config("config.yaml")
    for station in settings.stations:
        print(station.name, station.address)
"""

import os
import logging
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


logger = logging.getLogger(__name__)


_TRUE_VALUES = {"1", "true", "yes", "on"}


# =============================================================================
# Configuration Models
# =============================================================================

class StationConfig(BaseModel):
    """One monitored receiver."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Station name (metric label)")
    host: str = Field(..., min_length=1, description="Receiver host or IP")
    port: int = Field(..., ge=1, le=65535, description="Receiver SBF TCP port")

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


class SupervisorConfig(BaseModel):
    """Per-station connection supervision timing."""

    connect_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout for a single connection attempt",
    )
    connect_retry_delay_seconds: float = Field(
        default=10.0,
        ge=0,
        description="Delay after a failed connection attempt",
    )
    reconnect_delay_seconds: float = Field(
        default=5.0,
        ge=0,
        description="Delay after an established stream is lost",
    )


class StreamConfig(BaseModel):
    """SBF stream handling."""

    validate_crc: bool = Field(
        default=False,
        description="Drop blocks whose CRC field does not match",
    )


class ServerConfig(BaseModel):
    """Metrics server configuration."""

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=9101, ge=1, le=65535, description="Bind port")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for the exporter.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    server: ServerConfig = Field(default_factory=ServerConfig)
    stations: List[StationConfig] = Field(default_factory=list)
    supervisor: SupervisorConfig = Field(default_factory=SupervisorConfig)
    stream: StreamConfig = Field(default_factory=StreamConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("stations")
    @classmethod
    def validate_unique_names(cls, v: List[StationConfig]) -> List[StationConfig]:
        """Ensure station names are unique (they are used as metric labels)."""
        seen = set()
        for station in v:
            if station.name in seen:
                raise ValueError(f"Duplicate station name: {station.name}")
            seen.add(station.name)
        return v


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, uses GNSS_EXPORTER_CONFIG
            or searches common locations.

    Returns:
        Settings: Loaded configuration

    Raises:
        pydantic.ValidationError: If the configuration is invalid
    """
    if config_path is None:
        config_path = os.environ.get("GNSS_EXPORTER_CONFIG")

    # Find config file
    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path("/etc/gnss-exporter/config.yaml"),
            Path(__file__).parent.parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    # Load from YAML if exists
    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.warning("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Server settings (PORT wins, as on most container platforms)
    if env_port := os.environ.get("PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)
    elif env_port := os.environ.get("GNSS_SERVER_PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)

    # Stream settings
    if env_crc := os.environ.get("GNSS_VALIDATE_CRC"):
        config_data.setdefault("stream", {})["validate_crc"] = env_crc.lower() in _TRUE_VALUES

    # Logging settings
    if env_log := os.environ.get("GNSS_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log
    if env_fmt := os.environ.get("GNSS_LOG_FORMAT"):
        config_data.setdefault("logging", {})["format"] = env_fmt


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
