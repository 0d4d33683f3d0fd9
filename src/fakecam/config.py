"""
fakecam Configuration
=====================

This module handles configuration loading for the fake camera.

Configuration Sources (in order of precedence):
    1. Explicit overrides (command-line arguments)
    2. Environment variables
    3. YAML config file
    4. Default values (lowest priority)

Environment Variable Mapping:
    FAKECAM_ADDR        -> server.addr
    FAKECAM_INTERVAL    -> stream.interval_seconds
    FAKECAM_LOG_LEVEL   -> logging.level
    FAKECAM_LOG_FORMAT  -> logging.format

Example:
    from fakecam.config import load_config

    settings = load_config(images=["a.jpeg", "b.png"])
    print(settings.server.host, settings.server.port)
    print(settings.stream.interval_seconds)

Settings are immutable once built and are shared read-only by every
streaming session.
"""

import os
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


logger = logging.getLogger(__name__)


DEFAULT_ADDR = "localhost:8080"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


# =============================================================================
# Configuration Models
# =============================================================================

class ServerConfig(BaseModel):
    """HTTP listen configuration."""

    model_config = ConfigDict(frozen=True)

    addr: str = Field(
        default=DEFAULT_ADDR,
        description="Listen address as host:port",
    )

    @field_validator("addr")
    @classmethod
    def _check_addr(cls, value: str) -> str:
        split_addr(value)
        return value

    @property
    def host(self) -> str:
        return split_addr(self.addr)[0]

    @property
    def port(self) -> int:
        return split_addr(self.addr)[1]


class StreamConfig(BaseModel):
    """Frame pacing configuration."""

    model_config = ConfigDict(frozen=True)

    interval_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Delay between successive frames of one session",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        if value.upper() not in LOG_LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return value.upper()

    @field_validator("format")
    @classmethod
    def _check_format(cls, value: str) -> str:
        if value not in ("json", "text"):
            raise ValueError(f"log format must be json or text, got {value!r}")
        return value


class CameraSettings(BaseModel):
    """
    Main settings class for fakecam.

    Holds the ordered image list plus server, stream and logging
    sections. Frozen so it can be handed to every request without
    locking.
    """

    model_config = ConfigDict(frozen=True)

    images: Tuple[Path, ...] = Field(
        ...,
        description="Image files to cycle, in order",
    )
    server: ServerConfig = Field(default_factory=ServerConfig)
    stream: StreamConfig = Field(default_factory=StreamConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("images")
    @classmethod
    def _check_images(cls, value: Tuple[Path, ...]) -> Tuple[Path, ...]:
        if not value:
            raise ValueError("at least one image path is required")
        return value


# =============================================================================
# Helpers
# =============================================================================

def split_addr(addr: str) -> Tuple[str, int]:
    """
    Split a ``host:port`` listen address.

    IPv6 hosts may be bracketed (``[::1]:8080``).

    Raises:
        ValueError: If the address has no port or the port is out of range
    """
    host, sep, port_str = addr.rpartition(":")
    if not sep or not host:
        raise ValueError(f"listen address must be host:port, got {addr!r}")

    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]

    try:
        port = int(port_str)
    except ValueError:
        raise ValueError(f"invalid port in listen address {addr!r}") from None

    if not 0 <= port <= 65535:
        raise ValueError(f"port out of range in listen address {addr!r}")

    return host, port


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(
    config_path: Optional[str] = None,
    images: Optional[Iterable[str]] = None,
    addr: Optional[str] = None,
    interval: Optional[float] = None,
    log_level: Optional[str] = None,
) -> CameraSettings:
    """
    Load configuration from YAML file, environment and explicit overrides.

    Priority (highest to lowest):
        1. Explicit arguments
        2. Environment variables
        3. YAML config file
        4. Default values

    Args:
        config_path: Path to a YAML file. If None, ./fakecam.yaml is used
            when present.
        images: Image paths; replaces any list from the file when given
        addr: Listen address override
        interval: Pacing interval override in seconds
        log_level: Log level override

    Returns:
        CameraSettings: Validated, immutable settings

    Raises:
        pydantic.ValidationError: If the merged configuration is invalid
        FileNotFoundError: If an explicit config_path does not exist
        ValueError: If the config file is not a YAML mapping
    """
    if config_path is None:
        default_path = Path("fakecam.yaml")
        if default_path.exists():
            config_path = str(default_path)
    elif not Path(config_path).exists():
        raise FileNotFoundError(f"config file not found: {config_path}")

    config_data: Dict[str, Any] = {}
    if config_path:
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
        if not isinstance(config_data, dict):
            raise ValueError(f"config file {config_path} must contain a mapping")

    _apply_env_overrides(config_data)

    if images is not None:
        config_data["images"] = list(images)
    if addr is not None:
        config_data.setdefault("server", {})["addr"] = addr
    if interval is not None:
        config_data.setdefault("stream", {})["interval_seconds"] = interval
    if log_level is not None:
        config_data.setdefault("logging", {})["level"] = log_level

    config_data.setdefault("images", [])

    return CameraSettings.model_validate(config_data)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    if env_addr := os.environ.get("FAKECAM_ADDR"):
        config_data.setdefault("server", {})["addr"] = env_addr

    if env_interval := os.environ.get("FAKECAM_INTERVAL"):
        config_data.setdefault("stream", {})["interval_seconds"] = float(env_interval)

    if env_log := os.environ.get("FAKECAM_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log
    if env_fmt := os.environ.get("FAKECAM_LOG_FORMAT"):
        config_data.setdefault("logging", {})["format"] = env_fmt


def setup_logging(settings: CameraSettings) -> None:
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
