"""
wifi-rrm Configuration
======================

This module handles configuration loading for the RRM service.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    WIFI_RRM_WIFISCAN_BUFFER_SIZE -> modeler.wifi_scan_buffer_size
    WIFI_RRM_MAX_QUEUE_SIZE       -> modeler.max_queue_size
    WIFI_RRM_TARGET_MCS           -> tpc.target_mcs
    WIFI_RRM_GATEWAY_URL          -> gateway.base_url
    WIFI_RRM_GATEWAY_TIMEOUT      -> gateway.timeout_seconds
    WIFI_RRM_LOG_LEVEL            -> logging.level
    WIFI_RRM_LOG_FORMAT           -> logging.format

Example:
    from wifi_rrm.config import settings

    print(settings.modeler.wifi_scan_buffer_size)
    print(settings.tpc.target_mcs)
"""

import os
import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class ModelerConfig(BaseModel):
    """Telemetry ingestion configuration."""

    wifi_scan_buffer_size: int = Field(
        default=10,
        ge=1,
        description="Maximum number of wifi scan results kept per device",
    )
    max_queue_size: int = Field(
        default=1000,
        ge=1,
        description="Maximum number of telemetry batches awaiting processing",
    )
    initial_telemetry_count: int = Field(
        default=1,
        ge=1,
        description="Number of statistics records requested per device on startup",
    )


class TPCConfig(BaseModel):
    """Transmit power control configuration."""

    target_mcs: int = Field(
        default=8,
        ge=0,
        le=9,
        description="Target MCS index for the measurement-based algorithm",
    )
    default_tx_power: int = Field(
        default=10,
        ge=0,
        le=30,
        description="Tx power (dBm) assigned to devices without clients",
    )
    min_tx_power: int = Field(default=0, description="Minimum tx power (dBm)")
    max_tx_power: int = Field(default=30, description="Maximum tx power (dBm)")


class PropagationConfig(BaseModel):
    """Signal propagation model used by the location-based TPC."""

    frequency_ghz: float = Field(default=5.0, gt=0, description="Carrier frequency (GHz)")
    path_loss_exponent: float = Field(default=2.0, gt=0, description="Log-distance exponent")
    reference_distance_m: float = Field(default=1.0, gt=0, description="Reference distance (m)")
    noise_dbm: float = Field(default=-94.0, description="Thermal noise power (dBm)")
    rx_threshold_dbm: float = Field(
        default=-80.0,
        description="Received power at or below which a point is uncovered",
    )
    sinr_threshold_db: float = Field(
        default=20.0,
        description="SINR at or below which a point counts as interfered",
    )
    coverage_threshold: float = Field(
        default=0.70,
        gt=0,
        le=1.0,
        description="Minimum covered fraction of the area",
    )


class GatewayConfig(BaseModel):
    """Device gateway connection configuration."""

    base_url: str = Field(
        default="https://localhost:16002",
        description="Base URL of the device gateway REST API",
    )
    timeout_seconds: float = Field(default=10.0, gt=0, description="Request timeout")
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="json", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for wifi-rrm.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    modeler: ModelerConfig = Field(default_factory=ModelerConfig)
    tpc: TPCConfig = Field(default_factory=TPCConfig)
    propagation: PropagationConfig = Field(default_factory=PropagationConfig)
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


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
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path("/etc/wifi-rrm/config.yaml"),
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

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

    # Modeler settings
    if env_buf := os.environ.get("WIFI_RRM_WIFISCAN_BUFFER_SIZE"):
        config_data.setdefault("modeler", {})["wifi_scan_buffer_size"] = int(env_buf)
    if env_queue := os.environ.get("WIFI_RRM_MAX_QUEUE_SIZE"):
        config_data.setdefault("modeler", {})["max_queue_size"] = int(env_queue)

    # TPC settings
    if env_mcs := os.environ.get("WIFI_RRM_TARGET_MCS"):
        config_data.setdefault("tpc", {})["target_mcs"] = int(env_mcs)

    # Gateway settings
    if env_url := os.environ.get("WIFI_RRM_GATEWAY_URL"):
        config_data.setdefault("gateway", {})["base_url"] = env_url
    if env_timeout := os.environ.get("WIFI_RRM_GATEWAY_TIMEOUT"):
        config_data.setdefault("gateway", {})["timeout_seconds"] = float(env_timeout)

    # Logging settings
    if env_log := os.environ.get("WIFI_RRM_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log
    if env_fmt := os.environ.get("WIFI_RRM_LOG_FORMAT"):
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


# =============================================================================
# Global Settings Instance
# =============================================================================

# Global settings instance - loaded on import
settings = load_config()
setup_logging(settings)
