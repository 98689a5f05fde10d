"""
Pressure Engine Configuration
=============================

This module handles configuration loading for the pressure frame engine.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    PRESSURE_ENGINE_LOWER_THRESHOLD    -> metrics.lower_threshold
    PRESSURE_ENGINE_MIN_CLUSTER_SIZE   -> metrics.min_cluster_size
    PRESSURE_ENGINE_CACHE_MAX_ENTRIES  -> cache.max_entries
    PRESSURE_ENGINE_FRAMES_PER_MINUTE  -> viewer.frames_per_minute
    PRESSURE_ENGINE_LOG_LEVEL          -> logging.level
    PRESSURE_ENGINE_LOG_FORMAT         -> logging.format

Example:
    from pressure_engine.config import settings

    print(settings.metrics.lower_threshold)
    print(settings.cache.max_entries)
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

class EngineConfig(BaseModel):
    """Engine identification configuration."""

    name: str = Field(default="pressure-engine", description="Engine name")
    version: str = Field(default="v0.1.0", description="Engine version")


class GridConfig(BaseModel):
    """Recording file geometry."""

    rows: int = Field(default=32, ge=1, description="Lines per frame")
    cols: int = Field(default=32, ge=1, description="Fields per line")
    delimiter: str = Field(
        default=",",
        min_length=1,
        description="Field separator",
    )


class MetricsConfig(BaseModel):
    """Per-frame metrics tuning."""

    lower_threshold: float = Field(
        default=5.0,
        description="Minimum reading for a cell to count as contact",
    )
    min_cluster_size: int = Field(
        default=10,
        ge=1,
        description="Minimum contiguous cells for a cluster to contribute to PPI",
    )


class CacheConfig(BaseModel):
    """Recording cache configuration."""

    max_entries: int = Field(
        default=64,
        ge=0,
        description="Maximum cached recordings (0 = unbounded)",
    )


class ViewerConfig(BaseModel):
    """Time-window configuration for the interactive viewer."""

    frames_per_minute: int = Field(
        default=60,
        ge=1,
        description="Capture rate of the mat (frames per minute)",
    )
    default_range_minutes: int = Field(
        default=60,
        ge=1,
        description="Time range shown when the viewer does not ask for one",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for the pressure frame engine.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    engine: EngineConfig = Field(default_factory=EngineConfig)
    grid: GridConfig = Field(default_factory=GridConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    viewer: ViewerConfig = Field(default_factory=ViewerConfig)
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
    # Find config file
    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
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
        logger.debug("No config file found, using defaults and environment variables")

    # Apply environment variable overrides
    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Metrics settings
    if env_lt := os.environ.get("PRESSURE_ENGINE_LOWER_THRESHOLD"):
        config_data.setdefault("metrics", {})["lower_threshold"] = float(env_lt)
    if env_mcs := os.environ.get("PRESSURE_ENGINE_MIN_CLUSTER_SIZE"):
        config_data.setdefault("metrics", {})["min_cluster_size"] = int(env_mcs)

    # Cache settings
    if env_max := os.environ.get("PRESSURE_ENGINE_CACHE_MAX_ENTRIES"):
        config_data.setdefault("cache", {})["max_entries"] = int(env_max)

    # Viewer settings
    if env_fpm := os.environ.get("PRESSURE_ENGINE_FRAMES_PER_MINUTE"):
        config_data.setdefault("viewer", {})["frames_per_minute"] = int(env_fpm)

    # Logging settings
    if env_log := os.environ.get("PRESSURE_ENGINE_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log
    if env_fmt := os.environ.get("PRESSURE_ENGINE_LOG_FORMAT"):
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
