"""
regionwatch Configuration
=========================

This module handles configuration loading for regionwatch.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. regionwatch.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    REGIONWATCH_STEP_INTERVAL    -> polling.step_interval_seconds
    REGIONWATCH_DEFAULT_TIMEOUT  -> polling.default_timeout_seconds
    REGIONWATCH_LOG_LEVEL        -> logging.level
    REGIONWATCH_LOG_FORMAT       -> logging.format

Example:
    from regionwatch.config import settings

    print(settings.polling.step_interval_seconds)
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

class PollingConfig(BaseModel):
    """Enter/leave polling configuration."""

    step_interval_seconds: float = Field(
        default=0.1,
        gt=0,
        description="Delay of the default step function between checks",
    )
    default_timeout_seconds: Optional[float] = Field(
        default=None,
        ge=0,
        description="Timeout applied when a wait is started without one (None = wait forever)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for regionwatch.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    polling: PollingConfig = Field(default_factory=PollingConfig)
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
        config_path: Path to a YAML file. If None, looks for regionwatch.yaml
            or regionwatch.yml in the working directory.

    Returns:
        Settings: Loaded configuration
    """
    # Find config file
    if config_path is None:
        search_paths = [
            Path("regionwatch.yaml"),
            Path("regionwatch.yml"),
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

    # Polling settings
    if env_step := os.environ.get("REGIONWATCH_STEP_INTERVAL"):
        config_data.setdefault("polling", {})["step_interval_seconds"] = float(env_step)
    if env_timeout := os.environ.get("REGIONWATCH_DEFAULT_TIMEOUT"):
        config_data.setdefault("polling", {})["default_timeout_seconds"] = float(env_timeout)

    # Logging settings
    if env_log := os.environ.get("REGIONWATCH_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log
    if env_format := os.environ.get("REGIONWATCH_LOG_FORMAT"):
        config_data.setdefault("logging", {})["format"] = env_format


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

# Loaded on import; logging is left to the application (see setup_logging)
settings = load_config()
