"""Configuration management for Calcgrapher."""

from calcgrapher.core.config.loader import (
    configure_logging,
    detect_format,
    load_app_config,
    load_config,
)
from calcgrapher.core.config.models import AppConfig, CurveConfig, LoggingConfig

__all__ = [
    # Loaders
    "configure_logging",
    "detect_format",
    "load_app_config",
    "load_config",
    # Models
    "AppConfig",
    "CurveConfig",
    "LoggingConfig",
]
