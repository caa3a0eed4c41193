"""Configuration — settings models, TOML discovery, and logging setup."""

from graphstore.config.logging import configure_logging
from graphstore.config.models import DatabaseConfig, LoggingConfig, StreamConfig
from graphstore.config.settings import GraphStoreSettings

__all__ = [
    "DatabaseConfig",
    "GraphStoreSettings",
    "LoggingConfig",
    "StreamConfig",
    "configure_logging",
]
