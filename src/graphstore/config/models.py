"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, graphstore.toml only contains
overrides. An empty file (or none at all) yields a local SQLite store.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    url: str = "sqlite:///graphstore.db"
    # Driver used when connecting by host/database/credentials.
    driver: str = "mysql+pymysql"
    echo: bool = False
    pool_pre_ping: bool = True
    busy_timeout_s: float = Field(default=30.0, ge=0)
    connect_timeout_s: float = Field(default=10.0, gt=0)


class StreamConfig(BaseModel):
    """[stream] section."""

    model_config = {"frozen": True}

    batch_size: int = Field(default=100, ge=1)


class LoggingConfig(BaseModel):
    """[logging] section."""

    model_config = {"frozen": True}

    verbose: bool = False
    json_logs: bool = False
