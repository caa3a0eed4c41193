"""Database engine setup and schema bootstrap.

SQLAlchemy Core (not ORM): the store maps graphs onto six flat tables
and gains nothing from identity maps or unit-of-work sessions. The
engine owns a connection pool; every store operation checks out its own
connection, so there is no shared statement state between callers.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import URL, create_engine, event, make_url, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import ArgumentError, DBAPIError

from graphstore.config.models import DatabaseConfig
from graphstore.errors import StoreConnectionError
from graphstore.infrastructure.database.executor import translate_error
from graphstore.infrastructure.database.schema import metadata

logger = logging.getLogger(__name__)


def build_url(
    host: str,
    database: str,
    username: str | None,
    password: str | None,
    *,
    driver: str = "mysql+pymysql",
) -> URL:
    """Assemble a SQLAlchemy URL from connection parameters.

    *host* may carry a port (``"db.example.org:3307"``).
    """
    hostname, _, port = host.partition(":")
    return URL.create(
        driver,
        username=username or None,
        password=password or None,
        host=hostname or None,
        port=int(port) if port else None,
        database=database,
    )


def create_db_engine(url: str | URL, config: DatabaseConfig | None = None) -> Engine:
    """Create an engine for *url*; SQLite gets foreign keys and a busy timeout.

    Raises:
        StoreConnectionError: If the URL is malformed or its driver is missing.
    """
    config = config or DatabaseConfig()
    try:
        parsed = make_url(url)
    except ArgumentError as exc:
        raise StoreConnectionError(f"Invalid database URL: {exc}") from exc

    connect_args: dict[str, Any] = {}
    if parsed.get_backend_name() == "sqlite":
        connect_args["timeout"] = config.busy_timeout_s
    else:
        connect_args["connect_timeout"] = int(config.connect_timeout_s)

    try:
        engine = create_engine(
            parsed,
            echo=config.echo,
            pool_pre_ping=config.pool_pre_ping,
            connect_args=connect_args,
        )
    except (ArgumentError, ImportError) as exc:
        msg = f"Cannot create engine for {parsed.render_as_string(hide_password=True)}: {exc}"
        raise StoreConnectionError(msg) from exc

    if parsed.get_backend_name() == "sqlite":

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def verify_connection(engine: Engine) -> None:
    """Open and close one connection, proving the store is reachable.

    Raises:
        StoreConnectionError: If no connection can be established.
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except DBAPIError as exc:
        url = engine.url.render_as_string(hide_password=True)
        logger.error("Failed to connect to database %s", url)
        raise StoreConnectionError(f"Failed to connect to database {url}") from exc


def init_database(engine: Engine) -> None:
    """Drop and recreate every graph store table.

    Destructive — all stored graphs are lost. Used only for fresh setup.
    """
    try:
        with engine.begin() as conn:
            metadata.drop_all(conn)
            metadata.create_all(conn)
    except DBAPIError as exc:
        raise translate_error(exc) from exc
    logger.info("Initialized graph store tables on %s", engine.url.render_as_string())


def ensure_schema(engine: Engine) -> None:
    """Create missing tables and indexes. Idempotent — existing data is kept."""
    try:
        with engine.begin() as conn:
            metadata.create_all(conn)
    except DBAPIError as exc:
        raise translate_error(exc) from exc
