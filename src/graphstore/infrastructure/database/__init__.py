"""Relational engine, schema, and query executor via SQLAlchemy Core."""

from graphstore.infrastructure.database.engine import (
    build_url,
    create_db_engine,
    ensure_schema,
    init_database,
    verify_connection,
)
from graphstore.infrastructure.database.executor import QueryExecutor, translate_error
from graphstore.infrastructure.database.schema import (
    CHILD_TABLES,
    edge_features,
    edge_instances,
    graph_features,
    graph_instances,
    metadata,
    node_features,
    node_instances,
)

__all__ = [
    "CHILD_TABLES",
    "QueryExecutor",
    "build_url",
    "create_db_engine",
    "edge_features",
    "edge_instances",
    "ensure_schema",
    "graph_features",
    "graph_instances",
    "init_database",
    "metadata",
    "node_features",
    "node_instances",
    "translate_error",
    "verify_connection",
]
