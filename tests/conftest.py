"""Shared pytest fixtures and test helpers for graphstore tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from sqlalchemy import text

from graphstore.config.settings import GraphStoreSettings
from graphstore.domain.features import Feature
from graphstore.domain.graph import MutableGraph
from graphstore.infrastructure.database.schema import metadata
from graphstore.infrastructure.store import GraphStore


@pytest.fixture
def settings() -> GraphStoreSettings:
    """Default settings with a small stream page to exercise pagination."""
    return GraphStoreSettings(stream={"batch_size": 2})


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    """File-backed SQLite URL (each connection sees the same database)."""
    return f"sqlite:///{tmp_path / 'graphs.db'}"


@pytest.fixture
def store(db_url: str, settings: GraphStoreSettings) -> Iterator[GraphStore]:
    """Freshly initialized store on a temp SQLite database."""
    s = GraphStore.from_url(db_url, initialize=True, settings=settings)
    try:
        yield s
    finally:
        s.disconnect()


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def f(name: str, value: str) -> Feature:
    return Feature(name=name, value=value)


def sample_graph() -> MutableGraph:
    """Three nodes, a parallel edge pair, a self loop, features everywhere."""
    g = MutableGraph()
    g.add_feature(f("kind", "molecule"))
    g.add_feature(f("source", "lab's \"notebook\""))
    g.add_node(1, [f("element", "C"), f("charge", "0")])
    g.add_node(2, [f("element", "O")])
    g.add_node(7)
    g.add_edge(10, 1, 2, [f("bond", "double")])
    g.add_edge(11, 1, 2, [f("bond", "single"), f("bond", "aromatic")])
    g.add_edge(12, 7, 7)
    return g


def row_counts(store: GraphStore, graph_id: int | None = None) -> dict[str, int]:
    """Row count per table, optionally restricted to one graph id."""
    counts: dict[str, int] = {}
    with store.engine.connect() as conn:
        for table in metadata.sorted_tables:
            column = "id" if table.name == "graph_instances" else "graph_id"
            sql = f"SELECT COUNT(*) FROM {table.name}"
            params = {}
            if graph_id is not None:
                sql += f" WHERE {column} = :gid"
                params["gid"] = graph_id
            counts[table.name] = int(conn.execute(text(sql), params).scalar_one())
    return counts
