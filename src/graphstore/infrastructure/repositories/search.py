"""Feature search — which graphs carry a feature at any level."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Select, select, union

from graphstore.infrastructure.database.schema import (
    edge_features,
    graph_features,
    graph_instances,
    node_features,
)

if TYPE_CHECKING:
    from sqlalchemy import Table

    from graphstore.infrastructure.database.executor import QueryExecutor

_FEATURE_TABLES = (graph_features, node_features, edge_features)


def _scan(table: Table, name: str, value: str | None) -> Select[tuple[int]]:
    """Graph ids with a matching feature row in *table* and a live instance row."""
    stmt = (
        select(graph_instances.c.id.label("graph_id"))
        .join(table, table.c.graph_id == graph_instances.c.id)
        .where(table.c.feature_name == name)
    )
    if value is not None:
        stmt = stmt.where(table.c.feature_value == value)
    return stmt


class FeatureSearch:
    """Membership queries over the three feature tables.

    Each query is a single ``UNION`` of one scan per table; the store
    removes duplicates, so a graph matching at several levels (or via
    several nodes) appears once.
    """

    def graphs_with_feature_name(self, db: QueryExecutor, name: str) -> set[int]:
        """Ids of graphs with a graph-, node-, or edge-level feature named *name*."""
        return self._run(db, name, None)

    def graphs_with_feature(self, db: QueryExecutor, name: str, value: str) -> set[int]:
        """Ids of graphs with a feature exactly equal to ``(name, value)``."""
        return self._run(db, name, value)

    @staticmethod
    def _run(db: QueryExecutor, name: str, value: str | None) -> set[int]:
        stmt = union(*(_scan(table, name, value) for table in _FEATURE_TABLES))
        return {int(row["graph_id"]) for row in db.rows(stmt)}
