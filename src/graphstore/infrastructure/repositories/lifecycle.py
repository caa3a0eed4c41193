"""Lifecycle repository: deletion, id enumeration, and aggregate counts."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import delete, func, select

from graphstore.errors import NotFoundError
from graphstore.infrastructure.database.schema import (
    CHILD_TABLES,
    edge_instances,
    graph_instances,
    node_instances,
)

if TYPE_CHECKING:
    from graphstore.infrastructure.database.executor import QueryExecutor

logger = logging.getLogger(__name__)


class LifecycleRepository:
    """Encapsulates SQL for removing and enumerating stored graphs."""

    def delete_graph(self, db: QueryExecutor, graph_id: int, *, missing_ok: bool = False) -> bool:
        """Delete graph *graph_id* and every row it owns.

        Node and edge ids are local to a graph, so the graph id alone
        identifies every owned row, including feature rows left dangling
        by older writers. The caller's transaction makes the deletes
        atomic.

        Returns:
            True if a graph was deleted, False if it was absent and
            *missing_ok* is set.

        Raises:
            NotFoundError: *graph_id* is absent and *missing_ok* is False.
        """
        header = db.first(select(graph_instances.c.id).where(graph_instances.c.id == graph_id))
        if header is None:
            if missing_ok:
                return False
            raise NotFoundError(graph_id)

        removed: dict[str, int] = {}
        for table in reversed(CHILD_TABLES):
            result = db.execute(delete(table).where(table.c.graph_id == graph_id))
            removed[table.name] = result.rowcount
        db.execute(delete(graph_instances).where(graph_instances.c.id == graph_id))

        logger.debug("Deleted graph %d, child rows removed: %s", graph_id, removed)
        return True

    def graph_ids_after(self, db: QueryExecutor, last_id: int | None, limit: int) -> list[int]:
        """Next *limit* graph ids greater than *last_id*, ascending."""
        stmt = select(graph_instances.c.id).order_by(graph_instances.c.id).limit(limit)
        if last_id is not None:
            stmt = stmt.where(graph_instances.c.id > last_id)
        return [int(row["id"]) for row in db.rows(stmt)]

    def count_graphs(self, db: QueryExecutor) -> int:
        return int(db.scalar(select(func.count()).select_from(graph_instances)) or 0)

    def count_nodes(self, db: QueryExecutor) -> int:
        """Node rows belonging to a stored graph."""
        stmt = (
            select(func.count())
            .select_from(node_instances)
            .join(graph_instances, graph_instances.c.id == node_instances.c.graph_id)
        )
        return int(db.scalar(stmt) or 0)

    def count_edges(self, db: QueryExecutor) -> int:
        """Edge rows belonging to a stored graph."""
        stmt = (
            select(func.count())
            .select_from(edge_instances)
            .join(graph_instances, graph_instances.c.id == edge_instances.c.graph_id)
        )
        return int(db.scalar(stmt) or 0)
