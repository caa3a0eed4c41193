"""Read-side repository: rebuild a stored graph from its rows.

Feature rows are fetched with one query per table for the whole graph
(``WHERE graph_id = :id``) and grouped client side, so a read costs six
queries regardless of graph size.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError
from sqlalchemy import select

from graphstore.domain.features import Feature
from graphstore.domain.graph import MutableGraph
from graphstore.errors import CorruptDataError, NotFoundError
from graphstore.infrastructure.database.schema import (
    edge_features,
    edge_instances,
    graph_features,
    graph_instances,
    node_features,
    node_instances,
)

if TYPE_CHECKING:
    from graphstore.infrastructure.database.executor import QueryExecutor

logger = logging.getLogger(__name__)


def _as_int(graph_id: int, row: dict[str, Any], column: str) -> int:
    value = row.get(column)
    if isinstance(value, bool):
        raise CorruptDataError(graph_id, row, f"{column} is not an integer")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise CorruptDataError(graph_id, row, f"{column} is not an integer") from exc


def _as_feature(graph_id: int, row: dict[str, Any]) -> Feature:
    try:
        return Feature(name=row["feature_name"], value=row["feature_value"])
    except ValidationError as exc:
        raise CorruptDataError(graph_id, row, "malformed feature") from exc


class GraphReader:
    """Encapsulates SQL for reconstructing graphs."""

    def exists(self, db: QueryExecutor, graph_id: int) -> bool:
        """Whether a ``graph_instances`` row with *graph_id* exists."""
        stmt = select(graph_instances.c.id).where(graph_instances.c.id == graph_id)
        return db.first(stmt) is not None

    def read_graph(self, db: QueryExecutor, graph_id: int) -> MutableGraph:
        """Rebuild graph *graph_id* into a :class:`MutableGraph`.

        Raises:
            NotFoundError: No graph with *graph_id* is stored.
            CorruptDataError: A stored row is malformed or dangling.
        """
        header = db.first(select(graph_instances).where(graph_instances.c.id == graph_id))
        if header is None:
            raise NotFoundError(graph_id)

        g = MutableGraph()

        for row in db.rows(
            select(graph_features.c.feature_name, graph_features.c.feature_value).where(
                graph_features.c.graph_id == graph_id
            )
        ):
            g.add_feature(_as_feature(graph_id, row))

        self._load_nodes(db, graph_id, g)
        self._load_edges(db, graph_id, g)
        self._check_counts(graph_id, header, g)
        return g

    # ------------------------------------------------------------------
    # Nodes and edges
    # ------------------------------------------------------------------

    @staticmethod
    def _load_nodes(db: QueryExecutor, graph_id: int, g: MutableGraph) -> None:
        node_rows = db.rows(
            select(node_instances.c.id)
            .where(node_instances.c.graph_id == graph_id)
            .order_by(node_instances.c.id)
        )
        for row in node_rows:
            g.add_node(_as_int(graph_id, row, "id"))

        known = g.node_ids
        grouped: dict[int, list[Feature]] = defaultdict(list)
        for row in db.rows(
            select(
                node_features.c.node_id,
                node_features.c.feature_name,
                node_features.c.feature_value,
            ).where(node_features.c.graph_id == graph_id)
        ):
            nid = _as_int(graph_id, row, "node_id")
            if nid not in known:
                raise CorruptDataError(graph_id, row, f"feature for unknown node {nid}")
            grouped[nid].append(_as_feature(graph_id, row))

        for nid, feats in grouped.items():
            g.add_node(nid, feats)

    @staticmethod
    def _load_edges(db: QueryExecutor, graph_id: int, g: MutableGraph) -> None:
        nodes = g.node_ids
        edge_rows = db.rows(
            select(
                edge_instances.c.id,
                edge_instances.c.from_node_id,
                edge_instances.c.to_node_id,
            )
            .where(edge_instances.c.graph_id == graph_id)
            .order_by(edge_instances.c.id)
        )
        for row in edge_rows:
            eid = _as_int(graph_id, row, "id")
            source = _as_int(graph_id, row, "from_node_id")
            target = _as_int(graph_id, row, "to_node_id")
            if source not in nodes or target not in nodes:
                raise CorruptDataError(graph_id, row, f"edge {eid} has a dangling endpoint")
            try:
                g.add_edge(eid, source, target)
            except ValueError as exc:
                raise CorruptDataError(graph_id, row, str(exc)) from exc

        edges = g.edge_ids
        for row in db.rows(
            select(
                edge_features.c.edge_id,
                edge_features.c.feature_name,
                edge_features.c.feature_value,
            ).where(edge_features.c.graph_id == graph_id)
        ):
            eid = _as_int(graph_id, row, "edge_id")
            if eid not in edges:
                raise CorruptDataError(graph_id, row, f"feature for unknown edge {eid}")
            g.add_edge_feature(eid, _as_feature(graph_id, row))

    @staticmethod
    def _check_counts(graph_id: int, header: dict[str, Any], g: MutableGraph) -> None:
        """Warn when the cached counts disagree with the child rows."""
        expected = {
            "nodes": _as_int(graph_id, header, "nodes"),
            "edges": _as_int(graph_id, header, "edges"),
            "features": _as_int(graph_id, header, "features"),
        }
        actual = {
            "nodes": len(g.node_ids),
            "edges": len(g.edge_ids),
            "features": len(g.features),
        }
        if expected != actual:
            logger.warning(
                "Cached counts for graph %d disagree with stored rows: cached=%s actual=%s",
                graph_id,
                expected,
                actual,
            )
