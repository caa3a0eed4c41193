"""Write-side repository: serialize one graph across all store tables.

The caller owns the transaction — pass an executor bound to a connection
from ``engine.begin()`` so every insert commits or rolls back together.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert

from graphstore.errors import QueryExecutionError, ReferentialIntegrityError
from graphstore.infrastructure.database.schema import (
    edge_features,
    edge_instances,
    graph_features,
    graph_instances,
    node_features,
    node_instances,
)

if TYPE_CHECKING:
    from graphstore.domain.graph import Graph
    from graphstore.infrastructure.database.executor import QueryExecutor

logger = logging.getLogger(__name__)


class GraphWriter:
    """Encapsulates SQL for persisting graphs."""

    def add_graph(self, db: QueryExecutor, graph: Graph) -> int:
        """Insert *graph* and return its store-assigned id.

        Inserts one ``graph_instances`` row, then graph features, nodes
        with their features, and edges with their features.

        Raises:
            ReferentialIntegrityError: An edge endpoint is not a node of *graph*.
            QueryExecutionError: The store rejected an insert.
        """
        self.check_edges(graph)

        node_ids = sorted(graph.node_ids)
        edge_ids = sorted(graph.edge_ids)
        features = graph.features

        graph_id = self._insert_graph_row(db, len(node_ids), len(edge_ids), len(features))
        self._insert_graph_features(db, graph_id, graph)
        self._insert_nodes(db, graph_id, graph, node_ids)
        self._insert_edges(db, graph_id, graph, edge_ids)

        logger.debug(
            "Stored graph %d (nodes=%d, edges=%d, features=%d)",
            graph_id,
            len(node_ids),
            len(edge_ids),
            len(features),
        )
        return graph_id

    @staticmethod
    def check_edges(graph: Graph) -> None:
        """Reject edges whose endpoints are not nodes of *graph*."""
        nodes = graph.node_ids
        for eid in sorted(graph.edge_ids):
            endpoints = (graph.edge_source(eid), graph.edge_target(eid))
            missing = sorted({nid for nid in endpoints if nid not in nodes})
            if missing:
                raise ReferentialIntegrityError(eid, missing)

    # ------------------------------------------------------------------
    # Per-table inserts
    # ------------------------------------------------------------------

    @staticmethod
    def _insert_graph_row(db: QueryExecutor, nodes: int, edges: int, features: int) -> int:
        result = db.execute(
            insert(graph_instances).values(nodes=nodes, edges=edges, features=features)
        )
        key = result.inserted_primary_key
        if key is None or key[0] is None:
            raise QueryExecutionError("Store did not return an id for the new graph")
        return int(key[0])

    @staticmethod
    def _insert_graph_features(db: QueryExecutor, graph_id: int, graph: Graph) -> None:
        rows = [
            {"graph_id": graph_id, "feature_name": f.name, "feature_value": f.value}
            for f in sorted(graph.features)
        ]
        if rows:
            db.execute(insert(graph_features), rows)

    @staticmethod
    def _insert_nodes(
        db: QueryExecutor,
        graph_id: int,
        graph: Graph,
        node_ids: list[int],
    ) -> None:
        if not node_ids:
            return

        instance_rows: list[dict[str, Any]] = []
        feature_rows: list[dict[str, Any]] = []
        for nid in node_ids:
            feats = graph.node_features(nid)
            instance_rows.append({"id": nid, "graph_id": graph_id, "features": len(feats)})
            feature_rows.extend(
                {
                    "graph_id": graph_id,
                    "node_id": nid,
                    "feature_name": f.name,
                    "feature_value": f.value,
                }
                for f in sorted(feats)
            )

        db.execute(insert(node_instances), instance_rows)
        if feature_rows:
            db.execute(insert(node_features), feature_rows)

    @staticmethod
    def _insert_edges(
        db: QueryExecutor,
        graph_id: int,
        graph: Graph,
        edge_ids: list[int],
    ) -> None:
        if not edge_ids:
            return

        instance_rows: list[dict[str, Any]] = []
        feature_rows: list[dict[str, Any]] = []
        for eid in edge_ids:
            feats = graph.edge_features(eid)
            instance_rows.append(
                {
                    "id": eid,
                    "graph_id": graph_id,
                    "from_node_id": graph.edge_source(eid),
                    "to_node_id": graph.edge_target(eid),
                    "features": len(feats),
                }
            )
            feature_rows.extend(
                {
                    "graph_id": graph_id,
                    "edge_id": eid,
                    "feature_name": f.name,
                    "feature_value": f.value,
                }
                for f in sorted(feats)
            )

        db.execute(insert(edge_instances), instance_rows)
        if feature_rows:
            db.execute(insert(edge_features), feature_rows)
