"""SQLAlchemy Core table definitions for the graph store.

Column names and key structure follow the layout already used by stored
data. Referential integrity between the tables is enforced by the
writer, not by foreign keys.
"""

from __future__ import annotations

from sqlalchemy import Column, Index, Integer, MetaData, String, Table

from graphstore.domain.features import FEATURE_FIELD_MAX

metadata = MetaData()

graph_instances = Table(
    "graph_instances",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("nodes", Integer, nullable=False),  # node count
    Column("edges", Integer, nullable=False),  # edge count
    Column("features", Integer, nullable=False, comment="number of associated features"),
    comment="instances of graphs",
    sqlite_autoincrement=True,
)

node_instances = Table(
    "node_instances",
    metadata,
    Column("id", Integer, nullable=False, comment="unique within a graph, not globally unique"),
    Column("graph_id", Integer, nullable=False, comment="foreign key (graph_instances->id)"),
    Column("features", Integer, nullable=False, comment="number of associated features"),
    comment="instance of a node in a graph instance",
)

edge_instances = Table(
    "edge_instances",
    metadata,
    Column("id", Integer, nullable=False, comment="unique within a graph, not globally unique"),
    Column("graph_id", Integer, nullable=False, comment="foreign key (graph_instances->id)"),
    Column("from_node_id", Integer, nullable=False, comment="output node id (node_instances->id)"),
    Column("to_node_id", Integer, nullable=False, comment="input node id (node_instances->id)"),
    Column("features", Integer, nullable=False, comment="number of associated features"),
    comment="edge between two nodes",
)

node_features = Table(
    "node_features",
    metadata,
    Column("graph_id", Integer, nullable=False, comment="tagged graph (graph_instances->id)"),
    Column("node_id", Integer, nullable=False, comment="tagged node (node_instances->id)"),
    Column("feature_name", String(FEATURE_FIELD_MAX), nullable=False),
    Column("feature_value", String(FEATURE_FIELD_MAX), nullable=False),
    comment="associates tags to nodes",
)

edge_features = Table(
    "edge_features",
    metadata,
    Column("graph_id", Integer, nullable=False, comment="tagged graph (graph_instances->id)"),
    Column("edge_id", Integer, nullable=False, comment="tagged edge (edge_instances->id)"),
    Column("feature_name", String(FEATURE_FIELD_MAX), nullable=False),
    Column("feature_value", String(FEATURE_FIELD_MAX), nullable=False),
    comment="associates tags to edges",
)

graph_features = Table(
    "graph_features",
    metadata,
    Column("graph_id", Integer, nullable=False, comment="tagged graph (graph_instances->id)"),
    Column("feature_name", String(FEATURE_FIELD_MAX), nullable=False),
    Column("feature_value", String(FEATURE_FIELD_MAX), nullable=False),
    comment="associates tags to graphs",
)

# ---------------------------------------------------------------------------
# Indexes — index names are global in SQLite, hence the table prefix
# ---------------------------------------------------------------------------

Index("ix_node_instances_id", node_instances.c.graph_id, node_instances.c.id)

Index("ix_edge_instances_id", edge_instances.c.graph_id, edge_instances.c.id)
Index(
    "ix_edge_instances_graph_id",
    edge_instances.c.graph_id,
    edge_instances.c.from_node_id,
    edge_instances.c.to_node_id,
)
Index("ix_edge_instances_from_node_id", edge_instances.c.graph_id, edge_instances.c.from_node_id)
Index("ix_edge_instances_to_node_id", edge_instances.c.graph_id, edge_instances.c.to_node_id)

Index("ix_node_features_node_id", node_features.c.graph_id, node_features.c.node_id)
Index("ix_node_features_feature_id", node_features.c.feature_name, node_features.c.feature_value)

Index("ix_edge_features_edge_id", edge_features.c.graph_id, edge_features.c.edge_id)
Index("ix_edge_features_feature_id", edge_features.c.feature_name, edge_features.c.feature_value)

Index("ix_graph_features_graph_id", graph_features.c.graph_id)
Index("ix_graph_features_feature_id", graph_features.c.feature_name, graph_features.c.feature_value)

# Child tables in the order rows are written; deletes go in reverse.
CHILD_TABLES = (graph_features, node_instances, node_features, edge_instances, edge_features)
