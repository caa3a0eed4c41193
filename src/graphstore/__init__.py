"""graphstore — persist labeled, directed multigraphs in a relational store.

Public API:

- GraphStore            : connect, write, read, search, and delete graphs.
- Feature               : immutable name/value tag on a graph, node, or edge.
- Graph / MutableGraph  : the graph protocol the store writes, and the
                          builder it reconstructs into.
- to_networkx / from_networkx : NetworkX MultiDiGraph bridge.
- GraphStoreSettings / configure_logging : configuration and logging setup.
- errors                : the exception types every operation may raise.
"""

from importlib.metadata import PackageNotFoundError, version

from graphstore.config import GraphStoreSettings, configure_logging
from graphstore.domain import Feature, Graph, MutableGraph
from graphstore.errors import (
    ConfigError,
    CorruptDataError,
    GraphStoreError,
    NotFoundError,
    QueryExecutionError,
    ReferentialIntegrityError,
    StoreConnectionError,
)
from graphstore.infrastructure.graph import from_networkx, to_frozen_networkx, to_networkx
from graphstore.infrastructure.store import GraphStore

try:
    __version__ = version("graphstore")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "ConfigError",
    "CorruptDataError",
    "Feature",
    "Graph",
    "GraphStore",
    "GraphStoreError",
    "GraphStoreSettings",
    "MutableGraph",
    "NotFoundError",
    "QueryExecutionError",
    "ReferentialIntegrityError",
    "StoreConnectionError",
    "__version__",
    "configure_logging",
    "from_networkx",
    "to_frozen_networkx",
    "to_networkx",
]
