"""Exception hierarchy surfaced by the graph store.

INVARIANT: Every failure reaches the caller as one of these types.
Nothing is logged-and-suppressed; driver errors are chained via ``from``.
"""

from __future__ import annotations

from typing import Any


class GraphStoreError(Exception):
    """Base class for all graph store failures.

    Attributes:
        code: Stable machine-readable error code.
        detail: Structured context (ids, offending row, ...).
    """

    code = "GRAPHSTORE_ERROR"

    def __init__(self, message: str, *, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail: dict[str, Any] = dict(detail or {})


class ConfigError(GraphStoreError):
    """Configuration file could not be read or validated."""

    code = "CONFIG_ERROR"


class StoreConnectionError(GraphStoreError):
    """The store connection could not be established or was lost."""

    code = "CONNECTION_ERROR"


class QueryExecutionError(GraphStoreError):
    """The store rejected a statement."""

    code = "QUERY_FAILED"


class NotFoundError(GraphStoreError):
    """An operation referenced a graph id absent from the store."""

    code = "NOT_FOUND"

    def __init__(self, graph_id: int) -> None:
        super().__init__(f"No such graph with id={graph_id}", detail={"graph_id": graph_id})
        self.graph_id = graph_id


class ReferentialIntegrityError(GraphStoreError):
    """An edge references node ids that are not part of its graph."""

    code = "REFERENTIAL_INTEGRITY"

    def __init__(self, edge_id: int, missing: list[int]) -> None:
        super().__init__(
            f"Edge {edge_id} references node(s) {missing} not present in the graph",
            detail={"edge_id": edge_id, "missing": missing},
        )
        self.edge_id = edge_id
        self.missing = missing


class CorruptDataError(GraphStoreError):
    """Stored rows for a graph are malformed or inconsistent."""

    code = "CORRUPT_DATA"

    def __init__(self, graph_id: int, row: dict[str, Any], reason: str) -> None:
        super().__init__(
            f"Corrupt data for graph #{graph_id} ({reason}): {row}",
            detail={"graph_id": graph_id, "row": row, "reason": reason},
        )
        self.graph_id = graph_id
        self.row = row
        self.reason = reason
