"""Graph protocol and the mutable builder used for reconstruction.

The store writes anything satisfying :class:`Graph` and rebuilds stored
graphs into a :class:`MutableGraph`, which is then handed to a
caller-supplied :data:`Reconstructor`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, Protocol, runtime_checkable

from graphstore.domain.features import Feature


@runtime_checkable
class Graph(Protocol):
    """Read accessors the writer needs from an in-memory graph."""

    @property
    def node_ids(self) -> frozenset[int]: ...

    @property
    def edge_ids(self) -> frozenset[int]: ...

    @property
    def features(self) -> frozenset[Feature]: ...

    def node_features(self, node_id: int) -> frozenset[Feature]: ...

    def edge_features(self, edge_id: int) -> frozenset[Feature]: ...

    def edge_source(self, edge_id: int) -> int: ...

    def edge_target(self, edge_id: int) -> int: ...


class MutableGraph:
    """Directed multigraph with feature sets at graph, node and edge level.

    Node and edge ids are local to this graph. ``add_edge`` does not check
    that its endpoints exist; the writer rejects such graphs.
    """

    def __init__(self) -> None:
        self._features: set[Feature] = set()
        self._nodes: dict[int, set[Feature]] = {}
        self._edges: dict[int, tuple[int, int]] = {}
        self._edge_features: dict[int, set[Feature]] = {}

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def add_feature(self, feature: Feature) -> None:
        self._features.add(feature)

    def add_node(self, node_id: int, features: Iterable[Feature] = ()) -> None:
        """Add a node (no-op if present) and attach *features*."""
        self._nodes.setdefault(node_id, set()).update(features)

    def add_node_feature(self, node_id: int, feature: Feature) -> None:
        if node_id not in self._nodes:
            raise KeyError(f"Unknown node {node_id}")
        self._nodes[node_id].add(feature)

    def add_edge(
        self,
        edge_id: int,
        source: int,
        target: int,
        features: Iterable[Feature] = (),
    ) -> None:
        """Add edge *edge_id* from *source* to *target*.

        Raises:
            ValueError: If *edge_id* already exists with other endpoints.
        """
        existing = self._edges.get(edge_id)
        if existing is not None and existing != (source, target):
            msg = f"Edge {edge_id} already connects {existing[0]} -> {existing[1]}"
            raise ValueError(msg)
        self._edges[edge_id] = (source, target)
        self._edge_features.setdefault(edge_id, set()).update(features)

    def add_edge_feature(self, edge_id: int, feature: Feature) -> None:
        if edge_id not in self._edges:
            raise KeyError(f"Unknown edge {edge_id}")
        self._edge_features[edge_id].add(feature)

    # ------------------------------------------------------------------
    # Graph protocol
    # ------------------------------------------------------------------

    @property
    def node_ids(self) -> frozenset[int]:
        return frozenset(self._nodes)

    @property
    def edge_ids(self) -> frozenset[int]:
        return frozenset(self._edges)

    @property
    def features(self) -> frozenset[Feature]:
        return frozenset(self._features)

    def node_features(self, node_id: int) -> frozenset[Feature]:
        return frozenset(self._nodes[node_id])

    def edge_features(self, edge_id: int) -> frozenset[Feature]:
        return frozenset(self._edge_features[edge_id])

    def edge_source(self, edge_id: int) -> int:
        return self._edges[edge_id][0]

    def edge_target(self, edge_id: int) -> int:
        return self._edges[edge_id][1]

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @classmethod
    def copy_of(cls, graph: Graph) -> MutableGraph:
        """Build a MutableGraph holding the same content as *graph*."""
        g = cls()
        for feature in graph.features:
            g.add_feature(feature)
        for nid in graph.node_ids:
            g.add_node(nid, graph.node_features(nid))
        for eid in graph.edge_ids:
            g.add_edge(eid, graph.edge_source(eid), graph.edge_target(eid), graph.edge_features(eid))
        return g

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MutableGraph):
            return NotImplemented
        return (
            self._features == other._features
            and self._nodes == other._nodes
            and self._edges == other._edges
            and self._edge_features == other._edge_features
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"MutableGraph(nodes={len(self._nodes)}, edges={len(self._edges)}, "
            f"features={len(self._features)})"
        )


type Reconstructor = Callable[[MutableGraph], Any]


def identity(graph: MutableGraph) -> MutableGraph:
    """Reconstructor that returns the rebuilt builder unchanged."""
    return graph
