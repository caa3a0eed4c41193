"""NetworkX bridge — MultiDiGraph to and from the store's graph model.

Layout of a converted graph:

- ``G.graph["features"]``: graph-level ``frozenset[Feature]``
- node ``n`` (the local node id) with attribute ``features``
- edge ``(source, target, key=edge_id)`` with attributes ``id`` and ``features``

:func:`to_networkx` has the reconstructor signature, so it can be passed
straight to ``GraphStore.retrieve_graph``.
"""

from __future__ import annotations

from collections.abc import Iterable
from itertools import count
from typing import Any

import networkx as nx

from graphstore.domain.features import Feature
from graphstore.domain.graph import Graph, MutableGraph


def to_networkx(graph: Graph, *, frozen: bool = False) -> nx.MultiDiGraph:
    """Build a ``MultiDiGraph`` holding the same content as *graph*.

    With *frozen*, the result is locked against mutation (``nx.freeze``).
    """
    g = nx.MultiDiGraph()
    g.graph["features"] = frozenset(graph.features)
    for nid in sorted(graph.node_ids):
        g.add_node(nid, features=frozenset(graph.node_features(nid)))
    for eid in sorted(graph.edge_ids):
        g.add_edge(
            graph.edge_source(eid),
            graph.edge_target(eid),
            key=eid,
            id=eid,
            features=frozenset(graph.edge_features(eid)),
        )
    if frozen:
        nx.freeze(g)
    return g


def to_frozen_networkx(graph: Graph) -> nx.MultiDiGraph:
    """Reconstructor producing an immutable ``MultiDiGraph``."""
    return to_networkx(graph, frozen=True)


def _features(raw: Iterable[Any] | None) -> list[Feature]:
    return [Feature.coerce(item) for item in raw or ()]


def _local_id(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{what} id must be an integer, got {value!r}"
        raise ValueError(msg)
    return value


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _assign_edge_ids(
    edges: list[tuple[Any, Any, Any, dict[str, Any]]],
) -> list[int]:
    """Pick one graph-wide unique id per edge.

    Explicit ``id`` attributes are claimed first and must be unique
    integers. Remaining edges keep their multigraph key when it is an
    integer not yet taken; NetworkX numbers keys per node pair, so the
    rest get the lowest free integer.
    """
    taken: set[int] = set()
    for _, _, _, data in edges:
        if "id" in data:
            eid = _local_id(data["id"], "Edge")
            if eid in taken:
                msg = f"Duplicate edge id {eid}"
                raise ValueError(msg)
            taken.add(eid)

    free = count()
    ids: list[int] = []
    for _, _, key, data in edges:
        if "id" in data:
            eid = data["id"]
        elif _is_int(key) and key not in taken:
            eid = key
        else:
            eid = next(i for i in free if i not in taken)
        taken.add(eid)
        ids.append(eid)
    return ids


def from_networkx(nx_graph: nx.MultiDiGraph | nx.DiGraph) -> MutableGraph:
    """Convert a NetworkX directed graph into a :class:`MutableGraph`.

    Edge ids come from the ``id`` edge attribute, then from the multigraph
    key where that is an unused integer, then from a graph-wide counter.

    Raises:
        ValueError: On undirected input, non-integer node ids, or
            non-integer or duplicate ``id`` edge attributes.
    """
    if not nx_graph.is_directed():
        raise ValueError("Only directed graphs can be stored")

    g = MutableGraph()
    for feature in _features(nx_graph.graph.get("features")):
        g.add_feature(feature)

    for node, data in nx_graph.nodes(data=True):
        g.add_node(_local_id(node, "Node"), _features(data.get("features")))

    if nx_graph.is_multigraph():
        edges = list(nx_graph.edges(keys=True, data=True))
    else:
        edges = [(u, v, None, data) for u, v, data in nx_graph.edges(data=True)]

    for (u, v, _, data), eid in zip(edges, _assign_edge_ids(edges), strict=True):
        g.add_edge(eid, u, v, _features(data.get("features")))
    return g
