"""Tests for the NetworkX bridge."""

import networkx as nx
import pytest

from graphstore.domain.features import Feature
from graphstore.domain.graph import MutableGraph
from graphstore.infrastructure.graph.convert import from_networkx, to_frozen_networkx, to_networkx
from graphstore.infrastructure.store import GraphStore
from tests.conftest import f, sample_graph


class TestToNetworkx:
    def test_layout(self) -> None:
        g = to_networkx(sample_graph())
        assert set(g.nodes) == {1, 2, 7}
        assert g.graph["features"] == {f("kind", "molecule"), f("source", "lab's \"notebook\"")}
        assert g.nodes[1]["features"] == {f("element", "C"), f("charge", "0")}
        assert g.edges[1, 2, 11]["id"] == 11
        assert g.edges[1, 2, 11]["features"] == {f("bond", "single"), f("bond", "aromatic")}
        assert g.has_edge(7, 7, key=12)

    def test_not_frozen_by_default(self) -> None:
        g = to_networkx(sample_graph())
        assert not nx.is_frozen(g)
        g.add_node(100)

    def test_frozen(self) -> None:
        g = to_frozen_networkx(sample_graph())
        assert nx.is_frozen(g)
        with pytest.raises(nx.NetworkXError):
            g.add_node(100)


class TestFromNetworkx:
    def test_round_trip(self) -> None:
        original = sample_graph()
        assert from_networkx(to_networkx(original)) == original

    def test_store_round_trip(self, store: GraphStore) -> None:
        nx_graph = nx.MultiDiGraph()
        nx_graph.graph["features"] = [("name", "triangle")]
        nx_graph.add_node(0, features=[Feature.of("pos", "top")])
        nx_graph.add_node(1)
        nx_graph.add_node(2)
        nx_graph.add_edge(0, 1, key=5)
        nx_graph.add_edge(1, 2, key=6, features=[("w", "2")])
        nx_graph.add_edge(2, 0, key=7)

        gid = store.add_graph(from_networkx(nx_graph))
        restored = store.retrieve_graph(gid, to_networkx)

        assert restored.graph["features"] == {f("name", "triangle")}
        assert sorted(restored.edges(keys=True)) == [(0, 1, 5), (1, 2, 6), (2, 0, 7)]
        assert restored.edges[1, 2, 6]["features"] == {f("w", "2")}

    def test_digraph_edges_are_numbered(self) -> None:
        nx_graph = nx.DiGraph()
        nx_graph.add_edge(1, 2)
        nx_graph.add_edge(2, 3, id=40)
        g = from_networkx(nx_graph)
        assert g.edge_ids == {0, 40}
        assert g.node_ids == {1, 2, 3}

    def test_id_attribute_wins_over_key(self) -> None:
        nx_graph = nx.MultiDiGraph()
        nx_graph.add_edge(1, 2, key=0, id=9)
        assert from_networkx(nx_graph).edge_ids == {9}

    def test_undirected_rejected(self) -> None:
        with pytest.raises(ValueError, match="directed"):
            from_networkx(nx.Graph([(1, 2)]))

    def test_non_integer_node_rejected(self) -> None:
        nx_graph = nx.DiGraph()
        nx_graph.add_node("a")
        with pytest.raises(ValueError, match="Node id must be an integer"):
            from_networkx(nx_graph)

    def test_duplicate_edge_id_rejected(self) -> None:
        nx_graph = nx.MultiDiGraph()
        nx_graph.add_edge(1, 2, key=0, id=3)
        nx_graph.add_edge(2, 1, key=0, id=3)
        with pytest.raises(ValueError, match="Duplicate edge id 3"):
            from_networkx(nx_graph)

    def test_plain_multigraph_keys_made_unique(self) -> None:
        nx_graph = nx.MultiDiGraph()
        nx_graph.add_edge(0, 1)
        nx_graph.add_edge(1, 2)
        nx_graph.add_edge(0, 1)
        g = from_networkx(nx_graph)
        assert len(g.edge_ids) == 3
        assert sorted((g.edge_source(e), g.edge_target(e)) for e in g.edge_ids) == [
            (0, 1),
            (0, 1),
            (1, 2),
        ]

    def test_explicit_ids_reserved_before_keys(self) -> None:
        nx_graph = nx.MultiDiGraph()
        nx_graph.add_edge(0, 1, key=0)
        nx_graph.add_edge(1, 2, key=5, id=0)
        g = from_networkx(nx_graph)
        assert g.edge_ids == {0, 1}
        assert (g.edge_source(0), g.edge_target(0)) == (1, 2)

    def test_string_keys_numbered(self) -> None:
        nx_graph = nx.MultiDiGraph()
        nx_graph.add_edge(0, 1, key="a")
        nx_graph.add_edge(0, 1, key="b")
        assert from_networkx(nx_graph).edge_ids == {0, 1}

    def test_non_integer_id_attribute_rejected(self) -> None:
        nx_graph = nx.MultiDiGraph()
        nx_graph.add_edge(0, 1, id="x")
        with pytest.raises(ValueError, match="Edge id must be an integer"):
            from_networkx(nx_graph)

    def test_plain_multigraph_stores(self, store: GraphStore) -> None:
        nx_graph = nx.MultiDiGraph([(0, 1), (1, 2), (2, 0)])
        gid = store.add_graph(from_networkx(nx_graph))
        assert store.retrieve_graph(gid, to_networkx).number_of_edges() == 3

    def test_empty(self) -> None:
        assert from_networkx(nx.MultiDiGraph()) == MutableGraph()
