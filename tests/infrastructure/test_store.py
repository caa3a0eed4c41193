"""Tests for GraphStore connection lifecycle and scopes."""

from pathlib import Path

import pytest
from sqlalchemy import text

from graphstore.config.settings import GraphStoreSettings
from graphstore.domain.graph import MutableGraph
from graphstore.errors import NotFoundError, StoreConnectionError
from graphstore.infrastructure.store import GraphStore
from tests.conftest import row_counts, sample_graph


class TestConnect:
    def test_from_url_without_initialize_keeps_data(
        self, db_url: str, settings: GraphStoreSettings
    ) -> None:
        with GraphStore.from_url(db_url, initialize=True, settings=settings) as first:
            gid = first.add_graph(sample_graph())
        with GraphStore.from_url(db_url, settings=settings) as second:
            assert second.retrieve_graph(gid) == sample_graph()

    def test_initialize_wipes_data(self, db_url: str, settings: GraphStoreSettings) -> None:
        with GraphStore.from_url(db_url, initialize=True, settings=settings) as first:
            first.add_graph(sample_graph())
        with GraphStore.from_url(db_url, initialize=True, settings=settings) as second:
            assert second.count_graphs() == 0

    def test_from_settings(self, db_url: str) -> None:
        settings = GraphStoreSettings(database={"url": db_url})
        with GraphStore.from_settings(settings) as store:
            assert store.is_connected()
            assert store.settings is settings

    def test_unreachable_database(self, tmp_path: Path, settings: GraphStoreSettings) -> None:
        url = f"sqlite:///{tmp_path / 'no' / 'such' / 'dir.db'}"
        with pytest.raises(StoreConnectionError):
            GraphStore.from_url(url, settings=settings)

    def test_connect_with_missing_driver(self) -> None:
        settings = GraphStoreSettings(database={"driver": "nosuchdialect"})
        with pytest.raises(StoreConnectionError):
            GraphStore.connect("localhost", "graphs", "user", "pw", settings=settings)


class TestConnectionState:
    def test_is_connected(self, store: GraphStore) -> None:
        assert store.is_connected()

    def test_disconnect_is_idempotent(self, store: GraphStore) -> None:
        store.disconnect()
        store.disconnect()
        assert not store.is_connected()

    def test_operations_after_disconnect(self, store: GraphStore) -> None:
        store.disconnect()
        with pytest.raises(StoreConnectionError, match="disconnected"):
            store.add_graph(MutableGraph())
        with pytest.raises(StoreConnectionError):
            store.count_graphs()
        with pytest.raises(StoreConnectionError):
            list(store.stream_graph_ids())

    def test_context_manager_disconnects(self, db_url: str, settings: GraphStoreSettings) -> None:
        with GraphStore.from_url(db_url, initialize=True, settings=settings) as store:
            assert store.is_connected()
        assert not store.is_connected()
        assert repr(store) == "GraphStore(disconnected)"

    def test_repr_shows_url(self, store: GraphStore, db_url: str) -> None:
        assert repr(store) == f"GraphStore({db_url})"

    def test_initialize_database(self, store: GraphStore) -> None:
        store.add_graph(sample_graph())
        store.initialize_database()
        assert set(row_counts(store).values()) == {0}


class TestScopes:
    def test_transaction_commits(self, store: GraphStore) -> None:
        with store.transaction() as db:
            db.execute(text("INSERT INTO graph_instances (nodes, edges, features) VALUES (0, 0, 0)"))
        assert store.count_graphs() == 1

    def test_transaction_rolls_back_on_error(self, store: GraphStore) -> None:
        with pytest.raises(RuntimeError):
            with store.transaction() as db:
                db.execute(
                    text("INSERT INTO graph_instances (nodes, edges, features) VALUES (0, 0, 0)")
                )
                raise RuntimeError("abort")
        assert store.count_graphs() == 0

    def test_connections_returned_to_pool(self, store: GraphStore) -> None:
        for _ in range(20):
            store.add_graph(MutableGraph())
            store.count_graphs()
        assert store.engine.pool.checkedout() == 0

    def test_connection_released_after_failure(self, store: GraphStore) -> None:
        with pytest.raises(NotFoundError):
            store.retrieve_graph(1)
        assert store.engine.pool.checkedout() == 0

    def test_read_scope_holds_one_connection(self, store: GraphStore) -> None:
        with store.reading() as db:
            conn = db.connection
            db.scalar(text("SELECT COUNT(*) FROM graph_instances"))
            db.scalar(text("SELECT COUNT(*) FROM node_instances"))
            assert db.connection is conn
            assert store.engine.pool.checkedout() == 1
        assert store.engine.pool.checkedout() == 0

    def test_contains(self, store: GraphStore) -> None:
        gid = store.add_graph(sample_graph())
        assert store.contains(gid)
        assert not store.contains(gid + 1)
