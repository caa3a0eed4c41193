"""GraphStore — boundary object with scoped transaction handling.

The GraphStore owns the SQLAlchemy engine and is the single entry point
for callers. Every operation checks out its own connection:

- **Writes** run in :meth:`transaction` (``engine.begin()``): commit on
  success, rollback on any exception, connection returned to the pool on
  every exit path.
- **Reads** run in :meth:`reading` (``engine.connect()``): all queries of
  an operation share one connection, released on exit. No transaction
  isolation is implied; SQLite's driver issues these SELECTs outside a
  transaction.

Repositories never hold a connection; they receive the
:class:`QueryExecutor` bound to the current scope.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Self

from sqlalchemy.exc import DBAPIError

from graphstore.config.settings import GraphStoreSettings
from graphstore.domain.graph import identity
from graphstore.errors import StoreConnectionError
from graphstore.infrastructure.database.engine import (
    build_url,
    create_db_engine,
    ensure_schema,
    init_database,
    verify_connection,
)
from graphstore.infrastructure.database.executor import QueryExecutor, translate_error
from graphstore.infrastructure.repositories import (
    FeatureSearch,
    GraphReader,
    GraphWriter,
    LifecycleRepository,
)

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType

    from sqlalchemy import URL
    from sqlalchemy.engine import Engine

    from graphstore.domain.graph import Graph, Reconstructor

logger = logging.getLogger(__name__)


class GraphStore:
    """Relational store for labeled, directed multigraphs.

    Construct through :meth:`connect`, :meth:`from_url`, or
    :meth:`from_settings`. Usable as a context manager; leaving the block
    disconnects.
    """

    def __init__(self, engine: Engine, settings: GraphStoreSettings | None = None) -> None:
        self._engine: Engine | None = engine
        self._settings = settings or GraphStoreSettings()
        self._writer = GraphWriter()
        self._reader = GraphReader()
        self._search = FeatureSearch()
        self._lifecycle = LifecycleRepository()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def connect(
        cls,
        host: str,
        database: str,
        username: str | None = None,
        password: str | None = None,
        initialize: bool = False,
        *,
        settings: GraphStoreSettings | None = None,
    ) -> GraphStore:
        """Connect to *database* on *host* with the configured driver.

        Raises:
            StoreConnectionError: The server cannot be reached or rejects
                the credentials.
        """
        settings = settings or GraphStoreSettings.load()
        url = build_url(host, database, username, password, driver=settings.database.driver)
        return cls.from_url(url, initialize=initialize, settings=settings)

    @classmethod
    def from_url(
        cls,
        url: str | URL,
        *,
        initialize: bool = False,
        settings: GraphStoreSettings | None = None,
    ) -> GraphStore:
        """Connect using a SQLAlchemy URL.

        With *initialize*, all tables are dropped and recreated; otherwise
        missing tables are created and existing data is kept.
        """
        settings = settings or GraphStoreSettings.load()
        engine = create_db_engine(url, settings.database)
        try:
            verify_connection(engine)
            if initialize:
                logger.info("Initializing database")
                init_database(engine)
            else:
                ensure_schema(engine)
        except BaseException:
            engine.dispose()
            raise
        return cls(engine, settings)

    @classmethod
    def from_settings(cls, settings: GraphStoreSettings | None = None) -> GraphStore:
        """Connect to ``settings.database.url``."""
        settings = settings or GraphStoreSettings.load()
        return cls.from_url(settings.database.url, settings=settings)

    # ------------------------------------------------------------------
    # Connection state
    # ------------------------------------------------------------------

    @property
    def settings(self) -> GraphStoreSettings:
        return self._settings

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine.

        Raises:
            StoreConnectionError: The store has been disconnected.
        """
        if self._engine is None:
            raise StoreConnectionError("Graph store is disconnected")
        return self._engine

    def is_connected(self) -> bool:
        """Whether the store is open and the database answers."""
        if self._engine is None:
            return False
        try:
            verify_connection(self._engine)
        except StoreConnectionError:
            return False
        return True

    def disconnect(self) -> None:
        """Close every pooled connection. Safe to call more than once."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.disconnect()

    def initialize_database(self) -> None:
        """Drop and recreate all tables. Destructive; for fresh setup only."""
        init_database(self.engine)

    # ------------------------------------------------------------------
    # Scopes
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[QueryExecutor]:
        """Atomic write scope.

        Usage::

            with store.transaction() as db:
                db.execute(insert(graph_instances).values(...))
                # Commits on success, rolls back on any exception.
        """
        engine = self.engine
        try:
            with engine.begin() as conn:
                yield QueryExecutor(conn)
        except DBAPIError as exc:
            # Commit or rollback itself failed.
            raise translate_error(exc) from exc

    @contextmanager
    def reading(self) -> Iterator[QueryExecutor]:
        """Read scope on one pooled connection, released on exit."""
        engine = self.engine
        try:
            with engine.connect() as conn:
                yield QueryExecutor(conn)
        except DBAPIError as exc:
            raise translate_error(exc) from exc

    # ------------------------------------------------------------------
    # Graph operations
    # ------------------------------------------------------------------

    def add_graph(self, graph: Graph) -> int:
        """Persist *graph* atomically and return its new id.

        Raises:
            ReferentialIntegrityError: An edge endpoint is not a node of *graph*.
            QueryExecutionError: The store rejected a statement.
        """
        with self.transaction() as db:
            graph_id = self._writer.add_graph(db, graph)
        logger.info("Added graph %d", graph_id)
        return graph_id

    def retrieve_graph(self, graph_id: int, reconstructor: Reconstructor | None = None) -> Any:
        """Rebuild graph *graph_id* and pass it through *reconstructor*.

        Without a reconstructor the rebuilt :class:`MutableGraph` is
        returned as is.

        Raises:
            NotFoundError: No graph with *graph_id* is stored.
            CorruptDataError: Stored rows for the graph are malformed.
        """
        with self.reading() as db:
            builder = self._reader.read_graph(db, graph_id)
        return (reconstructor or identity)(builder)

    def contains(self, graph_id: int) -> bool:
        """Whether a graph with *graph_id* is stored."""
        with self.reading() as db:
            return self._reader.exists(db, graph_id)

    def delete_graph(self, graph_id: int, *, missing_ok: bool = False) -> bool:
        """Delete graph *graph_id* and everything it owns, atomically.

        Returns:
            True if deleted; False if absent and *missing_ok* is set.

        Raises:
            NotFoundError: *graph_id* is absent and *missing_ok* is False.
        """
        with self.transaction() as db:
            deleted = self._lifecycle.delete_graph(db, graph_id, missing_ok=missing_ok)
        if deleted:
            logger.info("Deleted graph %d", graph_id)
        return deleted

    def stream_graph_ids(self, *, batch_size: int | None = None) -> Iterator[int]:
        """Lazily yield every stored graph id in ascending order.

        Ids are fetched a page at a time (keyset pagination), each page on
        a short read scope, so no connection is held between pages. A
        new call starts again from the lowest id. Graphs deleted while
        iterating are skipped if not yet reached.

        Raises:
            ValueError: *batch_size* is below 1 (checked on call, not on
                first iteration).
        """
        size = self._settings.stream.batch_size if batch_size is None else batch_size
        if size < 1:
            raise ValueError(f"batch_size must be >= 1, got {size}")
        return self._iter_graph_ids(size)

    def _iter_graph_ids(self, size: int) -> Iterator[int]:
        last_id: int | None = None
        while True:
            with self.reading() as db:
                page = self._lifecycle.graph_ids_after(db, last_id, size)
            yield from page
            if len(page) < size:
                return
            last_id = page[-1]

    def count_graphs(self) -> int:
        with self.reading() as db:
            return self._lifecycle.count_graphs(db)

    def count_nodes_across_all_graphs(self) -> int:
        with self.reading() as db:
            return self._lifecycle.count_nodes(db)

    def count_edges_across_all_graphs(self) -> int:
        with self.reading() as db:
            return self._lifecycle.count_edges(db)

    # ------------------------------------------------------------------
    # Feature search
    # ------------------------------------------------------------------

    def find_graphs_with_feature_name(self, name: str) -> set[int]:
        """Ids of graphs with a feature named *name* at any level."""
        with self.reading() as db:
            return self._search.graphs_with_feature_name(db, name)

    def find_graphs_with_feature(self, name: str, value: str) -> set[int]:
        """Ids of graphs with the exact feature ``(name, value)`` at any level."""
        with self.reading() as db:
            return self._search.graphs_with_feature(db, name, value)

    def __repr__(self) -> str:
        if self._engine is None:
            return "GraphStore(disconnected)"
        return f"GraphStore({self._engine.url.render_as_string()})"
