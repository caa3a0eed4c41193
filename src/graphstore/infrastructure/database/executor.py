"""QueryExecutor — the "execute statement, return rows" seam.

An executor is bound to one SQLAlchemy ``Connection`` for the lifetime of
a store scope (read scope or transaction). Rows come back as plain dicts
keyed by column label, in select-list order. Driver errors are translated
into :mod:`graphstore.errors` types here and nowhere else.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import DBAPIError

from graphstore.errors import GraphStoreError, QueryExecutionError, StoreConnectionError

if TYPE_CHECKING:
    from sqlalchemy import Connection, CursorResult, Executable

type Params = dict[str, Any] | list[dict[str, Any]] | None


def translate_error(exc: DBAPIError, statement: object = None) -> GraphStoreError:
    """Map a driver error onto the graph store exception hierarchy."""
    sql = str(statement) if statement is not None else exc.statement
    detail = {"statement": sql, "driver_error": str(exc.orig)}
    if exc.connection_invalidated:
        return StoreConnectionError(f"Connection lost: {exc.orig}", detail=detail)
    return QueryExecutionError(f"Statement failed: {exc.orig}", detail=detail)


class QueryExecutor:
    """Executes statements on one connection and materializes results."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    @property
    def connection(self) -> Connection:
        """The bound connection (for callers needing raw SQLAlchemy access)."""
        return self._conn

    def execute(self, stmt: Executable, params: Params = None) -> CursorResult[Any]:
        """Execute *stmt*; a list of *params* runs it as executemany."""
        try:
            if params is None:
                return self._conn.execute(stmt)
            return self._conn.execute(stmt, params)
        except DBAPIError as exc:
            raise translate_error(exc, stmt) from exc

    def rows(self, stmt: Executable, params: Params = None) -> list[dict[str, Any]]:
        """Return every result row as a field-name→value dict."""
        result = self.execute(stmt, params)
        try:
            return [dict(row) for row in result.mappings()]
        except DBAPIError as exc:
            raise translate_error(exc, stmt) from exc

    def first(self, stmt: Executable, params: Params = None) -> dict[str, Any] | None:
        """Return the first row, or None for an empty result."""
        result = self.execute(stmt, params)
        try:
            row = result.mappings().first()
        except DBAPIError as exc:
            raise translate_error(exc, stmt) from exc
        return dict(row) if row is not None else None

    def scalar(self, stmt: Executable, params: Params = None) -> Any:
        """Return the first column of the first row (None when empty)."""
        result = self.execute(stmt, params)
        try:
            return result.scalar()
        except DBAPIError as exc:
            raise translate_error(exc, stmt) from exc
