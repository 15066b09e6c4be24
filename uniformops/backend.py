"""Generic row access used by the import workflow and the API.

Every call runs in its own transaction and commits before returning, so a
multi-step workflow is a sequence of independent writes.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import Table, delete, func, or_, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from . import models  # noqa: F401  registers the tables on Base.metadata
from .db import Base
from .errors import BackendError
from .metrics import BACKEND_FAILURES

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class Backend:
    def __init__(self, engine: Engine):
        self.engine = engine

    def _table(self, name: str) -> Table:
        return Base.metadata.tables[name]

    def _where(self, t: Table, eq: Optional[Dict[str, Any]], ieq: Optional[Dict[str, str]] = None,
               contains: Optional[Dict[str, str]] = None) -> list:
        clauses = []
        for col, value in (eq or {}).items():
            if isinstance(value, (list, tuple, set, frozenset)):
                clauses.append(t.c[col].in_(list(value)))
            elif value is None:
                clauses.append(t.c[col].is_(None))
            else:
                clauses.append(t.c[col] == value)
        for col, value in (ieq or {}).items():
            clauses.append(func.lower(t.c[col]) == (value or "").lower())
        if contains:
            # substring search, any of the given columns may match
            clauses.append(or_(*[
                func.lower(t.c[col]).contains((value or "").lower(), autoescape=True)
                for col, value in contains.items()
            ]))
        return clauses

    def _fail(self, operation: str, table: str, exc: Exception) -> BackendError:
        BACKEND_FAILURES.labels(operation=operation, table=table).inc()
        logger.error("Backend %s on %s failed: %s", operation, table, exc)
        return BackendError(operation, table, exc)

    def insert(self, table: str, rows: Iterable[Row]) -> List[Row]:
        t = self._table(table)
        created: List[Row] = []
        try:
            with self.engine.begin() as conn:
                for row in rows:
                    result = conn.execute(t.insert().values(**row))
                    pk = result.inserted_primary_key[0]
                    created.append(dict(conn.execute(select(t).where(t.c.id == pk)).mappings().one()))
        except SQLAlchemyError as e:
            raise self._fail("insert", table, e) from e
        return created

    def select(self, table: str, eq: Optional[Dict[str, Any]] = None, ieq: Optional[Dict[str, str]] = None,
               contains: Optional[Dict[str, str]] = None, order_by: Sequence[str] = (),
               limit: Optional[int] = None) -> List[Row]:
        """Rows of ``table``.

        ``eq`` is exact match (a collection means IN), ``ieq`` is
        case-insensitive equality, ``contains`` is a case-insensitive
        substring search OR'ed across its columns. ``order_by`` names
        columns, a leading ``-`` sorts descending.
        """
        t = self._table(table)
        stmt = select(t).where(*self._where(t, eq, ieq, contains))
        for col in order_by:
            stmt = stmt.order_by(t.c[col[1:]].desc() if col.startswith("-") else t.c[col].asc())
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            with self.engine.connect() as conn:
                return [dict(r) for r in conn.execute(stmt).mappings().all()]
        except SQLAlchemyError as e:
            raise self._fail("select", table, e) from e

    def get(self, table: str, row_id: int) -> Optional[Row]:
        rows = self.select(table, eq={"id": row_id}, limit=1)
        return rows[0] if rows else None

    def update(self, table: str, patch: Row, eq: Dict[str, Any]) -> int:
        t = self._table(table)
        stmt = update(t).where(*self._where(t, eq)).values(**patch)
        try:
            with self.engine.begin() as conn:
                return conn.execute(stmt).rowcount
        except SQLAlchemyError as e:
            raise self._fail("update", table, e) from e

    def delete(self, table: str, eq: Dict[str, Any]) -> int:
        t = self._table(table)
        stmt = delete(t).where(*self._where(t, eq))
        try:
            with self.engine.begin() as conn:
                return conn.execute(stmt).rowcount
        except SQLAlchemyError as e:
            raise self._fail("delete", table, e) from e
