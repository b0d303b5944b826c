from __future__ import annotations

import contextlib
import logging
import typing as t

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import make_url
from sqlalchemy.pool import StaticPool

from ttl_store.core.models import NO_EXPIRY, Entry
from ttl_store.errors import StorageError

from .base import StorageAdapter

_logger = logging.getLogger(__name__)

# Dialects with INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS: t.Dict[str, t.Callable[[sa.Table], t.Any]] = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class SQLStorage(StorageAdapter):
    """Relational storage adapter built on SQLAlchemy Core.

    - One table per store: `key` TEXT primary key, `value` TEXT, `exp` INTEGER
    - Writes are single `INSERT ... ON CONFLICT (key) DO UPDATE` statements
    - Every value goes through bound parameters; only the table name is
      interpolated, and it is quoted by SQLAlchemy
    """

    def __init__(self, table_name: str, url: str = "sqlite:///db.sqlite", *, echo: bool = False) -> None:
        parsed = make_url(url)
        backend = parsed.get_backend_name()
        if backend not in _UPSERT_INSERTS:
            raise StorageError(f"Dialect {backend!r} has no upsert support")
        self._insert = _UPSERT_INSERTS[backend]
        self._engine = sa.create_engine(parsed, echo=echo, **_engine_options(parsed))
        self._table = sa.Table(
            table_name,
            sa.MetaData(),
            sa.Column("key", sa.Text, primary_key=True),
            sa.Column("value", sa.Text),
            sa.Column("exp", sa.Integer, nullable=False, server_default=sa.text("0")),
        )
        self._conn: t.Optional[sa.Connection] = None

    @property
    def table(self) -> sa.Table:
        return self._table

    @property
    def engine(self) -> sa.Engine:
        return self._engine

    @contextlib.contextmanager
    def atomic(self) -> t.Iterator[None]:
        if self._conn is not None:
            # already inside a unit of work
            yield
            return
        with self._engine.begin() as conn:
            self._conn = conn
            try:
                yield
            finally:
                self._conn = None

    @contextlib.contextmanager
    def _connect(self) -> t.Iterator[sa.Connection]:
        if self._conn is not None:
            yield self._conn
            return
        with self._engine.begin() as conn:
            yield conn

    def create_table(self) -> None:
        try:
            self._table.create(self._engine, checkfirst=True)
        except (sa.exc.OperationalError, sa.exc.ProgrammingError) as exc:
            # lost a creation race against another connection
            if "already exists" not in str(exc):
                raise
            _logger.debug("Table %s already exists", self._table.name)
        else:
            _logger.debug("Ensured table %s", self._table.name)

    def fetch(self, key: str) -> t.Optional[Entry]:
        query = sa.select(self._table).where(self._table.c.key == key)
        with self._connect() as conn:
            row = conn.execute(query).one_or_none()
        return None if row is None else _to_entry(row)

    def fetch_all(self) -> t.List[Entry]:
        with self._connect() as conn:
            rows = conn.execute(sa.select(self._table)).all()
        return [_to_entry(row) for row in rows]

    def upsert(self, entry: Entry) -> None:
        stmt = self._insert(self._table).values(key=entry.key, value=entry.value, exp=entry.exp)
        stmt = stmt.on_conflict_do_update(
            index_elements=[self._table.c.key],
            set_={"value": stmt.excluded.value, "exp": stmt.excluded.exp},
        )
        with self._connect() as conn:
            conn.execute(stmt)

    def delete(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute(sa.delete(self._table).where(self._table.c.key == key))

    def delete_all(self) -> None:
        with self._connect() as conn:
            conn.execute(sa.delete(self._table))

    def delete_expired(self, now: float) -> int:
        stmt = sa.delete(self._table).where(
            self._table.c.exp != NO_EXPIRY,
            self._table.c.exp <= now,
        )
        with self._connect() as conn:
            result = conn.execute(stmt)
        return result.rowcount

    def count(self) -> int:
        query = sa.select(sa.func.count()).select_from(self._table)
        with self._connect() as conn:
            return conn.execute(query).scalar_one()

    def close(self) -> None:
        self._engine.dispose()


def _engine_options(parsed: sa.URL) -> t.Dict[str, t.Any]:
    if parsed.get_backend_name() != "sqlite":
        return {}
    # callers are serialized by the Store lock, so connections may hop threads
    options: t.Dict[str, t.Any] = {"connect_args": {"check_same_thread": False}}
    if parsed.database in (None, "", ":memory:"):
        # one shared connection, or every checkout would see an empty database
        options["poolclass"] = StaticPool
    return options


def _to_entry(row: sa.Row) -> Entry:
    key, value, exp = row
    return Entry(key=key, value=value, exp=int(exp or NO_EXPIRY))
