"""SQLite persistence for transactions, categories and goals.

The database lives at ``config.DB_PATH`` unless a path is passed in.  Record
attribute names differ from column names in a few places (``kind`` is
stored as ``type``, a transaction's ``date`` as ``transaction_date``, a
category's ``limit`` as ``limit_amount`` and a goal's ``title`` as ``name``);
each store's ``field_map`` is the single place that translation happens.
"""

from __future__ import annotations

import logging
import sqlite3
import uuid
from contextlib import contextmanager
from dataclasses import fields as dataclass_fields
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Type

from .config import DB_PATH, DEFAULT_CATEGORIES, ensure_data_directories
from .models import Category, Goal, Transaction

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;
PRAGMA synchronous=NORMAL;

CREATE TABLE IF NOT EXISTS transactions (
    id TEXT PRIMARY KEY,
    type TEXT NOT NULL CHECK (type IN ('income', 'expense')),
    amount REAL NOT NULL,
    description TEXT,
    category TEXT NOT NULL,
    transaction_date TEXT NOT NULL,
    payment_method TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS ix_txn_date ON transactions (transaction_date);
CREATE INDEX IF NOT EXISTS ix_txn_category ON transactions (category);

CREATE TABLE IF NOT EXISTS categories (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    type TEXT NOT NULL CHECK (type IN ('income', 'expense')),
    limit_amount REAL,
    color TEXT NOT NULL DEFAULT '#EF4444',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    UNIQUE (name, type)
);

CREATE TABLE IF NOT EXISTS goals (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    target_amount REAL NOT NULL,
    current_amount REAL NOT NULL DEFAULT 0,
    deadline TEXT NOT NULL,
    type TEXT NOT NULL DEFAULT 'save' CHECK (type IN ('save', 'spend')),
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""

# Columns added after the first release; older databases get them on init.
MIGRATION_COLUMNS = {
    'categories': [('type', "TEXT NOT NULL DEFAULT 'expense'")],
    'goals': [('type', "TEXT NOT NULL DEFAULT 'save'")],
}

_READONLY_FIELDS = {'id', 'created_at', 'updated_at'}


class StoreError(RuntimeError):
    """A persistence call failed."""


class RecordNotFoundError(StoreError):
    """No row exists for the requested identifier."""


class DuplicateRecordError(StoreError):
    """A uniqueness constraint rejected the write."""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='seconds')


def _to_iso_date(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return date.fromisoformat(str(value)).isoformat()


@contextmanager
def connect(db_path: Optional[Path] = None) -> Iterator[sqlite3.Connection]:
    target = Path(db_path) if db_path is not None else DB_PATH
    if db_path is None:
        ensure_data_directories()
    target.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(target))
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    """Translate sqlite failures into the store's exception types."""
    try:
        yield
    except sqlite3.IntegrityError as exc:
        if 'UNIQUE' in str(exc):
            raise DuplicateRecordError(f"{action}: {exc}") from exc
        raise StoreError(f"{action}: {exc}") from exc
    except sqlite3.Error as exc:
        raise StoreError(f"{action}: {exc}") from exc


def init_db(db_path: Optional[Path] = None, seed_categories: bool = True) -> None:
    with _store_errors("initialize database"):
        with connect(db_path) as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()
            _migrate_database(conn)
            if seed_categories:
                _seed_default_categories(conn)


def _migrate_database(conn: sqlite3.Connection) -> None:
    """Add new columns to existing tables if they don't exist."""
    cursor = conn.cursor()
    for table, columns in MIGRATION_COLUMNS.items():
        cursor.execute(f"PRAGMA table_info({table})")
        existing_columns = [row[1] for row in cursor.fetchall()]
        for column_name, column_type in columns:
            if column_name in existing_columns:
                continue
            try:
                cursor.execute(f"ALTER TABLE {table} ADD COLUMN {column_name} {column_type}")
                logger.info("Added column %s to %s table", column_name, table)
            except sqlite3.OperationalError as e:
                if "duplicate column name" not in str(e):
                    raise
    conn.commit()


def _seed_default_categories(conn: sqlite3.Connection) -> None:
    (count,) = conn.execute("SELECT COUNT(*) FROM categories").fetchone()
    if count:
        return
    stamp = _now()
    conn.executemany(
        "INSERT INTO categories (id, name, type, limit_amount, color, created_at, updated_at) "
        "VALUES (?, ?, ?, ?, ?, ?, ?)",
        [
            (uuid.uuid4().hex, c['name'], c['kind'], c['limit'], c['color'], stamp, stamp)
            for c in DEFAULT_CATEGORIES
        ],
    )
    conn.commit()
    logger.info("Seeded %d default categories", len(DEFAULT_CATEGORIES))


class TableStore:
    """get-all/create/update/delete for one record type.

    ``field_map`` maps record attribute names to column names; it is the only
    place where the two shapes meet.
    """

    table: str = ''
    record_type: Type[Any] = object
    field_map: Dict[str, str] = {}
    date_fields: frozenset = frozenset()
    order_by: str = 'id'

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = Path(db_path) if db_path is not None else None

    # Translation -----------------------------------------------------------

    def _to_row(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        row: Dict[str, Any] = {}
        for attr, value in values.items():
            if attr not in self.field_map:
                raise ValueError(f"Unknown {self.record_type.__name__} field: {attr}")
            if attr in self.date_fields:
                value = _to_iso_date(value)
            row[self.field_map[attr]] = value
        return row

    def _from_row(self, row: sqlite3.Row) -> Any:
        values = {}
        for attr, column in self.field_map.items():
            value = row[column]
            if attr in self.date_fields and value is not None:
                value = date.fromisoformat(value)
            values[attr] = value
        return self.record_type(**values)

    def _select_sql(self) -> str:
        columns = ", ".join(self.field_map.values())
        return f"SELECT {columns} FROM {self.table}"

    # Operations ------------------------------------------------------------

    def get_all(self) -> List[Any]:
        with _store_errors(f"load {self.table}"):
            with connect(self.db_path) as conn:
                rows = conn.execute(f"{self._select_sql()} ORDER BY {self.order_by}").fetchall()
        return [self._from_row(row) for row in rows]

    def get(self, record_id: str) -> Any:
        with _store_errors(f"load {self.table} {record_id}"):
            with connect(self.db_path) as conn:
                row = conn.execute(f"{self._select_sql()} WHERE id = ?", (record_id,)).fetchone()
        if row is None:
            raise RecordNotFoundError(f"{self.table}: no record with id {record_id}")
        return self._from_row(row)

    def create(self, record: Any) -> Any:
        """Insert ``record`` and return the stored copy with id and timestamps."""
        values = {
            f.name: getattr(record, f.name)
            for f in dataclass_fields(record)
            if f.name not in _READONLY_FIELDS
        }
        stamp = _now()
        values.update(id=uuid.uuid4().hex, created_at=stamp, updated_at=stamp)
        row = self._to_row(values)
        placeholders = ", ".join("?" for _ in row)
        sql = f"INSERT INTO {self.table} ({', '.join(row)}) VALUES ({placeholders})"
        with _store_errors(f"create {self.table}"):
            with connect(self.db_path) as conn:
                conn.execute(sql, list(row.values()))
                conn.commit()
        logger.debug("Created %s %s", self.table, values['id'])
        return self.get(values['id'])

    def update(self, record_id: str, changes: Mapping[str, Any]) -> Any:
        """Apply a partial update keyed by record attribute names."""
        readonly = _READONLY_FIELDS.intersection(changes)
        if readonly:
            raise ValueError(f"Cannot update read-only fields: {', '.join(sorted(readonly))}")
        if not changes:
            return self.get(record_id)
        row = self._to_row({**changes, 'updated_at': _now()})
        assignments = ", ".join(f"{column} = ?" for column in row)
        sql = f"UPDATE {self.table} SET {assignments} WHERE id = ?"
        with _store_errors(f"update {self.table} {record_id}"):
            with connect(self.db_path) as conn:
                cursor = conn.execute(sql, [*row.values(), record_id])
                conn.commit()
                updated = cursor.rowcount
        if not updated:
            raise RecordNotFoundError(f"{self.table}: no record with id {record_id}")
        logger.debug("Updated %s %s: %s", self.table, record_id, sorted(changes))
        return self.get(record_id)

    def delete(self, record_id: str) -> bool:
        """Delete a row. Missing ids are ignored; returns whether a row went away."""
        with _store_errors(f"delete {self.table} {record_id}"):
            with connect(self.db_path) as conn:
                cursor = conn.execute(f"DELETE FROM {self.table} WHERE id = ?", (record_id,))
                conn.commit()
                removed = cursor.rowcount > 0
        logger.debug("Deleted %s %s (found=%s)", self.table, record_id, removed)
        return removed

    def clear(self) -> int:
        """Delete every row in the table. Returns the number removed."""
        with _store_errors(f"clear {self.table}"):
            with connect(self.db_path) as conn:
                cursor = conn.execute(f"DELETE FROM {self.table}")
                conn.commit()
                return cursor.rowcount


class TransactionStore(TableStore):
    table = 'transactions'
    record_type = Transaction
    field_map = {
        'id': 'id',
        'kind': 'type',
        'amount': 'amount',
        'description': 'description',
        'category': 'category',
        'date': 'transaction_date',
        'payment_method': 'payment_method',
        'created_at': 'created_at',
        'updated_at': 'updated_at',
    }
    date_fields = frozenset({'date'})
    order_by = 'transaction_date DESC, created_at DESC, id DESC'

    def _from_row(self, row: sqlite3.Row) -> Transaction:
        record = super()._from_row(row)
        record.description = record.description or ''
        record.payment_method = record.payment_method or ''
        return record


class CategoryStore(TableStore):
    table = 'categories'
    record_type = Category
    field_map = {
        'id': 'id',
        'name': 'name',
        'kind': 'type',
        'limit': 'limit_amount',
        'color': 'color',
        'created_at': 'created_at',
        'updated_at': 'updated_at',
    }
    order_by = 'name ASC, type ASC'


class GoalStore(TableStore):
    table = 'goals'
    record_type = Goal
    field_map = {
        'id': 'id',
        'title': 'name',
        'target_amount': 'target_amount',
        'current_amount': 'current_amount',
        'deadline': 'deadline',
        'kind': 'type',
        'created_at': 'created_at',
        'updated_at': 'updated_at',
    }
    date_fields = frozenset({'deadline'})
    order_by = 'deadline ASC, name ASC'


class FinanceStore:
    """The three record collections backed by one SQLite file."""

    def __init__(self, db_path: Optional[Path] = None, initialize: bool = True, seed_categories: bool = True):
        self.db_path = Path(db_path) if db_path is not None else None
        if initialize:
            init_db(self.db_path, seed_categories=seed_categories)
        self.transactions = TransactionStore(self.db_path)
        self.categories = CategoryStore(self.db_path)
        self.goals = GoalStore(self.db_path)
