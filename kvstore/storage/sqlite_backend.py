"""SqliteStore: durable, single-table storage backend using sqlite3.

The `meta_key` column has no declared type, so SQLite keeps integer and text
keys as distinct values (``1`` and ``'1'`` are different rows). Values are
serialized into the BLOB column `meta_value`.
"""
from __future__ import annotations

import logging
import re
import sqlite3
from typing import Any, Dict, Iterable, List, Optional

from kvstore import keys as keyutil
from kvstore.errors import NoSuchKeyError, ReadError, WriteError
from kvstore.keys import Key
from kvstore.storage.base import KeyValueStore
from kvstore.storage.serializer import PickleSerializer, Serializer

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# stays below SQLite's bound-parameter limit on old builds (999)
_CHUNK_SIZE = 500

_BACKEND_ERRORS = (sqlite3.Error, OverflowError)

_INT64_MIN, _INT64_MAX = -(2 ** 63), 2 ** 63 - 1


def _storable(key: Key) -> bool:
    """SQLite integers are signed 64-bit; other int keys can never be stored."""
    return not isinstance(key, int) or _INT64_MIN <= key <= _INT64_MAX


class SqliteStore(KeyValueStore):
    """Persistent store backed by one SQLite table.

    Parameters:
        connection: An open `sqlite3.Connection`. When omitted, a connection
                    to `db_path` is opened on first use.
        db_path:    Path to the SQLite database file.  Use ``":memory:"``
                    for an in-memory database (useful for testing).
        table_name: Table holding the entries; created if missing.
        serializer: Codec for values (defaults to pickle).
    """

    def __init__(
        self,
        connection: Optional[sqlite3.Connection] = None,
        db_path: str = "store.db",
        table_name: str = "store",
        serializer: Optional[Serializer] = None,
    ) -> None:
        if not isinstance(table_name, str) or not _IDENTIFIER.match(table_name):
            raise ValueError(f"The table name must be a plain SQL identifier. Got: {table_name!r}")
        self._db = connection
        self._owns_connection = connection is None
        self._db_path = db_path
        self._table_ready = False
        self.table_name = table_name
        self._serializer = serializer or PickleSerializer()

    def table_schema(self) -> str:
        return (
            f"CREATE TABLE IF NOT EXISTS {self.table_name} (\n"
            "    meta_key   PRIMARY KEY NOT NULL,\n"
            "    meta_value BLOB NOT NULL\n"
            ")"
        )

    def create_table(self) -> None:
        db = self._connection()
        with db:
            db.execute(self.table_schema())
        self._table_ready = True

    def _connection(self) -> sqlite3.Connection:
        if self._db is None:
            logger.debug("Opening SQLite database %s", self._db_path)
            self._db = sqlite3.connect(self._db_path)
        return self._db

    def _connect(self) -> sqlite3.Connection:
        if not self._table_ready:
            self.create_table()
        return self._connection()

    def close(self) -> None:
        if self._db is not None and self._owns_connection:
            self._db.close()
        self._db = None
        self._table_ready = False

    def _fetch_row(self, key: Key) -> Optional[bytes]:
        if not _storable(key):
            return None
        try:
            db = self._connect()
            row = db.execute(
                f"SELECT meta_value FROM {self.table_name} WHERE meta_key = ?", (key,)
            ).fetchone()
        except _BACKEND_ERRORS as exc:
            raise ReadError.for_exception(exc) from exc
        return None if row is None else row[0]

    def _fetch_rows(self, keys: List[Key]) -> Dict[Key, bytes]:
        found: Dict[Key, bytes] = {}
        keys = [key for key in keys if _storable(key)]
        try:
            db = self._connect()
            for start in range(0, len(keys), _CHUNK_SIZE):
                chunk = keys[start:start + _CHUNK_SIZE]
                placeholders = ", ".join("?" for _ in chunk)
                rows = db.execute(
                    f"SELECT meta_key, meta_value FROM {self.table_name} "
                    f"WHERE meta_key IN ({placeholders})",
                    chunk,
                ).fetchall()
                found.update((row[0], row[1]) for row in rows)
        except _BACKEND_ERRORS as exc:
            raise ReadError.for_exception(exc) from exc
        return found

    # ── Store contract ───────────────────────────────────────

    def set(self, key: Key, value: Any) -> None:
        keyutil.validate(key)
        serialized = self._serializer.dump(value)
        try:
            db = self._connect()
            with db:
                db.execute(
                    f"INSERT OR REPLACE INTO {self.table_name} (meta_key, meta_value) VALUES (?, ?)",
                    (key, serialized),
                )
        except _BACKEND_ERRORS as exc:
            raise WriteError.for_exception(exc) from exc

    def get(self, key: Key, default: Any = None) -> Any:
        keyutil.validate(key)
        data = self._fetch_row(key)
        if data is None:
            return default
        return self._serializer.load(data)

    def get_or_fail(self, key: Key) -> Any:
        keyutil.validate(key)
        data = self._fetch_row(key)
        if data is None:
            raise NoSuchKeyError.for_key(key)
        return self._serializer.load(data)

    def get_multiple(self, keys: Iterable[Key], default: Any = None) -> Dict[Key, Any]:
        keys = keyutil.normalize_keys(keys)
        keyutil.validate_multiple(keys)
        rows = self._fetch_rows(keyutil.unique(keys))
        return {key: self._serializer.load(rows[key]) if key in rows else default for key in keys}

    def get_multiple_or_fail(self, keys: Iterable[Key]) -> Dict[Key, Any]:
        keys = keyutil.normalize_keys(keys)
        keyutil.validate_multiple(keys)
        wanted = keyutil.unique(keys)
        rows = self._fetch_rows(wanted)
        missing = [key for key in wanted if key not in rows]
        if missing:
            raise NoSuchKeyError.for_keys(missing)
        return {key: self._serializer.load(rows[key]) for key in wanted}

    def remove(self, key: Key) -> bool:
        keyutil.validate(key)
        if not _storable(key):
            return False
        try:
            db = self._connect()
            with db:
                cursor = db.execute(f"DELETE FROM {self.table_name} WHERE meta_key = ?", (key,))
        except _BACKEND_ERRORS as exc:
            raise WriteError.for_exception(exc) from exc
        return cursor.rowcount > 0

    def exists(self, key: Key) -> bool:
        keyutil.validate(key)
        if not _storable(key):
            return False
        try:
            db = self._connect()
            row = db.execute(
                f"SELECT 1 FROM {self.table_name} WHERE meta_key = ?", (key,)
            ).fetchone()
        except _BACKEND_ERRORS as exc:
            raise ReadError.for_exception(exc) from exc
        return row is not None

    def clear(self) -> None:
        try:
            db = self._connect()
            with db:
                db.execute(f"DELETE FROM {self.table_name}")
        except _BACKEND_ERRORS as exc:
            raise WriteError.for_exception(exc) from exc

    def keys(self) -> List[Key]:
        try:
            db = self._connect()
            rows = db.execute(f"SELECT meta_key FROM {self.table_name}").fetchall()
        except _BACKEND_ERRORS as exc:
            raise ReadError.for_exception(exc) from exc
        return [row[0] for row in rows]
