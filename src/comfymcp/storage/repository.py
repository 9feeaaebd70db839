"""Key-value storage backends.

Job records live in a flat key space (``job:{prompt_id}``) with three
operations: get, put, and a prefix scan that can run in reverse key order.

- SQLiteKeyValueStore: Persistent SQLite storage
- InMemoryKeyValueStore: In-memory storage for testing
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

from comfymcp.core.exceptions import StorageError

logger = logging.getLogger("comfymcp.storage")


# -----------------------------------------------------------------------------
# Schema
# -----------------------------------------------------------------------------

SCHEMA = """
CREATE TABLE IF NOT EXISTS kv (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""


# -----------------------------------------------------------------------------
# SQLite Store
# -----------------------------------------------------------------------------


class SQLiteKeyValueStore:
    """SQLite-backed key-value store.

    Usage:
        store = SQLiteKeyValueStore("jobs.sqlite")
        store.put("job:abc", "{...}")
        store.list(prefix="job:", limit=10, reverse=True)
    """

    def __init__(self, db_path: Union[str, Path] = ":memory:"):
        """Initialize store.

        Args:
            db_path: Path to SQLite database file, or ":memory:" for in-memory.
        """
        self.db_path = str(db_path)
        self._is_memory = self.db_path == ":memory:"
        self._persistent_conn: Optional[sqlite3.Connection] = None

        if not self._is_memory:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        # For in-memory databases, keep a persistent connection
        if self._is_memory:
            self._persistent_conn = self._create_connection()

        self._init_schema()

    def _create_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Get a database connection, translating sqlite errors to StorageError."""
        conn = self._persistent_conn if self._is_memory else None
        try:
            if conn is None:
                conn = self._create_connection()
            try:
                yield conn
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                if not self._is_memory:
                    conn.close()
        except sqlite3.Error as exc:
            logger.error("Storage failure on %s: %s", self.db_path, exc)
            raise StorageError("Job storage is unavailable", context={"error": str(exc)}) from exc

    def _init_schema(self) -> None:
        with self._connection() as conn:
            conn.executescript(SCHEMA)

    def get(self, key: str) -> Optional[str]:
        with self._connection() as conn:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        return row["value"] if row else None

    def put(self, key: str, value: str) -> None:
        with self._connection() as conn:
            conn.execute(
                "INSERT INTO kv (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, value),
            )

    def list(
        self,
        prefix: str = "",
        *,
        limit: Optional[int] = None,
        reverse: bool = False,
    ) -> List[Tuple[str, str]]:
        """Return (key, value) pairs whose key starts with ``prefix``, in key order."""
        order = "DESC" if reverse else "ASC"
        sql = f"SELECT key, value FROM kv WHERE substr(key, 1, ?) = ? ORDER BY key {order}"
        params: List[object] = [len(prefix), prefix]
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)
        with self._connection() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [(row["key"], row["value"]) for row in rows]


# -----------------------------------------------------------------------------
# In-Memory Store
# -----------------------------------------------------------------------------


class InMemoryKeyValueStore:
    """Dictionary-backed store with the same semantics as SQLiteKeyValueStore."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def put(self, key: str, value: str) -> None:
        self._data[key] = value

    def list(
        self,
        prefix: str = "",
        *,
        limit: Optional[int] = None,
        reverse: bool = False,
    ) -> List[Tuple[str, str]]:
        keys = sorted((k for k in self._data if k.startswith(prefix)), reverse=reverse)
        if limit is not None:
            keys = keys[:limit]
        return [(k, self._data[k]) for k in keys]
