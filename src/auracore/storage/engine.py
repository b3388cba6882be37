"""Store engine for AuraCore.

The whole database lives in an in-memory SQLite connection. open() loads the
store file into it (or starts empty), and every mutating statement is
followed by a full copy of the in-memory database back to disk before the
call returns. There is no batching and no write-ahead log: a crash between a
statement and its persist loses only that statement.

Every mutation touches the filesystem. Callers needing bulk writes must
batch above this layer; none is provided.

Example:
    >>> store = StoreEngine(Path("~/.auracore/auracore.db").expanduser()).open()
    >>> store.execute("INSERT INTO projects (id, name, created_at, updated_at) "
    ...               "VALUES (?, ?, ?, ?)", ["p1", "Site", now, now])
    >>> store.query_one("SELECT * FROM projects WHERE id = ?", ["p1"])
"""

import logging
import os
import sqlite3
import threading
from pathlib import Path
from typing import Any, Optional, Sequence

from auracore.constants import DEFAULT_DATA_DIR, DEFAULT_DB_FILENAME
from auracore.errors import NotInitializedError, StorageError
from auracore.storage.schema import ensure_schema, list_indexes, list_tables

# MCP servers must never write to stdout (corrupts JSON-RPC)
logger = logging.getLogger(__name__)


class StoreEngine:
    """Owner of the store file and its in-memory working copy.

    Args:
        db_path: Path to the store file. Defaults to ~/.auracore/auracore.db

    Attributes:
        db_path: Path to the store file
        _conn: In-memory SQLite connection, None until open() completes
    """

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = Path(db_path) if db_path else DEFAULT_DATA_DIR / DEFAULT_DB_FILENAME
        self._conn: Optional[sqlite3.Connection] = None
        self._init_lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self) -> "StoreEngine":
        """Load the store file (or create it), ensure schema, persist.

        Safe to call repeatedly and from several threads: concurrent callers
        wait on the first initialization and reuse its connection.

        Returns:
            self, for chaining

        Raises:
            StorageError: If the file cannot be read or written
        """
        if self._conn is not None:
            return self

        with self._init_lock:
            if self._conn is not None:
                return self

            conn: Optional[sqlite3.Connection] = None
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(":memory:", check_same_thread=False)

                loaded = self.db_path.exists()
                if loaded:
                    source = sqlite3.connect(str(self.db_path))
                    try:
                        source.backup(conn)
                    finally:
                        source.close()

                conn.row_factory = sqlite3.Row
                conn.execute("PRAGMA foreign_keys = ON")
                ensure_schema(conn)
                logger.debug(
                    f"Schema ready: tables={list_tables(conn)} indexes={list_indexes(conn)}"
                )
                self._write_file(conn)

            except (sqlite3.Error, OSError) as e:
                if conn is not None:
                    conn.close()
                raise StorageError(f"Failed to open store at {self.db_path}: {e}") from e

            self._conn = conn
            logger.info(
                f"Store opened at {self.db_path} "
                f"({'loaded existing file' if loaded else 'created new file'})"
            )
            return self

    def close(self) -> None:
        """Close the in-memory connection. The file is already current."""
        with self._init_lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def _require_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise NotInitializedError()
        return self._conn

    # =========================================================================
    # Statements
    # =========================================================================

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Run one mutating statement and persist the database.

        A failed statement is rolled back and nothing is written to disk. If
        the persist fails, the in-memory database is reloaded from the file so
        the mutation is not visible to later reads.

        Args:
            sql: Parameterized statement
            params: Bound values

        Returns:
            Number of rows affected

        Raises:
            NotInitializedError: If open() has not completed
            StorageError: If the statement or the persist fails
        """
        conn = self._require_conn()
        try:
            cursor = conn.execute(sql, list(params))
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageError(f"Statement failed: {e}") from e

        try:
            self.persist()
        except StorageError:
            self._reload(conn)
            raise
        return cursor.rowcount

    def query_all(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """Run a read-only statement and return every row as a dict.

        Raises:
            NotInitializedError: If open() has not completed
            StorageError: If the query fails
        """
        conn = self._require_conn()
        try:
            rows = conn.execute(sql, list(params)).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Query failed: {e}") from e
        return [dict(row) for row in rows]

    def query_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[dict[str, Any]]:
        """Return the first row of a read-only statement, or None when empty."""
        rows = self.query_all(sql, params)
        return rows[0] if rows else None

    # =========================================================================
    # Persistence
    # =========================================================================

    def persist(self) -> None:
        """Write the whole in-memory database over the store file.

        Raises:
            NotInitializedError: If open() has not completed
            StorageError: If serialization or the file write fails
        """
        conn = self._require_conn()
        try:
            self._write_file(conn)
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Failed to persist store to {self.db_path}: {e}") from e

    def _reload(self, conn: sqlite3.Connection) -> None:
        """Replace the in-memory contents with the last persisted file."""
        try:
            source = sqlite3.connect(str(self.db_path))
            try:
                source.backup(conn)
            finally:
                source.close()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to reload store from {self.db_path}: {e}") from e
        logger.warning(f"Persist failed, reverted in-memory store to {self.db_path}")

    def _write_file(self, conn: sqlite3.Connection) -> None:
        tmp_path = self.db_path.with_name(self.db_path.name + ".tmp")
        if tmp_path.exists():
            tmp_path.unlink()

        target = sqlite3.connect(str(tmp_path))
        try:
            conn.backup(target)
        finally:
            target.close()

        os.replace(tmp_path, self.db_path)
        logger.debug(f"Persisted store to {self.db_path}")
