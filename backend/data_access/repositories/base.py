"""
Access to the kv_store table.

The game keeps only a handful of text values (today, just the high score),
so repositories share one small table keyed by name. Each transaction opens
its own SQLite connection, so the tick thread and the HTTP thread never
share a connection object.
"""

from contextlib import contextmanager
from typing import Generator, Optional
import sqlite3

import database


class BaseRepository:
    """Reads and writes text values in kv_store, one connection per transaction."""

    @contextmanager
    def transaction(self, write: bool = True) -> Generator[sqlite3.Cursor, None, None]:
        """
        Yield a cursor on a fresh connection.

        A write transaction commits when the block exits normally and rolls
        back when it raises. The connection is always closed.
        """
        conn = database.get_connection()
        cursor = conn.cursor()
        try:
            yield cursor
            if write:
                conn.commit()
        except Exception:
            if write:
                conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    @staticmethod
    def _read_value(cursor: sqlite3.Cursor, key: str) -> Optional[str]:
        cursor.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
        row = cursor.fetchone()
        return None if row is None else row["value"]

    @staticmethod
    def _write_value(cursor: sqlite3.Cursor, key: str, value: str) -> None:
        cursor.execute(
            """
            INSERT INTO kv_store (key, value, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = CURRENT_TIMESTAMP
            """,
            (key, value),
        )
