"""
Trivia Round - Storage Layer
SQLite-backed key-value store for the player name, leaderboards, and preferences.
"""

import sqlite3
import threading
import os

from trivia.config import DB_PATH


class PersistenceError(Exception):
    """Local storage is unavailable or a read/write failed."""


class QuizStorage:
    def __init__(self, db_path=DB_PATH):
        self._db_path = db_path
        self._lock = threading.Lock()

        if db_path != ":memory:":
            os.makedirs(os.path.dirname(os.path.abspath(db_path)), exist_ok=True)

        # Handle corrupted DB
        try:
            self._conn = self._open()
        except sqlite3.DatabaseError:
            backup = db_path + ".bak"
            print(f"[DB] Database corrupted, backing up to {backup}")
            if os.path.exists(db_path):
                os.replace(db_path, backup)
            self._conn = self._open()

    def _open(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv (
                    key   TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)
            conn.commit()
        except sqlite3.DatabaseError:
            conn.close()
            raise
        return conn

    def get(self, key: str) -> str | None:
        try:
            with self._lock:
                row = self._conn.execute(
                    "SELECT value FROM kv WHERE key = ?", (key,),
                ).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"read of '{key}' failed: {e}") from e
        return row[0] if row else None

    def set(self, key: str, value: str):
        try:
            with self._lock:
                self._conn.execute(
                    "INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)",
                    (key, value),
                )
                self._conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"write of '{key}' failed: {e}") from e

    def remove(self, key: str):
        try:
            with self._lock:
                self._conn.execute("DELETE FROM kv WHERE key = ?", (key,))
                self._conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"delete of '{key}' failed: {e}") from e

    def close(self):
        with self._lock:
            self._conn.close()
        print("[DB] Database closed")
