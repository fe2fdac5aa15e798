# src/pomotrack/storage/database.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)

SETTINGS_ROW_ID = 1


class Database:
    """
    Shared SQLite database for tasks, sessions, user settings and notes.

    The schema is created idempotently (CREATE ... IF NOT EXISTS) on startup.

    Thread-safety:
    - every caller opens its own short-lived connection
    - connections run in autocommit mode; multi-statement writes go through
      transaction(), which takes the write lock up front (BEGIN IMMEDIATE)
    """

    def __init__(self, db_path: str | Path = "pomodoro.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("Database ready db=%s", self._db_path)

    @property
    def path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- connections ----

    def connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0, isolation_level=None)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        conn.execute("PRAGMA foreign_keys = ON")
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    @contextlib.contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Write transaction: BEGIN IMMEDIATE ... COMMIT.

        Any exception inside the block rolls everything back and is re-raised.
        """
        conn = self.connect()
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                conn.rollback()
                raise
            conn.commit()
        finally:
            conn.close()

    @contextlib.contextmanager
    def snapshot(self) -> Iterator[sqlite3.Connection]:
        """Read transaction: every query inside sees the same committed state."""
        conn = self.connect()
        try:
            conn.execute("BEGIN")
            try:
                yield conn
            finally:
                conn.rollback()
        finally:
            conn.close()

    # ---- schema ----

    def _ensure_schema(self) -> None:
        conn = self.connect()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    description TEXT,
                    estimated_pomodoros INTEGER NOT NULL DEFAULT 1,
                    completed_pomodoros INTEGER NOT NULL DEFAULT 0,
                    is_completed INTEGER NOT NULL DEFAULT 0,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS pomodoro_sessions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    task_id INTEGER REFERENCES tasks(id) ON DELETE CASCADE,
                    session_type TEXT NOT NULL
                        CHECK (session_type IN ('work', 'short_break', 'long_break')),
                    duration_minutes INTEGER NOT NULL CHECK (duration_minutes > 0),
                    completed_at REAL NOT NULL
                )
                """
            )
            cur.execute(
                f"""
                CREATE TABLE IF NOT EXISTS user_settings (
                    id INTEGER PRIMARY KEY CHECK (id = {SETTINGS_ROW_ID}),
                    work_duration INTEGER NOT NULL DEFAULT 25,
                    short_break_duration INTEGER NOT NULL DEFAULT 5,
                    long_break_duration INTEGER NOT NULL DEFAULT 15,
                    sessions_until_long_break INTEGER NOT NULL DEFAULT 4,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS notes (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    content TEXT NOT NULL DEFAULT '',
                    type TEXT NOT NULL DEFAULT 'text' CHECK (type IN ('text', 'drawing')),
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )

            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_sessions_completed_at "
                "ON pomodoro_sessions(completed_at)"
            )
            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_sessions_task ON pomodoro_sessions(task_id)"
            )
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_completed ON tasks(is_completed)")
        finally:
            conn.close()
