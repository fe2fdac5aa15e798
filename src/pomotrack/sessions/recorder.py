# src/pomotrack/sessions/recorder.py

"""
Session recorder.

The only writer of pomodoro_sessions and the only code that moves
tasks.completed_pomodoros. One call is one transaction:

    BEGIN IMMEDIATE
      [task must exist, if referenced]
      INSERT session
      [work + task: completed_pomodoros = completed_pomodoros + 1]
    COMMIT

Anything failing in between rolls the whole unit back, so a session is never
stored without its progress update (and vice versa).
"""

from __future__ import annotations

import logging
import sqlite3
import time
from collections.abc import Callable
from typing import Any

from ..core.validation import require_int
from ..errors import NotFoundError, TransactionFailure, ValidationError
from ..storage.database import Database
from .session_models import PomodoroSession, SessionType

logger = logging.getLogger(__name__)


def _coerce_session_type(raw: Any) -> SessionType:
    if isinstance(raw, SessionType):
        return raw
    try:
        return SessionType(raw)
    except ValueError:
        allowed = ", ".join(t.value for t in SessionType)
        raise ValidationError(f"sessionType must be one of: {allowed}") from None


class SessionRecorder:
    def __init__(self, db: Database, *, now_fn: Callable[[], float] = time.time) -> None:
        self._db = db
        self._now = now_fn

    @staticmethod
    def _row_to_session(row: sqlite3.Row) -> PomodoroSession:
        return PomodoroSession(
            id=int(row["id"]),
            task_id=int(row["task_id"]) if row["task_id"] is not None else None,
            session_type=SessionType(row["session_type"]),
            duration_minutes=int(row["duration_minutes"]),
            completed_at=float(row["completed_at"]),
        )

    def record_session(
        self,
        *,
        session_type: SessionType | str,
        duration_minutes: int,
        task_id: int | None = None,
    ) -> PomodoroSession:
        """
        Durably record a finished session.

        Raises:
        - ValidationError: bad session type / duration / task id (nothing written)
        - NotFoundError: task_id does not reference an existing task (nothing written)
        - TransactionFailure: the store could not commit (nothing written)
        """
        stype = _coerce_session_type(session_type)
        duration = require_int("durationMinutes", duration_minutes, minimum=1)
        if task_id is not None:
            task_id = require_int("taskId", task_id, minimum=1)

        completed_at = self._now()

        try:
            with self._db.transaction() as conn:
                if task_id is not None:
                    self._require_task(conn, task_id)

                cur = conn.execute(
                    """
                    INSERT INTO pomodoro_sessions(task_id, session_type, duration_minutes, completed_at)
                    VALUES (?, ?, ?, ?)
                    """,
                    (task_id, stype.value, duration, completed_at),
                )
                session_id = cur.lastrowid
                if session_id is None:
                    raise TransactionFailure("SQLite did not return lastrowid for session insert")

                if stype is SessionType.WORK and task_id is not None:
                    self._increment_task_progress(conn, task_id, now=completed_at)

                row = conn.execute(
                    "SELECT * FROM pomodoro_sessions WHERE id = ?", (session_id,)
                ).fetchone()
        except sqlite3.Error as exc:
            logger.exception(
                "record_session rolled back type=%s task_id=%s", stype.value, task_id
            )
            raise TransactionFailure(f"Session could not be recorded: {exc}") from exc

        session = self._row_to_session(row)
        logger.info(
            "Session recorded id=%s type=%s minutes=%s task_id=%s",
            session.id,
            session.session_type.value,
            session.duration_minutes,
            session.task_id,
        )
        return session

    @staticmethod
    def _require_task(conn: sqlite3.Connection, task_id: int) -> None:
        row = conn.execute("SELECT 1 FROM tasks WHERE id = ?", (task_id,)).fetchone()
        if row is None:
            raise NotFoundError(f"Task {task_id} not found")

    @staticmethod
    def _increment_task_progress(conn: sqlite3.Connection, task_id: int, *, now: float) -> None:
        cur = conn.execute(
            """
            UPDATE tasks
            SET completed_pomodoros = completed_pomodoros + 1,
                updated_at = ?
            WHERE id = ?
            """,
            (now, task_id),
        )
        if cur.rowcount != 1:
            raise TransactionFailure(f"Progress update for task {task_id} touched {cur.rowcount} rows")

    # ---- reads (used by the timer/console, not by statistics) ----

    def list_sessions(self, *, limit: int = 50) -> list[PomodoroSession]:
        conn = self._db.connect()
        try:
            rows = conn.execute(
                "SELECT * FROM pomodoro_sessions ORDER BY completed_at DESC, id DESC LIMIT ?",
                (int(limit),),
            ).fetchall()
            return [self._row_to_session(r) for r in rows]
        finally:
            conn.close()
