# src/pomotrack/tasks/task_store.py

from __future__ import annotations

import logging
import sqlite3
import time
from collections.abc import Callable

from ..core.validation import optional_text, require_bool, require_int, require_text
from ..errors import NotFoundError, ValidationError
from ..storage.database import Database
from .task_models import Task, TaskPatch

logger = logging.getLogger(__name__)

_PATCH_COLUMNS = ("title", "description", "estimated_pomodoros", "is_completed")


class TaskStore:
    """
    Task CRUD on top of the shared Database.

    completed_pomodoros is read-only here; it only moves through
    SessionRecorder.record_session().

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db: Database, *, now_fn: Callable[[], float] = time.time) -> None:
        self._db = db
        self._now = now_fn
        try:
            total = self.count_tasks()
        except sqlite3.Error:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", db.path, total)

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            title=str(row["title"]),
            description=row["description"],
            estimated_pomodoros=int(row["estimated_pomodoros"]),
            completed_pomodoros=int(row["completed_pomodoros"] or 0),
            is_completed=bool(row["is_completed"]),
            created_at=float(row["created_at"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
        )

    @staticmethod
    def _clean_patch(patch: TaskPatch) -> TaskPatch:
        changes = patch.changes()
        if not changes:
            raise ValidationError("No fields to update")

        clean = dict(changes)
        if "title" in clean:
            clean["title"] = require_text("title", clean["title"])
        if "description" in clean:
            clean["description"] = optional_text("description", clean["description"])
        if "estimated_pomodoros" in clean:
            clean["estimated_pomodoros"] = require_int(
                "estimated_pomodoros", clean["estimated_pomodoros"], minimum=1
            )
        if "is_completed" in clean:
            clean["is_completed"] = require_bool("is_completed", clean["is_completed"])
        return TaskPatch(**clean)

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._db.connect()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)
        finally:
            conn.close()

    def create_task(
        self,
        *,
        title: str,
        description: str | None = None,
        estimated_pomodoros: int = 1,
    ) -> Task:
        title = require_text("title", title)
        description = optional_text("description", description)
        estimated_pomodoros = require_int("estimated_pomodoros", estimated_pomodoros, minimum=1)

        now = self._now()
        with self._db.transaction() as conn:
            cur = conn.execute(
                """
                INSERT INTO tasks(title, description, estimated_pomodoros, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (title, description, estimated_pomodoros, now, now),
            )
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for tasks insert")
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (rowid,)).fetchone()

        task = self._row_to_task(row)
        logger.debug("Task created id=%s estimated=%s", task.id, task.estimated_pomodoros)
        return task

    def get_task(self, task_id: int) -> Task | None:
        conn = self._db.connect()
        try:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (int(task_id),)).fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    def list_tasks(self) -> list[Task]:
        """Open tasks first, newest first within each group."""
        conn = self._db.connect()
        try:
            rows = conn.execute(
                "SELECT * FROM tasks ORDER BY is_completed ASC, created_at DESC, id DESC"
            ).fetchall()
            return [self._row_to_task(r) for r in rows]
        finally:
            conn.close()

    def update_task(self, task_id: int, patch: TaskPatch) -> Task:
        patch = self._clean_patch(patch)
        params = patch.bind(_PATCH_COLUMNS)
        params["id"] = int(task_id)
        params["now"] = self._now()

        with self._db.transaction() as conn:
            cur = conn.execute(
                """
                UPDATE tasks
                SET title = CASE WHEN :set_title THEN :title ELSE title END,
                    description = CASE WHEN :set_description THEN :description ELSE description END,
                    estimated_pomodoros = CASE WHEN :set_estimated_pomodoros
                        THEN :estimated_pomodoros ELSE estimated_pomodoros END,
                    is_completed = CASE WHEN :set_is_completed THEN :is_completed ELSE is_completed END,
                    updated_at = :now
                WHERE id = :id
                """,
                params,
            )
            if cur.rowcount != 1:
                raise NotFoundError(f"Task {task_id} not found")
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (int(task_id),)).fetchone()

        logger.debug("Task updated id=%s fields=%s", task_id, sorted(patch.changes()))
        return self._row_to_task(row)

    def delete_task(self, task_id: int) -> bool:
        """
        Delete a task and (via ON DELETE CASCADE) its sessions.

        Deleting a task that does not exist is not an error; returns False.
        """
        with self._db.transaction() as conn:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (int(task_id),))
            deleted = cur.rowcount == 1
        logger.debug("Task delete id=%s deleted=%s", task_id, deleted)
        return deleted
