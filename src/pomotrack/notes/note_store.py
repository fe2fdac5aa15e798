# src/pomotrack/notes/note_store.py

from __future__ import annotations

import logging
import sqlite3
import time
from collections.abc import Callable

from ..core.validation import require_text
from ..errors import NotFoundError, ValidationError
from ..storage.database import Database
from .note_models import Note, NotePatch, NoteType

logger = logging.getLogger(__name__)

_PATCH_COLUMNS = ("title", "content")


class NoteStore:
    """Free-form notes. Independent of tasks and sessions."""

    def __init__(self, db: Database, *, now_fn: Callable[[], float] = time.time) -> None:
        self._db = db
        self._now = now_fn

    @staticmethod
    def _row_to_note(row: sqlite3.Row) -> Note:
        return Note(
            id=int(row["id"]),
            title=str(row["title"]),
            content=str(row["content"] or ""),
            type=NoteType(row["type"]),
            created_at=float(row["created_at"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
        )

    @staticmethod
    def _content(value: object) -> str:
        if not isinstance(value, str):
            raise ValidationError("content must be a string")
        return value

    def create_note(self, *, title: str, content: str, note_type: NoteType | str = NoteType.TEXT) -> Note:
        title = require_text("title", title)
        content = self._content(content)
        try:
            ntype = NoteType(note_type)
        except ValueError:
            raise ValidationError("type must be 'text' or 'drawing'") from None

        now = self._now()
        with self._db.transaction() as conn:
            cur = conn.execute(
                "INSERT INTO notes(title, content, type, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
                (title, content, ntype.value, now, now),
            )
            row = conn.execute("SELECT * FROM notes WHERE id = ?", (cur.lastrowid,)).fetchone()

        note = self._row_to_note(row)
        logger.debug("Note created id=%s type=%s size=%s", note.id, note.type.value, len(content))
        return note

    def get_note(self, note_id: int) -> Note | None:
        conn = self._db.connect()
        try:
            row = conn.execute("SELECT * FROM notes WHERE id = ?", (int(note_id),)).fetchone()
            return self._row_to_note(row) if row else None
        finally:
            conn.close()

    def list_notes(self) -> list[Note]:
        conn = self._db.connect()
        try:
            rows = conn.execute("SELECT * FROM notes ORDER BY updated_at DESC, id DESC").fetchall()
            return [self._row_to_note(r) for r in rows]
        finally:
            conn.close()

    def update_note(self, note_id: int, patch: NotePatch) -> Note:
        changes = patch.changes()
        if not changes:
            raise ValidationError("No fields to update")
        if "title" in changes:
            changes["title"] = require_text("title", changes["title"])
        if "content" in changes:
            changes["content"] = self._content(changes["content"])

        params = NotePatch(**changes).bind(_PATCH_COLUMNS)
        params["id"] = int(note_id)
        params["now"] = self._now()

        with self._db.transaction() as conn:
            cur = conn.execute(
                """
                UPDATE notes
                SET title = CASE WHEN :set_title THEN :title ELSE title END,
                    content = CASE WHEN :set_content THEN :content ELSE content END,
                    updated_at = :now
                WHERE id = :id
                """,
                params,
            )
            if cur.rowcount != 1:
                raise NotFoundError(f"Note {note_id} not found")
            row = conn.execute("SELECT * FROM notes WHERE id = ?", (int(note_id),)).fetchone()

        return self._row_to_note(row)

    def delete_note(self, note_id: int) -> bool:
        with self._db.transaction() as conn:
            cur = conn.execute("DELETE FROM notes WHERE id = ?", (int(note_id),))
            return cur.rowcount == 1
