# src/pomotrack/prefs/prefs_store.py

from __future__ import annotations

import logging
import sqlite3
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..core.patch import UNSET, Patch
from ..core.validation import require_int
from ..errors import TransactionFailure
from ..storage.database import SETTINGS_ROW_ID, Database

logger = logging.getLogger(__name__)

DEFAULT_WORK_DURATION = 25
DEFAULT_SHORT_BREAK_DURATION = 5
DEFAULT_LONG_BREAK_DURATION = 15
DEFAULT_SESSIONS_UNTIL_LONG_BREAK = 4

_PATCH_COLUMNS = (
    "work_duration",
    "short_break_duration",
    "long_break_duration",
    "sessions_until_long_break",
)
_MINIMUMS = {
    "work_duration": 1,
    "short_break_duration": 1,
    "long_break_duration": 1,
    "sessions_until_long_break": 2,
}


@dataclass(frozen=True, slots=True)
class UserSettings:
    id: int
    work_duration: int
    short_break_duration: int
    long_break_duration: int
    sessions_until_long_break: int
    created_at: float
    updated_at: float


@dataclass(frozen=True, slots=True)
class SettingsPatch(Patch):
    work_duration: Any = UNSET
    short_break_duration: Any = UNSET
    long_break_duration: Any = UNSET
    sessions_until_long_break: Any = UNSET


class UserSettingsStore:
    """
    The single user_settings row (timer durations).

    The row lives under a fixed key (id = 1, enforced by a CHECK constraint) and
    is created with defaults on first read, so there is never more than one.
    """

    def __init__(self, db: Database, *, now_fn: Callable[[], float] = time.time) -> None:
        self._db = db
        self._now = now_fn

    @staticmethod
    def _row_to_settings(row: sqlite3.Row) -> UserSettings:
        return UserSettings(
            id=int(row["id"]),
            work_duration=int(row["work_duration"]),
            short_break_duration=int(row["short_break_duration"]),
            long_break_duration=int(row["long_break_duration"]),
            sessions_until_long_break=int(row["sessions_until_long_break"]),
            created_at=float(row["created_at"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
        )

    def _ensure_row(self, conn: sqlite3.Connection) -> None:
        now = self._now()
        cur = conn.execute(
            """
            INSERT OR IGNORE INTO user_settings(
                id, work_duration, short_break_duration, long_break_duration,
                sessions_until_long_break, created_at, updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                SETTINGS_ROW_ID,
                DEFAULT_WORK_DURATION,
                DEFAULT_SHORT_BREAK_DURATION,
                DEFAULT_LONG_BREAK_DURATION,
                DEFAULT_SESSIONS_UNTIL_LONG_BREAK,
                now,
                now,
            ),
        )
        if cur.rowcount == 1:
            logger.info("UserSettings created with defaults")

    def get_settings(self) -> UserSettings:
        with self._db.transaction() as conn:
            self._ensure_row(conn)
            row = conn.execute(
                "SELECT * FROM user_settings WHERE id = ?", (SETTINGS_ROW_ID,)
            ).fetchone()
        return self._row_to_settings(row)

    def update_settings(self, patch: SettingsPatch) -> UserSettings:
        changes = patch.changes()
        if not changes:
            return self.get_settings()

        clean = {name: require_int(name, value, minimum=_MINIMUMS[name]) for name, value in changes.items()}
        patch = SettingsPatch(**clean)
        params = patch.bind(_PATCH_COLUMNS)
        params["id"] = SETTINGS_ROW_ID
        params["now"] = self._now()

        with self._db.transaction() as conn:
            self._ensure_row(conn)
            cur = conn.execute(
                """
                UPDATE user_settings
                SET work_duration = CASE WHEN :set_work_duration
                        THEN :work_duration ELSE work_duration END,
                    short_break_duration = CASE WHEN :set_short_break_duration
                        THEN :short_break_duration ELSE short_break_duration END,
                    long_break_duration = CASE WHEN :set_long_break_duration
                        THEN :long_break_duration ELSE long_break_duration END,
                    sessions_until_long_break = CASE WHEN :set_sessions_until_long_break
                        THEN :sessions_until_long_break ELSE sessions_until_long_break END,
                    updated_at = :now
                WHERE id = :id
                """,
                params,
            )
            if cur.rowcount != 1:
                raise TransactionFailure("Settings row could not be updated")
            row = conn.execute(
                "SELECT * FROM user_settings WHERE id = ?", (SETTINGS_ROW_ID,)
            ).fetchone()

        logger.info("UserSettings updated fields=%s", sorted(clean))
        return self._row_to_settings(row)
