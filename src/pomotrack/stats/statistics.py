# src/pomotrack/stats/statistics.py

"""
Statistics engine.

Read-only, recomputed on every call (no caching). All queries run on one
connection inside one read transaction, so a call either returns a consistent
snapshot or raises; it never mixes two states of the tables.

Calendar days are local days of the evaluating clock:
- naive `now` (or None) -> the process's local time zone
- aware `now`           -> now.tzinfo
"""

from __future__ import annotations

import logging
import sqlite3
from collections import Counter
from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta, tzinfo
from decimal import ROUND_HALF_UP, Decimal

from ..storage.database import Database

logger = logging.getLogger(__name__)

AVERAGE_WINDOW_DAYS = 30
STREAK_WINDOW_DAYS = 365


@dataclass(frozen=True, slots=True)
class Statistics:
    total_sessions: int
    total_work_sessions: int
    total_break_sessions: int
    total_minutes: int
    completed_tasks: int
    average_sessions_per_day: float
    streak_days: int

    def as_dict(self) -> dict[str, int | float]:
        return asdict(self)


def _local_date(ts: float, tz: tzinfo | None) -> date:
    return datetime.fromtimestamp(ts, tz=tz).date()


def round_half_up(value: float, places: int = 1) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def average_per_active_day(days: list[date]) -> float:
    """
    Mean sessions per calendar day, over days that had at least one session.

    `days` holds one entry per session; days without sessions never appear,
    so they are excluded from the mean rather than counted as zero.
    """
    if not days:
        return 0.0
    per_day = Counter(days)
    return round_half_up(sum(per_day.values()) / len(per_day), 1)


def streak_length(active_days: set[date], today: date) -> int:
    """Consecutive days ending today that are in active_days (0 if today is not)."""
    streak = 0
    day = today
    while day in active_days:
        streak += 1
        day -= timedelta(days=1)
    return streak


class StatisticsEngine:
    def __init__(self, db: Database) -> None:
        self._db = db

    def compute(self, now: datetime | None = None) -> Statistics:
        if now is None:
            now = datetime.now()
        tz = now.tzinfo
        now_ts = now.timestamp()
        today = now.date()

        with self._db.snapshot() as conn:
            totals = conn.execute(
                """
                SELECT COUNT(*) AS total,
                       COALESCE(SUM(CASE WHEN session_type = 'work' THEN 1 ELSE 0 END), 0) AS work,
                       COALESCE(SUM(CASE WHEN session_type IN ('short_break', 'long_break')
                                         THEN 1 ELSE 0 END), 0) AS breaks,
                       COALESCE(SUM(duration_minutes), 0) AS minutes
                FROM pomodoro_sessions
                """
            ).fetchone()
            (completed_tasks,) = conn.execute(
                "SELECT COUNT(*) FROM tasks WHERE is_completed = 1"
            ).fetchone()

            recent = self._completed_between(
                conn,
                since_ts=(now - timedelta(days=AVERAGE_WINDOW_DAYS)).timestamp(),
                until_ts=now_ts,
            )
            streak_window = self._completed_between(
                conn,
                since_ts=(now - timedelta(days=STREAK_WINDOW_DAYS)).timestamp(),
                until_ts=now_ts,
            )

        average = average_per_active_day([_local_date(ts, tz) for ts in recent])
        streak = streak_length({_local_date(ts, tz) for ts in streak_window}, today)

        stats = Statistics(
            total_sessions=int(totals["total"]),
            total_work_sessions=int(totals["work"]),
            total_break_sessions=int(totals["breaks"]),
            total_minutes=int(totals["minutes"]),
            completed_tasks=int(completed_tasks),
            average_sessions_per_day=average,
            streak_days=streak,
        )
        logger.debug("Statistics computed now=%s %s", now.isoformat(), stats)
        return stats

    @staticmethod
    def _completed_between(
        conn: sqlite3.Connection, *, since_ts: float, until_ts: float
    ) -> list[float]:
        rows = conn.execute(
            """
            SELECT completed_at
            FROM pomodoro_sessions
            WHERE completed_at >= ? AND completed_at <= ?
            """,
            (since_ts, until_ts),
        ).fetchall()
        return [float(r["completed_at"]) for r in rows]


def compute_statistics(db: Database, now: datetime | None = None) -> Statistics:
    return StatisticsEngine(db).compute(now)
