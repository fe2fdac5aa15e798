# src/pomotrack/sessions/session_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class SessionType(StrEnum):
    WORK = "work"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"

    @property
    def is_break(self) -> bool:
        return self is not SessionType.WORK


@dataclass(frozen=True, slots=True)
class PomodoroSession:
    """A finished session. Never updated once stored."""

    id: int
    task_id: int | None
    session_type: SessionType
    duration_minutes: int
    completed_at: float
