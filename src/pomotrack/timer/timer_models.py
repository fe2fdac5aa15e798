# src/pomotrack/timer/timer_models.py

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import Any

from ..sessions.session_models import SessionType


class TimerStatus(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass(frozen=True, slots=True)
class TimerState:
    """
    Countdown state that survives restarts.

    Only wall-clock anchors are stored (started_at + elapsed_seconds), never a
    ticking "seconds left" value, so the remaining time of a rehydrated timer is
    recomputed from how much time actually passed.
    """

    session_type: SessionType
    status: TimerStatus
    duration_seconds: int
    elapsed_seconds: float = 0.0
    started_at: float | None = None
    task_id: int | None = None
    completed_work_sessions: int = 0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["session_type"] = self.session_type.value
        data["status"] = self.status.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TimerState:
        started_at = data.get("started_at")
        task_id = data.get("task_id")
        return cls(
            session_type=SessionType(data["session_type"]),
            status=TimerStatus(data["status"]),
            duration_seconds=int(data["duration_seconds"]),
            elapsed_seconds=float(data.get("elapsed_seconds") or 0.0),
            started_at=float(started_at) if started_at is not None else None,
            task_id=int(task_id) if task_id is not None else None,
            completed_work_sessions=int(data.get("completed_work_sessions") or 0),
        )
