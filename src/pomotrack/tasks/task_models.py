# src/pomotrack/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..core.patch import UNSET, Patch


@dataclass(slots=True)
class Task:
    id: int
    title: str
    description: str | None
    estimated_pomodoros: int
    completed_pomodoros: int
    is_completed: bool
    created_at: float
    updated_at: float

    @property
    def remaining_pomodoros(self) -> int:
        return max(0, self.estimated_pomodoros - self.completed_pomodoros)


@dataclass(frozen=True, slots=True)
class TaskPatch(Patch):
    """
    Fields a caller wants to change on a task.

    completed_pomodoros is not patchable; only the session recorder moves it.
    """

    title: Any = UNSET
    description: Any = UNSET
    estimated_pomodoros: Any = UNSET
    is_completed: Any = UNSET
