# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any

from pomotrack.timer.timer_models import TimerState


class FakeClock:
    """Manually advanced epoch clock, usable as a now_fn."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass(slots=True)
class RecordedCall:
    session_type: Any
    duration_minutes: int
    task_id: int | None


class FakeRecorder:
    """
    Fake SessionRecorderPort used by timer tests.

    - Captures calls for assertions
    - Raises `fail_with` (once per queued exception) to simulate a failed commit
    """

    def __init__(self) -> None:
        self.calls: list[RecordedCall] = []
        self.fail_with: list[Exception] = []

    def record_session(self, *, session_type: Any, duration_minutes: int, task_id: int | None = None) -> Any:
        if self.fail_with:
            raise self.fail_with.pop(0)
        call = RecordedCall(session_type=session_type, duration_minutes=duration_minutes, task_id=task_id)
        self.calls.append(call)
        return SimpleNamespace(
            id=len(self.calls),
            session_type=session_type,
            duration_minutes=duration_minutes,
            task_id=task_id,
        )


@dataclass(slots=True)
class FakePrefs:
    """Fake UserSettingsPort with the default durations."""

    work_duration: int = 25
    short_break_duration: int = 5
    long_break_duration: int = 15
    sessions_until_long_break: int = 4

    def get_settings(self) -> FakePrefs:
        return self


@dataclass(slots=True)
class MemoryTimerStore:
    """In-memory TimerStatePort."""

    state: TimerState | None = None
    saves: list[TimerState] = field(default_factory=list)

    def load(self) -> TimerState | None:
        return self.state

    def save(self, state: TimerState) -> None:
        self.state = state
        self.saves.append(state)

    def clear(self) -> None:
        self.state = None
