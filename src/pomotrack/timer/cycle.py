# src/pomotrack/timer/cycle.py

"""
Pure pomodoro cycle rules.

Every function takes a TimerState and returns a new one; nothing here touches
the clock, the database or the disk. `now` is always passed in.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from ..errors import ValidationError
from ..sessions.session_models import SessionType
from .timer_models import TimerState, TimerStatus


def duration_minutes_for(session_type: SessionType, prefs: Any) -> int:
    if session_type is SessionType.WORK:
        return int(prefs.work_duration)
    if session_type is SessionType.SHORT_BREAK:
        return int(prefs.short_break_duration)
    return int(prefs.long_break_duration)


def next_session_type(
    finished: SessionType, completed_work_sessions: int, sessions_until_long_break: int
) -> SessionType:
    """
    What follows a finished session.

    `completed_work_sessions` already includes the session that just finished.
    Every `sessions_until_long_break`-th work session earns a long break.
    """
    if finished is not SessionType.WORK:
        return SessionType.WORK
    if sessions_until_long_break > 0 and completed_work_sessions % sessions_until_long_break == 0:
        return SessionType.LONG_BREAK
    return SessionType.SHORT_BREAK


def initial_state(prefs: Any) -> TimerState:
    return TimerState(
        session_type=SessionType.WORK,
        status=TimerStatus.IDLE,
        duration_seconds=duration_minutes_for(SessionType.WORK, prefs) * 60,
    )


def elapsed_seconds(state: TimerState, now: float) -> float:
    if state.status is TimerStatus.RUNNING and state.started_at is not None:
        return state.elapsed_seconds + max(0.0, now - state.started_at)
    return state.elapsed_seconds


def remaining_seconds(state: TimerState, now: float) -> float:
    return max(0.0, state.duration_seconds - elapsed_seconds(state, now))


def is_finished(state: TimerState, now: float) -> bool:
    return state.status is TimerStatus.RUNNING and remaining_seconds(state, now) <= 0.0


def select(state: TimerState, session_type: SessionType, prefs: Any, *, task_id: int | None = None) -> TimerState:
    """Switch the idle timer to another session type (full duration)."""
    if state.status is not TimerStatus.IDLE:
        raise ValidationError("Stop the timer before switching session type")
    return replace(
        state,
        session_type=session_type,
        duration_seconds=duration_minutes_for(session_type, prefs) * 60,
        elapsed_seconds=0.0,
        started_at=None,
        task_id=task_id if session_type is SessionType.WORK else state.task_id,
    )


def start(state: TimerState, now: float) -> TimerState:
    if state.status is TimerStatus.RUNNING:
        raise ValidationError("Timer is already running")
    if state.status is TimerStatus.PAUSED:
        return resume(state, now)
    return replace(state, status=TimerStatus.RUNNING, started_at=now, elapsed_seconds=0.0)


def pause(state: TimerState, now: float) -> TimerState:
    if state.status is not TimerStatus.RUNNING:
        raise ValidationError("Timer is not running")
    return replace(
        state,
        status=TimerStatus.PAUSED,
        elapsed_seconds=elapsed_seconds(state, now),
        started_at=None,
    )


def resume(state: TimerState, now: float) -> TimerState:
    if state.status is not TimerStatus.PAUSED:
        raise ValidationError("Timer is not paused")
    return replace(state, status=TimerStatus.RUNNING, started_at=now)


def stop(state: TimerState, prefs: Any) -> TimerState:
    """Abandon the current countdown; the session type stays, nothing is recorded."""
    return replace(
        state,
        status=TimerStatus.IDLE,
        duration_seconds=duration_minutes_for(state.session_type, prefs) * 60,
        elapsed_seconds=0.0,
        started_at=None,
    )


def reset(prefs: Any) -> TimerState:
    return initial_state(prefs)


def advance(state: TimerState, prefs: Any) -> TimerState:
    """Idle state for the session that follows a completed one."""
    completed = state.completed_work_sessions
    if state.session_type is SessionType.WORK:
        completed += 1

    upcoming = next_session_type(state.session_type, completed, int(prefs.sessions_until_long_break))
    return TimerState(
        session_type=upcoming,
        status=TimerStatus.IDLE,
        duration_seconds=duration_minutes_for(upcoming, prefs) * 60,
        task_id=state.task_id,
        completed_work_sessions=completed,
    )


def completed_minutes(state: TimerState) -> int:
    """Minutes to record for a finished countdown (at least one)."""
    return max(1, round(state.duration_seconds / 60))
