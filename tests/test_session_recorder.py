# tests/test_session_recorder.py

from __future__ import annotations

import sqlite3
import threading

import pytest

from pomotrack.errors import NotFoundError, TransactionFailure, ValidationError
from pomotrack.sessions.recorder import SessionRecorder
from pomotrack.sessions.session_models import SessionType


def _count_sessions(db) -> int:
    conn = db.connect()
    try:
        (n,) = conn.execute("SELECT COUNT(*) FROM pomodoro_sessions").fetchone()
        return int(n)
    finally:
        conn.close()


def test_work_sessions_increment_task_progress(state) -> None:
    task = state.tasks.create_task(title="Write report", estimated_pomodoros=4)

    for _ in range(3):
        session = state.sessions.record_session(
            session_type=SessionType.WORK, duration_minutes=25, task_id=task.id
        )
        assert session.task_id == task.id
        assert session.session_type is SessionType.WORK

    updated = state.tasks.get_task(task.id)
    assert updated is not None
    assert updated.completed_pomodoros == 3
    assert updated.remaining_pomodoros == 1
    assert _count_sessions(state.db) == 3


def test_session_type_accepts_wire_strings(state) -> None:
    session = state.sessions.record_session(session_type="short_break", duration_minutes=5)
    assert session.session_type is SessionType.SHORT_BREAK
    assert session.task_id is None
    assert session.completed_at > 0


def test_break_sessions_keep_task_but_never_increment(state) -> None:
    task = state.tasks.create_task(title="Read", estimated_pomodoros=2)

    short = state.sessions.record_session(
        session_type=SessionType.SHORT_BREAK, duration_minutes=5, task_id=task.id
    )
    long = state.sessions.record_session(
        session_type=SessionType.LONG_BREAK, duration_minutes=15, task_id=task.id
    )

    assert short.task_id == task.id
    assert long.task_id == task.id
    assert state.tasks.get_task(task.id).completed_pomodoros == 0
    assert _count_sessions(state.db) == 2


def test_work_session_without_task_touches_no_task(state) -> None:
    task = state.tasks.create_task(title="Idle")
    state.sessions.record_session(session_type=SessionType.WORK, duration_minutes=25)
    assert state.tasks.get_task(task.id).completed_pomodoros == 0
    assert _count_sessions(state.db) == 1


def test_concurrent_work_sessions_are_all_counted(state) -> None:
    task = state.tasks.create_task(title="Shared", estimated_pomodoros=50)
    threads_n = 8
    per_thread = 5
    errors: list[BaseException] = []
    barrier = threading.Barrier(threads_n)

    def worker() -> None:
        # Separate recorder per thread, same database file.
        recorder = SessionRecorder(state.db)
        barrier.wait()
        try:
            for _ in range(per_thread):
                recorder.record_session(
                    session_type=SessionType.WORK, duration_minutes=1, task_id=task.id
                )
        except BaseException as e:  # pragma: no cover - reported below
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(threads_n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)

    assert errors == []
    assert state.tasks.get_task(task.id).completed_pomodoros == threads_n * per_thread
    assert _count_sessions(state.db) == threads_n * per_thread


@pytest.mark.parametrize(
    "kwargs",
    [
        {"session_type": "nap", "duration_minutes": 25},
        {"session_type": SessionType.WORK, "duration_minutes": 0},
        {"session_type": SessionType.WORK, "duration_minutes": -5},
        {"session_type": SessionType.WORK, "duration_minutes": True},
        {"session_type": SessionType.WORK, "duration_minutes": "25"},
        {"session_type": SessionType.WORK, "duration_minutes": 25, "task_id": 0},
    ],
)
def test_invalid_input_is_rejected_before_writing(state, kwargs) -> None:
    with pytest.raises(ValidationError):
        state.sessions.record_session(**kwargs)
    assert _count_sessions(state.db) == 0


def test_missing_task_is_not_found_and_nothing_is_written(state) -> None:
    with pytest.raises(NotFoundError):
        state.sessions.record_session(
            session_type=SessionType.WORK, duration_minutes=25, task_id=999
        )
    assert _count_sessions(state.db) == 0


def test_failed_increment_rolls_back_the_session(state, monkeypatch) -> None:
    task = state.tasks.create_task(title="Fragile", estimated_pomodoros=3)
    state.sessions.record_session(session_type=SessionType.WORK, duration_minutes=25, task_id=task.id)

    def boom(conn, task_id, *, now):
        raise sqlite3.OperationalError("disk I/O error")

    monkeypatch.setattr(state.sessions, "_increment_task_progress", boom)

    with pytest.raises(TransactionFailure):
        state.sessions.record_session(
            session_type=SessionType.WORK, duration_minutes=25, task_id=task.id
        )

    assert _count_sessions(state.db) == 1
    assert state.tasks.get_task(task.id).completed_pomodoros == 1


def test_failed_session_does_not_show_up_in_statistics(state, monkeypatch) -> None:
    task = state.tasks.create_task(title="Fragile")

    def boom(conn, task_id, *, now):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(state.sessions, "_increment_task_progress", boom)
    with pytest.raises(TransactionFailure):
        state.sessions.record_session(
            session_type=SessionType.WORK, duration_minutes=25, task_id=task.id
        )

    stats = state.stats.compute()
    assert stats.total_sessions == 0
    assert stats.total_minutes == 0


def test_list_sessions_newest_first(state) -> None:
    clock = iter([100.0, 200.0, 300.0])
    recorder = SessionRecorder(state.db, now_fn=lambda: next(clock))
    for minutes in (25, 5, 25):
        recorder.record_session(
            session_type=SessionType.WORK if minutes == 25 else SessionType.SHORT_BREAK,
            duration_minutes=minutes,
        )

    sessions = recorder.list_sessions(limit=2)
    assert [s.completed_at for s in sessions] == [300.0, 200.0]
