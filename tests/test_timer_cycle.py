# tests/test_timer_cycle.py

from __future__ import annotations

from pathlib import Path

import pytest

from pomotrack.errors import ValidationError
from pomotrack.sessions.session_models import SessionType
from pomotrack.timer import cycle
from pomotrack.timer.timer_models import TimerState, TimerStatus
from pomotrack.timer.timer_store import TimerStateStore

from .fakes import FakePrefs


def test_long_break_every_nth_work_session() -> None:
    got = [cycle.next_session_type(SessionType.WORK, n, 4) for n in range(1, 9)]
    assert got == [SessionType.SHORT_BREAK] * 3 + [SessionType.LONG_BREAK] + [SessionType.SHORT_BREAK] * 3 + [
        SessionType.LONG_BREAK
    ]
    assert cycle.next_session_type(SessionType.SHORT_BREAK, 1, 4) is SessionType.WORK
    assert cycle.next_session_type(SessionType.LONG_BREAK, 4, 4) is SessionType.WORK


def test_advance_walks_a_full_cycle() -> None:
    prefs = FakePrefs(sessions_until_long_break=2)
    state = cycle.initial_state(prefs)
    seen = []
    for _ in range(6):
        seen.append(state.session_type)
        state = cycle.advance(state, prefs)
        assert state.status is TimerStatus.IDLE
        assert state.duration_seconds == cycle.duration_minutes_for(state.session_type, prefs) * 60

    assert seen == [
        SessionType.WORK,
        SessionType.SHORT_BREAK,
        SessionType.WORK,
        SessionType.LONG_BREAK,
        SessionType.WORK,
        SessionType.SHORT_BREAK,
    ]
    assert state.completed_work_sessions == 3


def test_remaining_time_survives_pause_and_resume() -> None:
    prefs = FakePrefs()
    state = cycle.start(cycle.initial_state(prefs), now=0.0)
    assert cycle.remaining_seconds(state, 60.0) == 25 * 60 - 60

    state = cycle.pause(state, 60.0)
    # Time spent paused does not count.
    assert cycle.remaining_seconds(state, 5000.0) == 25 * 60 - 60

    state = cycle.resume(state, 1000.0)
    assert cycle.remaining_seconds(state, 1060.0) == 25 * 60 - 120
    assert not cycle.is_finished(state, 1060.0)
    assert cycle.is_finished(state, 1000.0 + 25 * 60)


def test_start_on_paused_timer_resumes() -> None:
    state = cycle.pause(cycle.start(cycle.initial_state(FakePrefs()), 0.0), 30.0)
    resumed = cycle.start(state, 100.0)
    assert resumed.status is TimerStatus.RUNNING
    assert cycle.elapsed_seconds(resumed, 110.0) == 40.0


def test_invalid_transitions_raise() -> None:
    prefs = FakePrefs()
    idle = cycle.initial_state(prefs)
    running = cycle.start(idle, 0.0)

    with pytest.raises(ValidationError):
        cycle.pause(idle, 1.0)
    with pytest.raises(ValidationError):
        cycle.resume(running, 1.0)
    with pytest.raises(ValidationError):
        cycle.start(running, 1.0)
    with pytest.raises(ValidationError):
        cycle.select(running, SessionType.SHORT_BREAK, prefs)


def test_stop_and_reset() -> None:
    prefs = FakePrefs()
    state = cycle.select(cycle.initial_state(prefs), SessionType.LONG_BREAK, prefs)
    state = cycle.start(state, 0.0)

    stopped = cycle.stop(state, prefs)
    assert stopped.status is TimerStatus.IDLE
    assert stopped.session_type is SessionType.LONG_BREAK
    assert cycle.remaining_seconds(stopped, 999.0) == 15 * 60

    reset = cycle.reset(prefs)
    assert reset.session_type is SessionType.WORK
    assert reset.completed_work_sessions == 0


def test_select_ties_task_to_work_only() -> None:
    prefs = FakePrefs()
    work = cycle.select(cycle.initial_state(prefs), SessionType.WORK, prefs, task_id=3)
    assert work.task_id == 3

    brk = cycle.select(work, SessionType.SHORT_BREAK, prefs, task_id=9)
    assert brk.task_id == 3


def test_completed_minutes() -> None:
    state = TimerState(session_type=SessionType.WORK, status=TimerStatus.RUNNING, duration_seconds=25 * 60)
    assert cycle.completed_minutes(state) == 25
    tiny = TimerState(session_type=SessionType.WORK, status=TimerStatus.RUNNING, duration_seconds=10)
    assert cycle.completed_minutes(tiny) == 1


def test_timer_state_store_round_trip(tmp_path: Path) -> None:
    store = TimerStateStore(tmp_path / "timer" / "state.json")
    assert store.load() is None

    state = TimerState(
        session_type=SessionType.WORK,
        status=TimerStatus.RUNNING,
        duration_seconds=1500,
        elapsed_seconds=12.5,
        started_at=1000.0,
        task_id=4,
        completed_work_sessions=2,
    )
    store.save(state)
    assert store.load() == state
    assert not store.path.with_suffix(".tmp").exists()

    store.clear()
    assert store.load() is None
    store.clear()


def test_corrupt_timer_state_loads_as_none(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_text("{not json", "utf-8")
    assert TimerStateStore(path).load() is None

    path.write_text('{"session_type": "nap", "status": "idle", "duration_seconds": 1}', "utf-8")
    assert TimerStateStore(path).load() is None


def test_stop_rereads_duration_for_the_same_session_type() -> None:
    running = cycle.start(cycle.initial_state(FakePrefs()), 0.0)

    stopped = cycle.stop(running, FakePrefs(work_duration=45))
    assert stopped.session_type is SessionType.WORK
    assert stopped.duration_seconds == 45 * 60
