# tests/test_task_store.py

from __future__ import annotations

from pathlib import Path

import pytest

from pomotrack.errors import NotFoundError, ValidationError
from pomotrack.sessions.session_models import SessionType
from pomotrack.storage.database import Database
from pomotrack.tasks.task_models import TaskPatch
from pomotrack.tasks.task_store import TaskStore


def test_task_create_get_update_delete(tmp_path: Path) -> None:
    db = Database(tmp_path / "pomodoro.sqlite3")
    clock = iter([10.0, 20.0])
    store = TaskStore(db, now_fn=lambda: next(clock))

    task = store.create_task(title="  Write report  ", description="Q3", estimated_pomodoros=4)
    assert task.id > 0
    assert task.title == "Write report"
    assert task.completed_pomodoros == 0
    assert task.is_completed is False
    assert task.created_at == task.updated_at == 10.0

    got = store.get_task(task.id)
    assert got == task

    updated = store.update_task(task.id, TaskPatch(estimated_pomodoros=6, is_completed=True))
    assert updated.estimated_pomodoros == 6
    assert updated.is_completed is True
    assert updated.title == "Write report"
    assert updated.description == "Q3"
    assert updated.updated_at == 20.0
    assert updated.created_at == 10.0

    assert store.delete_task(task.id) is True
    assert store.get_task(task.id) is None
    assert store.delete_task(task.id) is False


def test_patch_can_clear_description(state) -> None:
    task = state.tasks.create_task(title="T", description="to be removed")
    updated = state.tasks.update_task(task.id, TaskPatch(description=None))
    assert updated.description is None
    assert updated.title == "T"


def test_update_rejects_empty_patch_and_bad_values(state) -> None:
    task = state.tasks.create_task(title="T")

    with pytest.raises(ValidationError):
        state.tasks.update_task(task.id, TaskPatch())
    with pytest.raises(ValidationError):
        state.tasks.update_task(task.id, TaskPatch(title="   "))
    with pytest.raises(ValidationError):
        state.tasks.update_task(task.id, TaskPatch(estimated_pomodoros=0))
    with pytest.raises(ValidationError):
        state.tasks.update_task(task.id, TaskPatch(is_completed="yes"))

    assert state.tasks.get_task(task.id) == task


def test_update_missing_task_is_not_found(state) -> None:
    with pytest.raises(NotFoundError):
        state.tasks.update_task(404, TaskPatch(title="ghost"))


@pytest.mark.parametrize(
    "kwargs",
    [
        {"title": ""},
        {"title": "ok", "estimated_pomodoros": 0},
        {"title": "ok", "description": 5},
    ],
)
def test_create_validates_input(state, kwargs) -> None:
    with pytest.raises(ValidationError):
        state.tasks.create_task(**kwargs)
    assert state.tasks.count_tasks() == 0


def test_list_orders_open_tasks_first(state) -> None:
    clock = iter([1.0, 2.0, 3.0, 4.0])
    store = TaskStore(state.db, now_fn=lambda: next(clock))
    a = store.create_task(title="a")
    b = store.create_task(title="b")
    c = store.create_task(title="c")
    store.update_task(c.id, TaskPatch(is_completed=True))

    assert [t.title for t in store.list_tasks()] == ["b", "a", "c"]
    assert {a.id, b.id, c.id} == {t.id for t in store.list_tasks()}


def test_delete_cascades_to_sessions(state) -> None:
    task = state.tasks.create_task(title="T")
    state.sessions.record_session(session_type=SessionType.WORK, duration_minutes=25, task_id=task.id)
    state.sessions.record_session(session_type=SessionType.WORK, duration_minutes=25)

    state.tasks.delete_task(task.id)

    remaining = state.sessions.list_sessions()
    assert len(remaining) == 1
    assert remaining[0].task_id is None


def test_schema_survives_reopen(tmp_path: Path) -> None:
    path = tmp_path / "pomodoro.sqlite3"
    TaskStore(Database(path)).create_task(title="persisted")

    reopened = TaskStore(Database(path))
    assert [t.title for t in reopened.list_tasks()] == ["persisted"]
