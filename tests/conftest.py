# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from pomotrack.core.state import AppState
from pomotrack.notes.note_store import NoteStore
from pomotrack.prefs.prefs_store import UserSettingsStore
from pomotrack.sessions.recorder import SessionRecorder
from pomotrack.stats.statistics import StatisticsEngine
from pomotrack.storage.database import Database
from pomotrack.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the connectors.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's .env.
    """
    return SimpleNamespace(
        app_name="pomotrack-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        db_path=tmp_path / "pomodoro.sqlite3",
        timer_state_path=tmp_path / "timer_state.json",
        api_enabled=False,
        api_host="127.0.0.1",
        api_port=0,
        console_enabled=False,
        timer_poll_seconds=0.01,
    )


@pytest.fixture()
def db(settings: SimpleNamespace) -> Database:
    return Database(settings.db_path)


@pytest.fixture()
def state(settings: SimpleNamespace, db: Database) -> AppState:
    """
    AppState wired with the real SQLite stores.

    Their transactional behaviour is what most tests are about, so nothing
    here is faked.
    """
    return AppState(
        settings=settings,
        db=db,
        tasks=TaskStore(db),
        sessions=SessionRecorder(db),
        stats=StatisticsEngine(db),
        prefs=UserSettingsStore(db),
        notes=NoteStore(db),
    )
