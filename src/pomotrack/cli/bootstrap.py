# src/pomotrack/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the SQLite-backed stores into AppState,
- builds the local timer for the console connector.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..notes.note_store import NoteStore
from ..prefs.prefs_store import UserSettingsStore
from ..sessions.recorder import SessionRecorder
from ..stats.statistics import StatisticsEngine
from ..storage.database import Database
from ..tasks.task_store import TaskStore
from ..timer.runner import PomodoroTimer
from ..timer.timer_store import TimerStateStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.timer_state_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    db = Database(settings.db_path)
    return AppState(
        settings=settings,
        db=db,
        tasks=TaskStore(db),
        sessions=SessionRecorder(db),
        stats=StatisticsEngine(db),
        prefs=UserSettingsStore(db),
        notes=NoteStore(db),
    )


def attach_timer(state: AppState) -> PomodoroTimer:
    """Build the local timer (rehydrating any persisted countdown) and put it on the state."""
    store = TimerStateStore(state.settings.timer_state_path)
    timer = PomodoroTimer(state.sessions, state.prefs, store)
    state.timer = timer
    logger.info(
        "Timer ready type=%s status=%s remaining=%.0fs",
        timer.state.session_type.value,
        timer.state.status.value,
        timer.remaining_seconds(),
    )
    return timer
