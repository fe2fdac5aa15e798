# src/pomotrack/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from ..notes.note_store import NoteStore
from ..prefs.prefs_store import UserSettingsStore
from ..sessions.recorder import SessionRecorder
from ..stats.statistics import StatisticsEngine
from ..storage.database import Database
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    db: Database
    tasks: TaskStore
    sessions: SessionRecorder
    stats: StatisticsEngine
    prefs: UserSettingsStore
    notes: NoteStore

    # Set by the console connector when it runs a local timer.
    timer: Any = None

    # Serializes console commands against the background timer loop.
    lock: threading.RLock = field(default_factory=threading.RLock)
