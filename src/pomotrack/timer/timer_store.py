# src/pomotrack/timer/timer_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path

from .timer_models import TimerState

logger = logging.getLogger(__name__)


class TimerStateStore:
    """
    Durable client-side key-value store for the running timer (one JSON file).

    Writes are atomic (temp file + os.replace); a missing or unreadable file
    loads as None so the timer simply starts fresh.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> TimerState | None:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text("utf-8"))
            if not isinstance(data, dict):
                return None
            state = TimerState.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError):
            logger.exception("Failed to load timer state from %s; starting fresh", self._path)
            return None
        logger.info("Loaded timer state: %s %s", state.session_type.value, state.status.value)
        return state

    def save(self, state: TimerState) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(state.to_dict(), ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, self._path)
        logger.debug("Saved timer state to %s", self._path)

    def clear(self) -> None:
        with contextlib.suppress(FileNotFoundError):
            self._path.unlink()
