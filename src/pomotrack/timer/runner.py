# src/pomotrack/timer/runner.py

"""
Local pomodoro timer.

PomodoroTimer owns one TimerState, persists it after every transition and, when
a countdown runs out, hands the finished session to the session recorder.

run_timer_loop() is a small polling loop (cancel the coroutine to stop it) that
calls tick() every interval_seconds.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from ..core.ports import SessionRecorderPort, TimerStatePort, UserSettingsPort
from ..errors import NotFoundError, PomotrackError
from ..sessions.session_models import SessionType
from . import cycle
from .timer_models import TimerState, TimerStatus

logger = logging.getLogger(__name__)

CompletionCallback = Callable[[Any, TimerState], None]


class PomodoroTimer:
    def __init__(
        self,
        recorder: SessionRecorderPort,
        prefs: UserSettingsPort,
        store: TimerStatePort,
        *,
        now_fn: Callable[[], float] = time.time,
    ) -> None:
        self._recorder = recorder
        self._prefs = prefs
        self._store = store
        self._now = now_fn
        self._lock = threading.Lock()

        restored = store.load()
        self._state: TimerState = restored or cycle.initial_state(prefs.get_settings())

    @property
    def state(self) -> TimerState:
        return self._state

    def _set(self, state: TimerState) -> TimerState:
        self._state = state
        self._store.save(state)
        return state

    # ---- user actions ----

    def start(self, session_type: SessionType | None = None, task_id: int | None = None) -> TimerState:
        with self._lock:
            state = self._state
            explicit = session_type is not None or task_id is not None
            if explicit or state.status is TimerStatus.IDLE:
                # An idle timer picks up the current durations before it starts.
                state = cycle.select(
                    state,
                    session_type or state.session_type,
                    self._prefs.get_settings(),
                    task_id=task_id if explicit else state.task_id,
                )
            state = cycle.start(state, self._now())
            logger.info("Timer started type=%s task_id=%s", state.session_type.value, state.task_id)
            return self._set(state)

    def pause(self) -> TimerState:
        with self._lock:
            return self._set(cycle.pause(self._state, self._now()))

    def resume(self) -> TimerState:
        with self._lock:
            return self._set(cycle.resume(self._state, self._now()))

    def stop(self) -> TimerState:
        with self._lock:
            logger.info("Timer stopped type=%s", self._state.session_type.value)
            return self._set(cycle.stop(self._state, self._prefs.get_settings()))

    def reset(self) -> TimerState:
        with self._lock:
            return self._set(cycle.reset(self._prefs.get_settings()))

    def remaining_seconds(self) -> float:
        return cycle.remaining_seconds(self._state, self._now())

    # ---- completion ----

    def tick(self) -> Any | None:
        """
        Record the session if the countdown ran out.

        Returns the recorded session, or None if nothing finished. If recording
        fails the state is left as is, so the next tick tries again; the
        recorder is all-or-nothing, so a retry cannot double-count.
        """
        with self._lock:
            state = self._state
            if not cycle.is_finished(state, self._now()):
                return None

            task_id = None if state.session_type.is_break else state.task_id
            try:
                session = self._recorder.record_session(
                    session_type=state.session_type,
                    duration_minutes=cycle.completed_minutes(state),
                    task_id=task_id,
                )
            except NotFoundError:
                # The task was deleted mid-countdown; the next tick records the session untied.
                self._set(replace(state, task_id=None))
                raise
            self._set(cycle.advance(state, self._prefs.get_settings()))
            return session


async def run_timer_loop(
        timer: PomodoroTimer,
        *,
        interval_seconds: float = 1.0,
        on_complete: CompletionCallback | None = None,
) -> None:
    """
    Every interval_seconds:
    - tick the timer
    - on a completed session, call on_complete(session, next_state)
    - on failure, log and keep going (the next tick retries)

    To stop the loop, cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))

    while True:
        try:
            session = timer.tick()
        except PomotrackError as e:
            logger.warning("Timer could not record session: %s", e.message)
            session = None
        except Exception:
            logger.exception("Timer tick failed")
            session = None

        if session is not None and on_complete is not None:
            try:
                on_complete(session, timer.state)
            except Exception:
                logger.exception("on_complete callback failed")

        await asyncio.sleep(sleep_s)
