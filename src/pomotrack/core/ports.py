# src/pomotrack/core/ports.py

"""
Ports (interfaces) used by the local timer.

The timer depends on these Protocols, not on the concrete SQLite stores; tests
pass in-memory fakes.
"""

from __future__ import annotations

from typing import Any, Protocol


class SessionRecorderPort(Protocol):
    def record_session(
            self,
            *,
            session_type: Any,
            duration_minutes: int,
            task_id: int | None = None,
    ) -> Any: ...


class UserSettingsPort(Protocol):
    """Anything that can hand out the current timer durations."""

    def get_settings(self) -> Any: ...


class TimerStatePort(Protocol):
    def load(self) -> Any | None: ...
    def save(self, state: Any) -> None: ...
