# src/pomotrack/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..core.state import AppState
from ..errors import PomotrackError
from ..notes.note_models import NoteType
from ..prefs.prefs_store import SettingsPatch
from ..sessions.session_models import SessionType
from ..tasks.task_models import TaskPatch

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)

_SESSION_ALIASES = {
    "work": SessionType.WORK,
    "w": SessionType.WORK,
    "short": SessionType.SHORT_BREAK,
    "short_break": SessionType.SHORT_BREAK,
    "s": SessionType.SHORT_BREAK,
    "long": SessionType.LONG_BREAK,
    "long_break": SessionType.LONG_BREAK,
    "l": SessionType.LONG_BREAK,
}

_SETTINGS_ALIASES = {
    "work": "work_duration",
    "short": "short_break_duration",
    "long": "long_break_duration",
    "every": "sessions_until_long_break",
}


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /start, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(state, args)
        except PomotrackError as e:
            return f"Error: {e.message}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def fmt_mmss(seconds: float) -> str:
    total = max(0, int(round(seconds)))
    return f"{total // 60:02d}:{total % 60:02d}"


def _parse_id(raw: str) -> int | None:
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value > 0 else None


def _require_timer(state: AppState):
    if state.timer is None:
        raise RuntimeError("Timer is not attached to this state")
    return state.timer


# ---- timer ----

def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_timer(state: AppState, args: list[str]) -> str:
    timer = _require_timer(state)
    s = timer.state
    task = f" task #{s.task_id}" if s.task_id is not None and s.session_type is SessionType.WORK else ""
    return (
        f"{s.session_type.value}{task}: {s.status.value}, "
        f"{fmt_mmss(timer.remaining_seconds())} left "
        f"(work sessions this cycle: {s.completed_work_sessions})"
    )


def cmd_start(state: AppState, args: list[str]) -> str:
    """
    /start                  -> start (or resume) the current session
    /start work 3           -> work session on task #3
    /start short | long     -> a break
    """
    timer = _require_timer(state)
    session_type: SessionType | None = None
    task_id: int | None = None

    for arg in args:
        key = arg.lower()
        if key in _SESSION_ALIASES:
            session_type = _SESSION_ALIASES[key]
            continue
        task_id = _parse_id(arg)
        if task_id is None:
            return "Usage: /start [work|short|long] [task_id]"

    if task_id is not None and state.tasks.get_task(task_id) is None:
        return f"Task #{task_id} not found."

    s = timer.start(session_type=session_type, task_id=task_id)
    return f"Started {s.session_type.value} ({fmt_mmss(timer.remaining_seconds())})."


def cmd_pause(state: AppState, args: list[str]) -> str:
    timer = _require_timer(state)
    timer.pause()
    return f"Paused with {fmt_mmss(timer.remaining_seconds())} left."


def cmd_resume(state: AppState, args: list[str]) -> str:
    timer = _require_timer(state)
    timer.resume()
    return f"Resumed, {fmt_mmss(timer.remaining_seconds())} left."


def cmd_stop(state: AppState, args: list[str]) -> str:
    timer = _require_timer(state)
    s = timer.stop()
    return f"Stopped. Next: {s.session_type.value} ({fmt_mmss(timer.remaining_seconds())}). Nothing recorded."


def cmd_reset(state: AppState, args: list[str]) -> str:
    timer = _require_timer(state)
    timer.reset()
    return "Timer reset to a fresh work session."


# ---- tasks ----

def cmd_tasks(state: AppState, args: list[str]) -> str:
    tasks = state.tasks.list_tasks()
    if not tasks:
        return "No tasks yet. Add one with /addtask <pomodoros> <title>."
    lines = ["Tasks:"]
    for t in tasks:
        mark = "x" if t.is_completed else " "
        lines.append(f"  [{mark}] #{t.id} {t.title} ({t.completed_pomodoros}/{t.estimated_pomodoros})")
    return "\n".join(lines)


def cmd_addtask(state: AppState, args: list[str]) -> str:
    """/addtask 4 Write the report  (estimate is optional, default 1)"""
    if not args:
        return "Usage: /addtask [pomodoros] <title>"
    estimate = 1
    if args[0].isdigit():
        estimate = int(args[0])
        args = args[1:]
    task = state.tasks.create_task(title=" ".join(args), estimated_pomodoros=estimate)
    return f"Added task #{task.id}: {task.title} (estimate {task.estimated_pomodoros})."


def cmd_done(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args[0]) if args else None
    if task_id is None:
        return "Usage: /done <task_id>"
    task = state.tasks.update_task(task_id, TaskPatch(is_completed=True))
    return f"Task #{task.id} completed."


# ---- stats / settings ----

def cmd_stats(state: AppState, args: list[str]) -> str:
    st = state.stats.compute(datetime.now())
    return (
        "Statistics:\n"
        f"  Sessions: {st.total_sessions} (work {st.total_work_sessions}, breaks {st.total_break_sessions})\n"
        f"  Focus minutes: {st.total_minutes}\n"
        f"  Completed tasks: {st.completed_tasks}\n"
        f"  Avg sessions/day (30d): {st.average_sessions_per_day}\n"
        f"  Streak: {st.streak_days} day(s)"
    )


def cmd_settings(state: AppState, args: list[str]) -> str:
    """
    /settings              -> show durations
    /settings work 50      -> set a value (work | short | long | every)
    """
    if args:
        if len(args) != 2 or args[0].lower() not in _SETTINGS_ALIASES or not args[1].lstrip("-").isdigit():
            return "Usage: /settings [work|short|long|every <number>]"
        field = _SETTINGS_ALIASES[args[0].lower()]
        prefs = state.prefs.update_settings(SettingsPatch(**{field: int(args[1])}))
    else:
        prefs = state.prefs.get_settings()
    return (
        "Settings:\n"
        f"  work: {prefs.work_duration} min\n"
        f"  short: {prefs.short_break_duration} min\n"
        f"  long: {prefs.long_break_duration} min\n"
        f"  every: long break after {prefs.sessions_until_long_break} work sessions"
    )


# ---- notes ----

def cmd_notes(state: AppState, args: list[str]) -> str:
    notes = state.notes.list_notes()
    if not notes:
        return "No notes."
    lines = ["Notes:"]
    for n in notes:
        if n.type is NoteType.DRAWING:
            preview = f"<drawing, {len(n.content)} bytes>"
        else:
            preview = n.content if len(n.content) <= 60 else n.content[:57] + "..."
        lines.append(f"  #{n.id} {n.title}: {preview}")
    return "\n".join(lines)


def cmd_note(state: AppState, args: list[str]) -> str:
    """/note Title | text of the note"""
    raw = " ".join(args)
    title, sep, content = raw.partition("|")
    if not sep or not title.strip():
        return "Usage: /note <title> | <text>"
    note = state.notes.create_note(title=title, content=content.strip(), note_type=NoteType.TEXT)
    return f"Saved note #{note.id}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("timer", cmd_timer, help_text="Show the timer.", aliases=["t"])
registry.register("start", cmd_start, help_text="Start/resume: /start [work|short|long] [task_id].")
registry.register("pause", cmd_pause, help_text="Pause the running timer.")
registry.register("resume", cmd_resume, help_text="Resume a paused timer.")
registry.register("stop", cmd_stop, help_text="Abandon the current countdown (nothing is recorded).")
registry.register("reset", cmd_reset, help_text="Back to a fresh work session, cycle counter 0.")
registry.register("tasks", cmd_tasks, help_text="List tasks.")
registry.register("addtask", cmd_addtask, help_text="Add a task: /addtask [pomodoros] <title>.")
registry.register("done", cmd_done, help_text="Mark a task completed: /done <task_id>.")
registry.register("stats", cmd_stats, help_text="Show statistics.")
registry.register("settings", cmd_settings, help_text="Show/change durations: /settings work 50.")
registry.register("notes", cmd_notes, help_text="List notes.")
registry.register("note", cmd_note, help_text="Add a text note: /note <title> | <text>.")
