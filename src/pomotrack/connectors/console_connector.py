# src/pomotrack/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import fmt_mmss, registry as command_registry
from ..core.state import AppState
from ..sessions.session_models import PomodoroSession
from ..timer.timer_models import TimerState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def announce_completion(session: PomodoroSession, next_state: TimerState) -> None:
    """Called from the timer thread when a countdown finishes and is recorded."""
    task = f" (task #{session.task_id})" if session.task_id is not None else ""
    _print_ts(
        f"[TIMER] {session.session_type.value} finished{task}, {session.duration_minutes} min recorded. "
        f"Next: {next_state.session_type.value} "
        f"({fmt_mmss(next_state.duration_seconds)}), type /start when ready."
    )


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.\n")

    lock = getattr(state, "lock", None)

    while True:
        try:
            user_input = input(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            # Bare text is shorthand for a quick note.
            user_input = f"/note Quick note | {user_input}"

        try:
            if lock:
                with lock:
                    cmd_response = command_registry.handle(state, user_input)
            else:
                cmd_response = command_registry.handle(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            cmd_response = "Internal error while handling a command."

        if cmd_response is not None:
            _print_ts(cmd_response)

    logger.info("Console connector finished.")
