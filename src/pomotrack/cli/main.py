# src/pomotrack/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then starts connectors:
- REST API (uvicorn) in a background thread (optional),
- local timer loop in a background thread (with the console),
- console REPL in the main thread (optional).
"""

from __future__ import annotations

import logging
import signal
import threading

from ..api.server import ApiBackgroundRunner, start_api_in_background
from ..cli.bootstrap import attach_timer, create_initial_state
from ..config import get_settings
from ..connectors.console_connector import announce_completion, run_console_loop
from ..logging_setup import setup_logging
from ..timer.background import TimerBackgroundRunner, start_timer_in_background

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    # Stores use short-lived sqlite connections per call; close() only drops the handle.
    try:
        state.db.close()
    except Exception:
        logger.debug("Database close failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/pomotrack")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "pomotrack"))

    state = create_initial_state(settings=settings)

    api_runner: ApiBackgroundRunner | None = None
    if settings.api_enabled:
        api_runner = start_api_in_background(state)

    timer_runner: TimerBackgroundRunner | None = None
    if settings.console_enabled:
        timer = attach_timer(state)
        timer_runner = start_timer_in_background(
            timer,
            interval_seconds=settings.timer_poll_seconds,
            on_complete=announce_completion,
        )

    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    try:
        signal.signal(signal.SIGINT, _handle_signal)
        signal.signal(signal.SIGTERM, _handle_signal)
    except (ValueError, OSError, AttributeError):
        # Some platforms may not support SIGTERM, etc.
        pass

    try:
        if settings.console_enabled:
            run_console_loop(state)
            stop_main.set()
        elif api_runner is not None:
            logger.info("Console disabled. Serving the REST API only. Press Ctrl+C to stop.")
            stop_main.wait()
        else:
            logger.warning("Both the console and the REST API are disabled; nothing to run.")

    finally:
        if timer_runner is not None:
            timer_runner.stop()
            timer_runner.join(timeout=5.0)

        if api_runner is not None:
            api_runner.stop()
            api_runner.join(timeout=10.0)

        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
