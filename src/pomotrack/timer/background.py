# src/pomotrack/timer/background.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from dataclasses import dataclass

from .runner import CompletionCallback, PomodoroTimer, run_timer_loop

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TimerBackgroundRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except RuntimeError:
            logger.debug("Timer loop already closed.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


async def _run_until_stopped(
        timer: PomodoroTimer,
        stop_event: asyncio.Event,
        interval_seconds: float,
        on_complete: CompletionCallback | None,
) -> None:
    task = asyncio.create_task(
        run_timer_loop(timer, interval_seconds=interval_seconds, on_complete=on_complete)
    )
    try:
        await stop_event.wait()
    finally:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task


def start_timer_in_background(
        timer: PomodoroTimer,
        *,
        interval_seconds: float = 1.0,
        on_complete: CompletionCallback | None = None,
) -> TimerBackgroundRunner | None:
    """
    Run the timer loop on its own event loop in a daemon thread,
    so the blocking console REPL can keep reading input.
    """
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(_run_until_stopped(timer, stop_event, interval_seconds, on_complete))
        finally:
            loop.close()

    t = threading.Thread(target=runner, name="pomotrack-timer", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Timer thread did not initialize properly.")
        return None

    logger.info("Timer background thread started (interval=%.2fs).", interval_seconds)
    return TimerBackgroundRunner(thread=t, loop=loop, stop_event=stop_event)
