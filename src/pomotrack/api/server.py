# src/pomotrack/api/server.py

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

import uvicorn

from ..core.state import AppState
from .app import create_app

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ApiBackgroundRunner:
    thread: threading.Thread
    server: uvicorn.Server

    def stop(self) -> None:
        self.server.should_exit = True

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_api_in_background(state: AppState) -> ApiBackgroundRunner | None:
    """
    Serve the REST API from a background thread (the console REPL owns the main thread).

    uvicorn's own logging config is disabled so its records go through our handlers.
    """
    settings = state.settings
    if not getattr(settings, "api_enabled", True):
        logger.info("REST API disabled, not starting.")
        return None

    config = uvicorn.Config(
        create_app(state),
        host=settings.api_host,
        port=int(settings.api_port),
        log_config=None,
    )
    server = uvicorn.Server(config)

    t = threading.Thread(target=server.run, name="pomotrack-api", daemon=True)
    t.start()

    logger.info("REST API listening on http://%s:%s", settings.api_host, settings.api_port)
    return ApiBackgroundRunner(thread=t, server=server)
