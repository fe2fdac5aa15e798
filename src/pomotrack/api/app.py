# src/pomotrack/api/app.py

"""
REST surface (FastAPI).

Handlers are plain `def` so FastAPI runs them in its threadpool: the stores
use blocking SQLite calls with one connection per call.
"""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from ..core.state import AppState
from ..errors import NotFoundError, PomotrackError, TransactionFailure, ValidationError
from ..notes.note_models import NotePatch
from ..prefs.prefs_store import SettingsPatch
from ..tasks.task_models import TaskPatch
from .schemas import (
    ErrorOut,
    HealthOut,
    NoteCreate,
    NoteList,
    NoteOut,
    NoteUpdate,
    SessionCreate,
    SessionOut,
    SettingsOut,
    SettingsUpdate,
    StatisticsOut,
    TaskCreate,
    TaskList,
    TaskOut,
    TaskUpdate,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[type[PomotrackError], int] = {
    ValidationError: 400,
    NotFoundError: 404,
    TransactionFailure: 500,
}


def _error_response(exc: PomotrackError) -> JSONResponse:
    status = next((code for cls, code in _STATUS_BY_ERROR.items() if isinstance(exc, cls)), 500)
    body = ErrorOut(code=exc.code, message=exc.message)
    return JSONResponse(status_code=status, content=body.model_dump(by_alias=True))


def create_app(state: AppState) -> FastAPI:
    app = FastAPI(title=str(getattr(state.settings, "app_name", "pomotrack")))
    app.state.pomo = state

    @app.exception_handler(PomotrackError)
    async def _domain_error(request: Request, exc: PomotrackError) -> JSONResponse:
        if isinstance(exc, TransactionFailure):
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
        return _error_response(exc)

    @app.get("/health", response_model=HealthOut)
    def health() -> HealthOut:
        return HealthOut()

    # ---- core ----

    @app.post("/sessions", response_model=SessionOut, response_model_exclude_none=True)
    def complete_session(body: SessionCreate) -> SessionOut:
        session = state.sessions.record_session(
            session_type=body.session_type,
            duration_minutes=body.duration_minutes,
            task_id=body.task_id,
        )
        return SessionOut.model_validate(session)

    @app.get("/statistics", response_model=StatisticsOut)
    def get_statistics() -> StatisticsOut:
        stats = state.stats.compute(datetime.now())
        return StatisticsOut.model_validate(stats)

    # ---- tasks ----

    @app.get("/tasks", response_model=TaskList, response_model_exclude_none=True)
    def list_tasks() -> TaskList:
        return TaskList(tasks=[TaskOut.model_validate(t) for t in state.tasks.list_tasks()])

    @app.post("/tasks", response_model=TaskOut, response_model_exclude_none=True)
    def create_task(body: TaskCreate) -> TaskOut:
        task = state.tasks.create_task(
            title=body.title,
            description=body.description,
            estimated_pomodoros=body.estimated_pomodoros,
        )
        return TaskOut.model_validate(task)

    @app.put("/tasks/{task_id}", response_model=TaskOut, response_model_exclude_none=True)
    def update_task(task_id: int, body: TaskUpdate) -> TaskOut:
        patch = TaskPatch(**body.model_dump(exclude_unset=True))
        return TaskOut.model_validate(state.tasks.update_task(task_id, patch))

    @app.delete("/tasks/{task_id}", status_code=204)
    def delete_task(task_id: int) -> Response:
        state.tasks.delete_task(task_id)
        return Response(status_code=204)

    # ---- settings ----

    @app.get("/settings", response_model=SettingsOut)
    def get_settings() -> SettingsOut:
        return SettingsOut.model_validate(state.prefs.get_settings())

    @app.put("/settings", response_model=SettingsOut)
    def update_settings(body: SettingsUpdate) -> SettingsOut:
        patch = SettingsPatch(**body.model_dump(exclude_unset=True))
        return SettingsOut.model_validate(state.prefs.update_settings(patch))

    # ---- notes ----

    @app.get("/notes", response_model=NoteList)
    def list_notes() -> NoteList:
        return NoteList(notes=[NoteOut.model_validate(n) for n in state.notes.list_notes()])

    @app.post("/notes", response_model=NoteOut)
    def create_note(body: NoteCreate) -> NoteOut:
        note = state.notes.create_note(title=body.title, content=body.content, note_type=body.type)
        return NoteOut.model_validate(note)

    @app.put("/notes/{note_id}", response_model=NoteOut)
    def update_note(note_id: int, body: NoteUpdate) -> NoteOut:
        patch = NotePatch(**body.model_dump(exclude_unset=True))
        return NoteOut.model_validate(state.notes.update_note(note_id, patch))

    @app.delete("/notes/{note_id}", status_code=204)
    def delete_note(note_id: int) -> Response:
        state.notes.delete_note(note_id)
        return Response(status_code=204)

    return app
