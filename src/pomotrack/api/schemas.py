# src/pomotrack/api/schemas.py

"""Wire shapes of the REST API (camelCase on the wire, snake_case in Python)."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..notes.note_models import NoteType
from ..sessions.session_models import SessionType


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---- sessions ----

class SessionCreate(CamelModel):
    task_id: int | None = None
    session_type: SessionType
    # Range checks happen in SessionRecorder so they answer 400 like other domain errors.
    duration_minutes: int


class SessionOut(CamelModel):
    id: int
    task_id: int | None = None
    session_type: SessionType
    duration_minutes: int
    completed_at: datetime


# ---- statistics ----

class StatisticsOut(CamelModel):
    total_sessions: int
    total_work_sessions: int
    total_break_sessions: int
    total_minutes: int
    completed_tasks: int
    average_sessions_per_day: float
    streak_days: int


# ---- tasks ----

class TaskCreate(CamelModel):
    title: str
    description: str | None = None
    estimated_pomodoros: int = 1


class TaskUpdate(CamelModel):
    title: str | None = None
    description: str | None = None
    estimated_pomodoros: int | None = None
    is_completed: bool | None = None


class TaskOut(CamelModel):
    id: int
    title: str
    description: str | None = None
    estimated_pomodoros: int
    completed_pomodoros: int
    is_completed: bool
    created_at: datetime
    updated_at: datetime


class TaskList(CamelModel):
    tasks: list[TaskOut]


# ---- settings ----

class SettingsUpdate(CamelModel):
    work_duration: int | None = None
    short_break_duration: int | None = None
    long_break_duration: int | None = None
    sessions_until_long_break: int | None = None


class SettingsOut(CamelModel):
    id: int
    work_duration: int
    short_break_duration: int
    long_break_duration: int
    sessions_until_long_break: int
    created_at: datetime
    updated_at: datetime


# ---- notes ----

class NoteCreate(CamelModel):
    title: str
    content: str
    type: NoteType = NoteType.TEXT


class NoteUpdate(CamelModel):
    title: str | None = None
    content: str | None = None


class NoteOut(CamelModel):
    id: int
    title: str
    content: str
    type: NoteType
    created_at: datetime
    updated_at: datetime


class NoteList(CamelModel):
    notes: list[NoteOut]


# ---- misc ----

class HealthOut(CamelModel):
    status: str = Field(default="ok")


class ErrorOut(CamelModel):
    code: str
    message: str
