# src/pomotrack/notes/note_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from ..core.patch import UNSET, Patch


class NoteType(StrEnum):
    TEXT = "text"
    # content holds an encoded image (e.g. a PNG data URL); stored opaquely.
    DRAWING = "drawing"


@dataclass(slots=True)
class Note:
    id: int
    title: str
    content: str
    type: NoteType
    created_at: float
    updated_at: float


@dataclass(frozen=True, slots=True)
class NotePatch(Patch):
    title: Any = UNSET
    content: Any = UNSET
