# src/pomotrack/core/patch.py

"""
Partial-update support shared by the task, note and settings stores.

A patch is a frozen dataclass whose fields default to UNSET. Only the fields a
caller actually set show up in changes(), and the stores bind those values into
one static, parameterized UPDATE written as

    col = CASE WHEN :set_col THEN :col ELSE col END

so None stays a real value (e.g. clearing a description) and no SQL text is
ever assembled from the request.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any


class _Unset:
    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True, slots=True)
class Patch:
    def changes(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not UNSET}

    def bind(self, columns: tuple[str, ...]) -> dict[str, Any]:
        """
        Named parameters for a CASE-based UPDATE over `columns`.

        Every column gets a `set_<col>` flag and a value, so the statement text
        is identical for every patch.
        """
        changes = self.changes()
        params: dict[str, Any] = {}
        for col in columns:
            params[f"set_{col}"] = 1 if col in changes else 0
            params[col] = changes.get(col)
        return params

