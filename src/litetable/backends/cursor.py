# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Cursor backend over a prepare/bind/step engine handle.

This is the calling convention of WASM-compiled SQLite builds: statements are
prepared, parameters bound as one array, and rows pulled one at a time:

    stmt = handle.prepare("SELECT * FROM users WHERE id = ?")
    stmt.bind([1])
    while stmt.step():
        row = stmt.get_as_object()
    stmt.free()

Handles written against the camelCase JS naming (``getAsObject``) are
accepted too.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from ..logger import get_logger
from .base import Backend

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger("CursorBackend")


@runtime_checkable
class StatementHandle(Protocol):
    """Prepared statement exposed by a cursor engine."""

    def bind(self, params: Sequence[Any]) -> Any: ...

    def step(self) -> bool: ...


@runtime_checkable
class CursorEngine(Protocol):
    """Engine handle that only offers prepared-statement cursors."""

    def prepare(self, sql: str) -> StatementHandle: ...


class CursorBackend(Backend):
    """Cursor-style execution on a prepare/bind/step engine handle.

    The engine supports ``RETURNING``, so inserts hand back the new row in
    the same statement.
    """

    name = "cursor"
    supports_returning = True

    def __init__(self, handle: CursorEngine):
        self.handle = handle

    def _run(self, sql: str, params: Sequence[Any]) -> list[dict[str, Any]]:
        stmt = self.handle.prepare(sql)
        try:
            if params:
                stmt.bind(list(params))
            rows = []
            while stmt.step():
                rows.append(dict(self._row_object(stmt)))
            return rows
        finally:
            free = getattr(stmt, "free", None)
            if callable(free):
                free()

    @staticmethod
    def _row_object(stmt: Any) -> Any:
        getter = getattr(stmt, "get_as_object", None) or getattr(stmt, "getAsObject")
        return getter()

    def _changes(self) -> int:
        changes = getattr(self.handle, "get_rows_modified", None) or getattr(
            self.handle, "getRowsModified", None
        )
        return int(changes()) if callable(changes) else -1

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        logger.debug(f"execute: {sql} [{len(params)} params]")
        self._run(sql, params)
        return self._changes()

    def query(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        logger.debug(f"query: {sql} [{len(params)} params]")
        return self._run(sql, params)

    def insert_returning_key(self, sql: str, params: Sequence[Any] = ()) -> int | None:
        logger.debug(f"insert: {sql} [{len(params)} params]")
        self._run(sql, params)
        rows = self._run("SELECT last_insert_rowid() AS id", ())
        return rows[0]["id"] if rows else None

    def insert_returning_row(
        self, sql: str, params: Sequence[Any] = ()
    ) -> dict[str, Any] | None:
        sql = f"{sql} RETURNING *"
        logger.debug(f"insert: {sql} [{len(params)} params]")
        rows = self._run(sql, params)
        return rows[0] if rows else None

    def close(self) -> None:
        close = getattr(self.handle, "close", None)
        if callable(close):
            close()
