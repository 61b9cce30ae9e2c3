# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Native backend over an in-process ``sqlite3`` connection."""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING, Any

from ..logger import get_logger
from .base import Backend

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger("NativeBackend")


class NativeBackend(Backend):
    """Direct statement execution on a ``sqlite3.Connection``.

    Each write is committed right away, or rolled back when the engine
    raises: one call is one statement is one transaction. The INSERT path
    cannot return the new row, so tables re-fetch it by the last inserted
    row id.
    """

    name = "native"
    supports_returning = False

    def __init__(self, connection: sqlite3.Connection, owns_connection: bool = False):
        """Wrap an open connection.

        Args:
            connection: Open ``sqlite3`` connection.
            owns_connection: Close the connection when the backend closes.
        """
        self.connection = connection
        self.owns_connection = owns_connection

    @classmethod
    def open(cls, db_path: str) -> NativeBackend:
        """Open a database file, or ``:memory:``, and own the connection."""
        return cls(sqlite3.connect(db_path or ":memory:"), owns_connection=True)

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        logger.debug(f"execute: {sql} [{len(params)} params]")
        # commits on success, rolls back and re-raises on engine errors
        with self.connection:
            cursor = self.connection.execute(sql, tuple(params))
        try:
            return cursor.rowcount
        finally:
            cursor.close()

    def query(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        logger.debug(f"query: {sql} [{len(params)} params]")
        cursor = self.connection.execute(sql, tuple(params))
        try:
            rows = cursor.fetchall()
            cols = [c[0] for c in cursor.description]
            return [dict(zip(cols, row, strict=True)) for row in rows]
        finally:
            cursor.close()

    def insert_returning_key(self, sql: str, params: Sequence[Any] = ()) -> int | None:
        logger.debug(f"insert: {sql} [{len(params)} params]")
        with self.connection:
            cursor = self.connection.execute(sql, tuple(params))
        try:
            return cursor.lastrowid
        finally:
            cursor.close()

    def close(self) -> None:
        if self.owns_connection:
            self.connection.close()
