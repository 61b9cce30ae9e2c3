# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Shared fixtures: backends of both variants and a users table."""

from __future__ import annotations

import sqlite3
from typing import Any

import pytest

from litetable import (
    Column,
    CursorBackend,
    Integer,
    NativeBackend,
    Table,
    TableSchema,
    Text,
)


class FakeStatement:
    """Prepared statement with the prepare/bind/step/get_as_object calling convention."""

    def __init__(self, engine: FakeCursorEngine, sql: str):
        self.engine = engine
        self.sql = sql
        self.params: list[Any] = []
        self.rows: list[dict[str, Any]] | None = None
        self.position = -1
        self.freed = False

    def bind(self, params):
        self.params = list(params)
        return True

    def step(self) -> bool:
        if self.rows is None:
            self.rows = self.engine.run(self.sql, self.params)
        self.position += 1
        return self.position < len(self.rows)

    def get_as_object(self) -> dict[str, Any]:
        return self.rows[self.position]

    def free(self) -> None:
        self.freed = True


class FakeCursorEngine:
    """In-memory engine exposing only prepare(), backed by sqlite3."""

    def __init__(self):
        self._conn = sqlite3.connect(":memory:", isolation_level=None)
        self._changes = 0
        self.statements: list[FakeStatement] = []

    def prepare(self, sql: str) -> FakeStatement:
        stmt = FakeStatement(self, sql)
        self.statements.append(stmt)
        return stmt

    def run(self, sql: str, params: list[Any]) -> list[dict[str, Any]]:
        cursor = self._conn.execute(sql, params)
        rows = cursor.fetchall()
        if cursor.rowcount >= 0:
            self._changes = cursor.rowcount
        cols = [c[0] for c in cursor.description] if cursor.description else []
        return [dict(zip(cols, row)) for row in rows]

    def get_rows_modified(self) -> int:
        return self._changes

    def close(self) -> None:
        self._conn.close()


@pytest.fixture
def cursor_engine():
    engine = FakeCursorEngine()
    yield engine
    engine.close()


@pytest.fixture
def native_backend():
    backend = NativeBackend.open(":memory:")
    yield backend
    backend.close()


@pytest.fixture
def cursor_backend(cursor_engine):
    return CursorBackend(cursor_engine)


@pytest.fixture(params=["native", "cursor"])
def backend(request):
    """Run the test once per backend variant."""
    if request.param == "native":
        return request.getfixturevalue("native_backend")
    return request.getfixturevalue("cursor_backend")


@pytest.fixture
def users_schema():
    return TableSchema(
        "users",
        [
            Column("id", Integer, primary_key=True, autoincrement=True),
            Column("name", Text, nullable=False),
            Column("age", Integer),
        ],
    )


@pytest.fixture
def users(backend, users_schema):
    table = Table(backend, users_schema)
    table.create()
    return table
