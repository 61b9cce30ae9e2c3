# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for the execute/query/insert contract shared by both backends."""

import sqlite3

import pytest

from litetable import NativeBackend


@pytest.fixture
def items(backend):
    backend.execute("CREATE TABLE items (id INTEGER PRIMARY KEY AUTOINCREMENT, label TEXT)")
    return backend


class TestBackendContract:
    """Each test runs against the native and the cursor backend."""

    def test_query_returns_dicts(self, items):
        items.execute("INSERT INTO items (label) VALUES (?)", ["a"])
        assert items.query("SELECT id, label FROM items") == [{"id": 1, "label": "a"}]

    def test_query_binds_positionally(self, items):
        items.execute("INSERT INTO items (label) VALUES (?)", ["a"])
        items.execute("INSERT INTO items (label) VALUES (?)", ["b"])
        rows = items.query("SELECT label FROM items WHERE label = ? OR id = ?", ["b", 1])
        assert sorted(r["label"] for r in rows) == ["a", "b"]

    def test_execute_returns_rowcount(self, items):
        for label in ("a", "b", "c"):
            items.execute("INSERT INTO items (label) VALUES (?)", [label])
        assert items.execute("DELETE FROM items WHERE label != ?", ["a"]) == 2

    def test_insert_returning_key(self, items):
        assert items.insert_returning_key("INSERT INTO items (label) VALUES (?)", ["a"]) == 1
        assert items.insert_returning_key("INSERT INTO items (label) VALUES (?)", ["b"]) == 2

    def test_engine_errors_propagate(self, backend):
        with pytest.raises(sqlite3.Error):
            backend.query("SELECT * FROM missing_table")


class TestNativeBackend:
    """Native-only behaviour."""

    def test_insert_returning_row_not_supported(self, native_backend):
        with pytest.raises(NotImplementedError):
            native_backend.insert_returning_row("INSERT INTO x DEFAULT VALUES")

    def test_writes_are_committed(self, tmp_path):
        path = str(tmp_path / "data.db")
        with NativeBackend.open(path) as backend:
            backend.execute("CREATE TABLE t (v TEXT)")
            backend.execute("INSERT INTO t (v) VALUES (?)", ["kept"])
        with NativeBackend.open(path) as backend:
            assert backend.query("SELECT v FROM t") == [{"v": "kept"}]

    def test_failed_write_releases_lock(self, tmp_path):
        """A constraint violation rolls back, so other connections can still write."""
        path = str(tmp_path / "data.db")
        with NativeBackend.open(path) as backend:
            backend.execute("CREATE TABLE t (id INTEGER PRIMARY KEY, v TEXT NOT NULL)")
            with pytest.raises(sqlite3.IntegrityError):
                backend.execute("INSERT INTO t (v) VALUES (?)", [None])
            assert not backend.connection.in_transaction

            with pytest.raises(sqlite3.IntegrityError):
                backend.insert_returning_key("INSERT INTO t (v) VALUES (?)", [None])
            assert not backend.connection.in_transaction

            other = sqlite3.connect(path, timeout=0.2)
            try:
                other.execute("INSERT INTO t (v) VALUES (?)", ["other"])
                other.commit()
            finally:
                other.close()
            assert backend.query("SELECT v FROM t") == [{"v": "other"}]


class TestCursorBackend:
    """Cursor-only behaviour."""

    def test_insert_returning_row(self, cursor_backend):
        cursor_backend.execute("CREATE TABLE t (id INTEGER PRIMARY KEY AUTOINCREMENT, v TEXT)")
        row = cursor_backend.insert_returning_row("INSERT INTO t (v) VALUES (?)", ["x"])
        assert row == {"id": 1, "v": "x"}

    def test_statements_freed(self, cursor_backend, cursor_engine):
        cursor_backend.execute("CREATE TABLE t (v TEXT)")
        cursor_backend.query("SELECT * FROM t")
        assert cursor_engine.statements
        assert all(stmt.freed for stmt in cursor_engine.statements)

    def test_no_bind_without_params(self, cursor_backend, cursor_engine):
        cursor_backend.query("SELECT 1 AS one")
        assert cursor_engine.statements[-1].params == []

    def test_statement_freed_on_engine_error(self, cursor_backend, cursor_engine):
        with pytest.raises(sqlite3.Error):
            cursor_backend.query("SELECT * FROM missing_table")
        assert cursor_engine.statements[-1].freed

    def test_camel_case_handle(self):
        from litetable import CursorBackend

        class Stmt:
            def __init__(self):
                self.done = False

            def bind(self, params):
                pass

            def step(self):
                if self.done:
                    return False
                self.done = True
                return True

            def getAsObject(self):
                return {"one": 1}

        class Engine:
            def prepare(self, sql):
                return Stmt()

            def getRowsModified(self):
                return 7

        backend = CursorBackend(Engine())
        assert backend.query("SELECT 1 AS one") == [{"one": 1}]
        assert backend.execute("DELETE FROM t") == 7
