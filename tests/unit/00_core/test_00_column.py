# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for column definitions and the Columns registry."""

import pytest

from litetable import Boolean, Column, Columns, ColumnType, Hex, Integer, Real, SchemaError, Text


class TestColumnToSql:
    """Tests for Column.to_sql() DDL fragments."""

    def test_nullable_column(self):
        assert Column("name", Text).to_sql() == "name TEXT"

    def test_not_null_column(self):
        assert Column("name", Text, nullable=False).to_sql() == "name TEXT NOT NULL"

    def test_primary_key_has_no_not_null(self):
        """Primary keys never get NOT NULL appended."""
        col = Column("id", Integer, nullable=False, primary_key=True)
        assert col.to_sql() == "id INTEGER PRIMARY KEY"

    def test_autoincrement_primary_key(self):
        col = Column("id", Integer, primary_key=True, autoincrement=True)
        assert col.to_sql() == "id INTEGER PRIMARY KEY AUTOINCREMENT"

    def test_hex_is_stored_as_text(self):
        assert Column("address", Hex, nullable=False).to_sql() == "address TEXT NOT NULL"

    def test_boolean_and_real(self):
        assert Column("active", Boolean).to_sql() == "active BOOLEAN"
        assert Column("score", Real).to_sql() == "score REAL"

    def test_type_from_string(self):
        assert Column("n", "INTEGER").type_ is ColumnType.INTEGER


class TestColumnValidation:
    """Invalid definitions are rejected at definition time."""

    def test_autoincrement_requires_primary_key(self):
        with pytest.raises(SchemaError, match="autoincrement"):
            Column("id", Integer, autoincrement=True)

    def test_autoincrement_requires_integer(self):
        with pytest.raises(SchemaError, match="autoincrement"):
            Column("id", Text, primary_key=True, autoincrement=True)

    def test_invalid_name(self):
        with pytest.raises(SchemaError, match="Invalid column name"):
            Column("name; DROP TABLE x", Text)

    @pytest.mark.parametrize("name", ["order", "group", "Select", "where"])
    def test_sqlite_keyword_rejected(self, name):
        with pytest.raises(SchemaError, match="Invalid column name"):
            Column(name, Text)

    def test_keyword_prefix_allowed(self):
        assert Column("order_id", Integer).to_sql() == "order_id INTEGER"

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            Column("n", "BLOBBY")


class TestColumnConversion:
    """Tests for to_db()/from_db() value adaptation."""

    def test_bool_bound_as_int(self):
        assert Column("active", Boolean).to_db(True) == 1
        assert Column("active", Boolean).to_db(False) == 0

    def test_boolean_from_db(self):
        assert Column("active", Boolean).from_db(1) is True
        assert Column("active", Boolean).from_db(0) is False

    def test_hex_prefix_added(self):
        assert Column("address", Hex).from_db("deadbeef") == "0xdeadbeef"
        assert Column("address", Hex).from_db("0xdeadbeef") == "0xdeadbeef"

    def test_hex_prefix_added_before_binding(self):
        col = Column("address", Hex)
        assert col.to_db("deadbeef") == "0xdeadbeef"
        assert col.to_db("0xdeadbeef") == "0xdeadbeef"
        assert col.to_db(255) == "0xff"
        assert col.to_db(None) is None

    def test_integer_from_float(self):
        assert Column("n", Integer).from_db(3.0) == 3
        assert isinstance(Column("n", Integer).from_db(3.0), int)

    def test_real_from_int(self):
        assert isinstance(Column("score", Real).from_db(2), float)

    def test_none_passes_through(self):
        for type_ in ColumnType:
            assert Column("c", type_).from_db(None) is None


class TestColumns:
    """Tests for the Columns registry."""

    def test_order_is_declaration_order(self):
        c = Columns()
        c.column("b", Text)
        c.column("a", Integer)
        assert c.names() == ["b", "a"]
        assert list(c) == ["b", "a"]

    def test_duplicate_name_rejected(self):
        c = Columns()
        c.column("a", Text)
        with pytest.raises(SchemaError, match="already defined"):
            c.column("a", Integer)

    def test_second_primary_key_rejected(self):
        c = Columns()
        c.column("id", Integer, primary_key=True)
        with pytest.raises(SchemaError, match="primary key already declared"):
            c.column("code", Text, primary_key=True)

    def test_key_lookups(self):
        c = Columns()
        c.column("id", Integer, primary_key=True, autoincrement=True)
        c.column("name", Text)
        assert c.primary_key.name == "id"
        assert c.autoincrement_key.name == "id"
        assert "name" in c
        assert "missing" not in c

    def test_no_autoincrement_key(self):
        c = Columns()
        c.column("code", Text, primary_key=True)
        assert c.primary_key.name == "code"
        assert c.autoincrement_key is None
