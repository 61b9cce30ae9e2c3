# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Typed table access on SQLite with native and cursor-engine backends.

Usage:
    backend = get_backend(":memory:")             # native sqlite3
    backend = get_backend(wasm_db)                # prepare/bind/step engine

    users = Table(backend, TableSchema("users", [
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("name", Text, nullable=False),
    ]))
    users.create()
    row = users.add({"name": "John Smith"})
    rows = users.get({"where": [{"column": "id", "op": "=", "value": row.id}]})
"""

from .backends import BACKENDS, Backend, CursorBackend, NativeBackend, get_backend
from .column import Boolean, Column, Columns, ColumnType, Hex, Integer, Real, Text
from .config import DatabaseConfig, load_database_config, open_backend
from .errors import InvalidArgumentError, LiteTableError, SchemaError
from .query import Condition, Direction, Operator, QueryOptions, build_clauses
from .row import Row
from .schema import TableSchema
from .table import Table

__all__ = [
    # Main classes
    "Table",
    "TableSchema",
    "Row",
    # Column definitions
    "Column",
    "Columns",
    "ColumnType",
    "Integer",
    "Text",
    "Real",
    "Boolean",
    "Hex",
    # Query options
    "Condition",
    "Direction",
    "Operator",
    "QueryOptions",
    "build_clauses",
    # Backends
    "BACKENDS",
    "Backend",
    "CursorBackend",
    "NativeBackend",
    "get_backend",
    # Configuration
    "DatabaseConfig",
    "load_database_config",
    "open_backend",
    # Errors
    "LiteTableError",
    "InvalidArgumentError",
    "SchemaError",
]
