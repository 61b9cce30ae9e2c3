# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Column definitions for table schemas.

Usage:
    columns = Columns()
    columns.column("id", Integer, primary_key=True, autoincrement=True)
    columns.column("name", Text, nullable=False)
    columns.column("address", Hex)

    columns.to_sql()
    # → ["id INTEGER PRIMARY KEY AUTOINCREMENT", "name TEXT NOT NULL", "address TEXT"]
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .errors import SchemaError

IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Names are emitted unquoted, so SQLite keywords cannot be used as names.
SQLITE_KEYWORDS = frozenset("""
    ABORT ACTION ADD AFTER ALL ALTER ALWAYS ANALYZE AND AS ASC ATTACH
    AUTOINCREMENT BEFORE BEGIN BETWEEN BY CASCADE CASE CAST CHECK COLLATE
    COLUMN COMMIT CONFLICT CONSTRAINT CREATE CROSS CURRENT CURRENT_DATE
    CURRENT_TIME CURRENT_TIMESTAMP DATABASE DEFAULT DEFERRABLE DEFERRED
    DELETE DESC DETACH DISTINCT DO DROP EACH ELSE END ESCAPE EXCEPT EXCLUDE
    EXCLUSIVE EXISTS EXPLAIN FAIL FILTER FIRST FOLLOWING FOR FOREIGN FROM
    FULL GENERATED GLOB GROUP GROUPS HAVING IF IGNORE IMMEDIATE IN INDEX
    INDEXED INITIALLY INNER INSERT INSTEAD INTERSECT INTO IS ISNULL JOIN KEY
    LAST LEFT LIKE LIMIT MATCH MATERIALIZED NATURAL NO NOT NOTHING NOTNULL
    NULL NULLS OF OFFSET ON OR ORDER OTHERS OUTER OVER PARTITION PLAN PRAGMA
    PRECEDING PRIMARY QUERY RAISE RANGE RECURSIVE REFERENCES REGEXP REINDEX
    RELEASE RENAME REPLACE RESTRICT RETURNING RIGHT ROLLBACK ROW ROWS
    SAVEPOINT SELECT SET TABLE TEMP TEMPORARY THEN TIES TO TRANSACTION
    TRIGGER UNBOUNDED UNION UNIQUE UPDATE USING VACUUM VALUES VIEW VIRTUAL
    WHEN WHERE WINDOW WITH WITHOUT
""".split())


def is_valid_name(name: str) -> bool:
    """Identifier usable unquoted as a table or column name."""
    return bool(IDENTIFIER.match(name or "")) and name.upper() not in SQLITE_KEYWORDS


class ColumnType(str, Enum):
    """Storage types a column can be declared with.

    Attributes:
        INTEGER: Whole numbers.
        TEXT: Strings.
        REAL: Floating point numbers.
        BOOLEAN: Stored as 0/1, surfaced as ``bool``.
        HEX: Stored and surfaced as a ``0x``-prefixed TEXT string.
    """

    INTEGER = "INTEGER"
    TEXT = "TEXT"
    REAL = "REAL"
    BOOLEAN = "BOOLEAN"
    HEX = "HEX"

    @property
    def sql_type(self) -> str:
        """Type name used in DDL."""
        return "TEXT" if self is ColumnType.HEX else self.value


Integer = ColumnType.INTEGER
Text = ColumnType.TEXT
Real = ColumnType.REAL
Boolean = ColumnType.BOOLEAN
Hex = ColumnType.HEX


@dataclass(frozen=True)
class Column:
    """Static description of one table column.

    Attributes:
        name: Column name.
        type_: Storage type.
        nullable: Whether NULL is accepted. Primary keys never get NOT NULL.
        primary_key: Column is the table's primary key.
        autoincrement: Engine assigns increasing ids. Only valid on an
            INTEGER primary key.
    """

    name: str
    type_: ColumnType
    nullable: bool = True
    primary_key: bool = False
    autoincrement: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "type_", ColumnType(self.type_))
        if not is_valid_name(self.name):
            raise SchemaError(f"Invalid column name: {self.name!r}")
        if self.autoincrement and not (
            self.primary_key and self.type_ is ColumnType.INTEGER
        ):
            raise SchemaError(
                f"Column '{self.name}': autoincrement requires an INTEGER primary key"
            )

    def to_sql(self) -> str:
        """Column definition fragment for CREATE TABLE."""
        parts = [self.name, self.type_.sql_type]
        if self.primary_key:
            parts.append("PRIMARY KEY")
            if self.autoincrement:
                parts.append("AUTOINCREMENT")
        elif not self.nullable:
            parts.append("NOT NULL")
        return " ".join(parts)

    def to_db(self, value: Any) -> Any:
        """Adapt a Python value for binding."""
        if isinstance(value, bool):
            return int(value)
        if self.type_ is ColumnType.HEX and value is not None:
            text = hex(value) if isinstance(value, int) else str(value)
            return text if text.startswith("0x") else f"0x{text}"
        return value

    def from_db(self, value: Any) -> Any:
        """Convert a raw engine value into the column's Python type."""
        if value is None:
            return None
        if self.type_ is ColumnType.BOOLEAN:
            return bool(value)
        if self.type_ is ColumnType.INTEGER and isinstance(value, float) and value.is_integer():
            # cursor engines built on JS numbers hand back floats
            return int(value)
        if self.type_ is ColumnType.REAL and isinstance(value, int):
            return float(value)
        if self.type_ is ColumnType.HEX and isinstance(value, str):
            return value if value.startswith("0x") else f"0x{value}"
        return value


class Columns:
    """Ordered registry of column definitions for one table."""

    def __init__(self) -> None:
        self._columns: dict[str, Column] = {}

    def column(
        self,
        name: str,
        type_: ColumnType | str = ColumnType.TEXT,
        *,
        nullable: bool = True,
        primary_key: bool = False,
        autoincrement: bool = False,
    ) -> Column:
        """Declare a column and return its definition.

        Raises:
            SchemaError: On a duplicate name, a second primary key or an
                invalid autoincrement flag.
        """
        if name in self._columns:
            raise SchemaError(f"Column '{name}' already defined")
        col = Column(
            name=name,
            type_=ColumnType(type_),
            nullable=nullable,
            primary_key=primary_key,
            autoincrement=autoincrement,
        )
        if col.primary_key and self.primary_key is not None:
            raise SchemaError(
                f"Column '{name}': primary key already declared on '{self.primary_key.name}'"
            )
        self._columns[name] = col
        return col

    def add(self, col: Column) -> Column:
        """Register an already built Column."""
        return self.column(
            col.name,
            col.type_,
            nullable=col.nullable,
            primary_key=col.primary_key,
            autoincrement=col.autoincrement,
        )

    @property
    def primary_key(self) -> Column | None:
        for col in self._columns.values():
            if col.primary_key:
                return col
        return None

    @property
    def autoincrement_key(self) -> Column | None:
        for col in self._columns.values():
            if col.autoincrement:
                return col
        return None

    def names(self) -> list[str]:
        return list(self._columns)

    def get(self, name: str) -> Column | None:
        return self._columns.get(name)

    def values(self) -> list[Column]:
        return list(self._columns.values())

    def to_sql(self) -> list[str]:
        return [col.to_sql() for col in self._columns.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._columns

    def __getitem__(self, name: str) -> Column:
        return self._columns[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)


__all__ = [
    "Boolean",
    "Column",
    "ColumnType",
    "Columns",
    "Hex",
    "Integer",
    "Real",
    "Text",
]
