# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Table schema: name, column definitions and row factory."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from .column import Column, Columns, ColumnType, is_valid_name
from .errors import SchemaError
from .logger import get_logger
from .row import Row, coerce_fields

logger = get_logger("Schema")

RowFactory = Callable[[dict[str, Any]], Any]


class TableSchema:
    """Static description of one table, owned by a single Table.

    Unknown fields and conditions are ignored: every operation filters its
    input against the declared columns before building SQL.

    Args:
        name: Table name.
        columns: A Columns registry, an iterable of Column, or a mapping of
            column name to storage type / Column.
        row_factory: Callable receiving one field dict per fetched row.
            Defaults to Row.
    """

    __slots__ = ("_name", "_columns", "_row_factory")

    def __init__(
        self,
        name: str,
        columns: Columns | Iterable[Column] | Mapping[str, Column | ColumnType | str],
        row_factory: RowFactory = Row,
    ) -> None:
        if not is_valid_name(name):
            raise SchemaError(f"Invalid table name: {name!r}")
        registry = Columns()
        if isinstance(columns, Columns):
            items: Iterable[Column] = columns.values()
        elif isinstance(columns, Mapping):
            items = [
                spec if isinstance(spec, Column) else Column(col_name, ColumnType(spec))
                for col_name, spec in columns.items()
            ]
        else:
            items = columns
        for col in items:
            registry.add(col)
        if not len(registry):
            raise SchemaError(f"Table '{name}' must declare at least one column")
        self._name = name
        self._columns = registry
        self._row_factory = row_factory

    @property
    def name(self) -> str:
        return self._name

    @property
    def columns(self) -> Columns:
        return self._columns

    @property
    def row_factory(self) -> RowFactory:
        return self._row_factory

    def filter_fields(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        """Drop undeclared keys, keeping the caller's key order."""
        kept = {key: value for key, value in fields.items() if key in self._columns}
        if len(kept) != len(fields):
            ignored = [key for key in fields if key not in self._columns]
            logger.debug(f"{self._name}: ignoring undeclared fields {ignored}")
        return kept

    def bind_values(self, fields: Mapping[str, Any]) -> list[Any]:
        """Parameter values for already filtered fields, in key order."""
        return [self._columns[key].to_db(value) for key, value in fields.items()]

    def materialize(self, raw: Mapping[str, Any]) -> Any:
        """Build a row instance from a raw engine row."""
        return self._row_factory(coerce_fields(raw, self._columns))

    def __repr__(self) -> str:
        return f"TableSchema({self._name!r}, columns={self._columns.names()!r})"


__all__ = ["RowFactory", "TableSchema"]
