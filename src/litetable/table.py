# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Typed table accessor.

A Table owns one TableSchema and one Backend. Every operation is a single
round trip (two for inserts re-fetched on the native backend), with no state
kept between calls.

Usage:
    backend = get_backend(":memory:")
    users = Table(backend, TableSchema("users", {
        "id": Column("id", Integer, primary_key=True, autoincrement=True),
        "name": Column("name", Text, nullable=False),
    }))
    users.create()
    row = users.add({"name": "John Smith"})
    users.update({"name": "Tom"}, {"where": [{"column": "id", "op": "=", "value": row.id}]})
    users.count([{"column": "name", "op": "=", "value": "Tom"}])  # → 1

Subclasses can declare their schema instead of receiving one:

    class UsersTable(Table):
        name = "users"

        def configure(self) -> None:
            c = self.columns
            c.column("id", Integer, primary_key=True, autoincrement=True)
            c.column("name", Text, nullable=False)

    users = UsersTable(backend)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Union

from .column import Columns
from .errors import InvalidArgumentError, SchemaError
from .logger import get_logger
from .query import (
    Condition,
    Operator,
    QueryOptions,
    build_clauses,
    build_where,
    coerce_conditions,
    coerce_options,
)
from .row import Row
from .schema import RowFactory, TableSchema

if TYPE_CHECKING:
    from .backends import Backend

logger = get_logger("Table")

Options = Union[QueryOptions, Mapping[str, Any], None]


class Table:
    """Accessor exposing create/add/get/update/delete/count on one table.

    Attributes:
        name: Table name in database.
        backend: Backend the statements run on.
        schema: Table schema.
        columns: Column definitions (shortcut for ``schema.columns``).
    """

    name: str
    row_factory: RowFactory = Row

    def __init__(self, backend: Backend, schema: TableSchema | None = None) -> None:
        self.backend = backend
        if schema is None:
            if not getattr(self, "name", None):
                raise SchemaError(f"{type(self).__name__} must define 'name' or receive a schema")
            self.columns = Columns()
            self.configure()
            schema = TableSchema(self.name, self.columns, type(self).row_factory)
        self.schema = schema
        self.name = schema.name
        self.columns = schema.columns

    def configure(self) -> None:
        """Override to define columns. Called during __init__ when no schema is given."""
        pass

    # -------------------------------------------------------------------------
    # Schema
    # -------------------------------------------------------------------------

    def create_table_sql(self) -> str:
        """Generate CREATE TABLE IF NOT EXISTS statement."""
        col_defs = ", ".join(self.columns.to_sql())
        return f"CREATE TABLE IF NOT EXISTS {self.name} ({col_defs})"

    def create(self) -> None:
        """Create table if not exists."""
        self.backend.execute(self.create_table_sql())

    # -------------------------------------------------------------------------
    # Statement building
    # -------------------------------------------------------------------------

    def _insert_sql(self, values: Mapping[str, Any]) -> tuple[str, list[Any]]:
        if not values:
            return f"INSERT INTO {self.name} DEFAULT VALUES", []
        cols = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        sql = f"INSERT INTO {self.name} ({cols}) VALUES ({placeholders})"
        return sql, self.schema.bind_values(values)

    def _target_sql(self, options: QueryOptions) -> tuple[str, list[Any]]:
        """WHERE clause selecting the rows a DELETE or UPDATE acts on.

        ORDER BY and LIMIT are moved into a rowid subquery: SQLite only
        accepts them on DELETE/UPDATE when built with a compile-time flag.
        """
        if not options.order and not (options.limit and options.limit > 0):
            return build_where(self.columns, options.where)
        clauses, params = build_clauses(self.columns, options)
        return f"WHERE rowid IN (SELECT rowid FROM {self.name} {clauses})", params

    def _require_mapping(self, fields: Any, operation: str) -> Mapping[str, Any]:
        if not isinstance(fields, Mapping):
            raise InvalidArgumentError(
                f"{self.name}.{operation}() expects a mapping of column to value, "
                f"got {type(fields).__name__}"
            )
        return fields

    # -------------------------------------------------------------------------
    # CRUD Operations
    # -------------------------------------------------------------------------

    def add(self, fields: Mapping[str, Any]) -> Any:
        """Insert a row and return it as stored. See insert_and_fetch()."""
        return self.insert_and_fetch(fields)

    def insert_and_fetch(self, fields: Mapping[str, Any]) -> Any:
        """Insert a row and return the stored row as a row instance.

        Columns follow the key order of ``fields``; undeclared keys are
        ignored. Backends supporting RETURNING hand the row back from the
        INSERT itself. Otherwise the row is fetched again by the engine's
        last inserted row id, matched on the autoincrement primary key.

        Raises:
            SchemaError: If the row has to be re-fetched and the table has no
                autoincrement primary key. Nothing is inserted in that case.
        """
        values = self.schema.filter_fields(self._require_mapping(fields, "add"))
        sql, params = self._insert_sql(values)

        if self.backend.supports_returning:
            raw = self.backend.insert_returning_row(sql, params)
            return self.schema.materialize(raw) if raw is not None else None

        key = self.columns.autoincrement_key
        if key is None:
            raise SchemaError(
                f"Table '{self.name}' needs an autoincrement INTEGER primary key "
                f"to return inserted rows on the {self.backend.name} backend"
            )
        rowid = self.backend.insert_returning_key(sql, params)
        rows = self.get(QueryOptions(where=[Condition(column=key.name, op=Operator.EQ, value=rowid)]))
        return rows[0] if rows else None

    def get(self, options: Options = None) -> list[Any]:
        """Select rows matching options, as row instances in engine order."""
        clauses, params = build_clauses(self.columns, coerce_options(options))
        sql = f"SELECT * FROM {self.name}"
        if clauses:
            sql = f"{sql} {clauses}"
        return [self.schema.materialize(raw) for raw in self.backend.query(sql, params)]

    def get_one(self, options: Options = None) -> Any | None:
        """First row matching options, or None."""
        opts = coerce_options(options).model_copy(update={"limit": 1})
        rows = self.get(opts)
        return rows[0] if rows else None

    def delete(self, options: Options = None) -> int:
        """Delete rows matching options, return affected row count.

        Without conditions every row of the table is deleted.
        """
        opts = coerce_options(options)
        where_sql, params = self._target_sql(opts)
        filtered = build_where(self.columns, opts.where)[0]
        if not filtered and not (opts.limit and opts.limit > 0):
            logger.warning(f"{self.name}: delete without conditions removes every row")
        sql = f"DELETE FROM {self.name}"
        if where_sql:
            sql = f"{sql} {where_sql}"
        return self.backend.execute(sql, params)

    def count(
        self,
        where: Options | Iterable[Condition | Mapping[str, Any]] = None,
    ) -> int:
        """Count rows matching conditions.

        Args:
            where: A list of conditions, or query options whose conditions
                are used. Ordering and limit do not apply to a count.
        """
        where_sql, params = build_where(self.columns, coerce_conditions(where))
        sql = f"SELECT COUNT(*) AS count FROM {self.name}"
        if where_sql:
            sql = f"{sql} {where_sql}"
        rows = self.backend.query(sql, params)
        if not rows or rows[0].get("count") is None:
            return 0
        return int(rows[0]["count"])

    def update(self, fields: Mapping[str, Any], options: Options = None) -> int:
        """Set fields on rows matching options, return affected row count.

        Parameters bind SET values first, then WHERE values.

        Raises:
            InvalidArgumentError: If no declared field is left to set.
        """
        values = self.schema.filter_fields(self._require_mapping(fields, "update"))
        if not values:
            raise InvalidArgumentError(
                f"{self.name}.update() requires at least one declared field to set"
            )
        where_sql, where_params = self._target_sql(coerce_options(options))
        assignments = ", ".join(f"{col} = ?" for col in values)
        sql = f"UPDATE {self.name} SET {assignments}"
        if where_sql:
            sql = f"{sql} {where_sql}"
        return self.backend.execute(sql, [*self.schema.bind_values(values), *where_params])


__all__ = ["Table"]
