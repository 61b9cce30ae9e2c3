# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Query options and the WHERE / ORDER BY / LIMIT clause builder.

Options are pydantic models so that plain dicts coming from callers are
validated at the boundary:

    options = QueryOptions.model_validate({
        "where": [
            {"column": "name", "opt": {"type": "=", "value": "John Smith"}},
            {"column": "age", "op": ">=", "value": 18},
            {"column": "city", "op": "=", "value": ["Rome", "Milan"]},
        ],
        "order": {"age": "DESC"},
        "limit": 10,
    })
    sql, params = build_clauses(schema.columns, options)
    # sql    → "WHERE name = ? AND age >= ? AND (city = ? OR city = ?) ORDER BY age DESC LIMIT 10"
    # params → ["John Smith", 18, "Rome", "Milan"]

The builder never touches an engine: identical inputs always produce the
same SQL text and the same parameter list.

None values: ``=`` becomes ``IS NULL`` and ``!=`` becomes ``IS NOT NULL``,
neither binds a parameter. Ordering operators reject None.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import TYPE_CHECKING, Annotated, Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import InvalidArgumentError

if TYPE_CHECKING:
    from .column import Column, Columns


class Operator(str, Enum):
    """Comparison operators accepted in conditions."""

    EQ = "="
    NE = "!="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="


class Direction(str, Enum):
    """Sort direction for ORDER BY."""

    ASC = "ASC"
    DESC = "DESC"


class Condition(BaseModel):
    """One filter predicate.

    A list or tuple value is a disjunction: the predicate matches when the
    column compares true against any member.

    Attributes:
        column: Column the predicate applies to. Undeclared columns are
            ignored by the builder.
        op: Comparison operator. A condition without operator is skipped.
        value: Scalar, or list of scalars.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    column: Annotated[str, Field(min_length=1, description="Column name")]
    op: Annotated[
        Operator | None,
        Field(default=None, description="Comparison operator")
    ]
    value: Annotated[
        Any,
        Field(default=None, description="Scalar or list of scalars")
    ]

    @model_validator(mode="before")
    @classmethod
    def unwrap_opt(cls, data: Any) -> Any:
        """Accept the nested ``{"column", "opt": {"type", "value"}}`` shape."""
        if isinstance(data, Mapping) and "opt" in data:
            data = dict(data)
            opt = data.pop("opt") or {}
            data.setdefault("op", opt.get("type"))
            data.setdefault("value", opt.get("value"))
        return data

    @field_validator("value")
    @classmethod
    def scalar_or_list(cls, v: Any) -> Any:
        """Normalize tuples to lists and reject nested containers."""
        if isinstance(v, tuple):
            v = list(v)
        members = v if isinstance(v, list) else [v]
        for member in members:
            if isinstance(member, (list, tuple, set, frozenset, Mapping)):
                raise ValueError("condition values must be scalars or a flat list of scalars")
        return v


class QueryOptions(BaseModel):
    """Filters, ordering and limit for reads, deletes and updates.

    Attributes:
        where: Conditions combined with AND, in order. Also accepted as
            ``conditions``.
        order: Column to direction mapping, applied in mapping order. A
            None direction means ascending. Also accepted as ``order_by``
            or as a list of ``{"column", "direction"}`` entries.
        limit: Maximum rows. Zero, negative or None means no limit.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    where: Annotated[
        list[Condition],
        Field(
            default_factory=list,
            validation_alias=AliasChoices("where", "conditions"),
            description="Conditions combined with AND",
        ),
    ]
    order: Annotated[
        dict[str, Direction | None],
        Field(
            default_factory=dict,
            validation_alias=AliasChoices("order", "order_by", "orderBy"),
            description="Column to sort direction",
        ),
    ]
    limit: Annotated[
        int | None,
        Field(default=None, description="Maximum number of rows")
    ]

    @field_validator("order", mode="before")
    @classmethod
    def normalize_order(cls, v: Any) -> Any:
        """Accept ``{"column", "direction"}`` entries and lowercase directions."""
        if v is None:
            return {}
        if isinstance(v, Mapping) and _is_order_entry(v):
            v = [v]
        if isinstance(v, (list, tuple)):
            entries: dict[str, Any] = {}
            for entry in v:
                if isinstance(entry, str):
                    entries[entry] = None
                elif isinstance(entry, Mapping) and "column" in entry:
                    entries[entry["column"]] = entry.get("direction")
                else:
                    raise ValueError(f"invalid order entry: {entry!r}")
            v = entries
        if isinstance(v, Mapping):
            return {
                key: direction.upper() if isinstance(direction, str) else direction
                for key, direction in v.items()
            }
        return v


def _is_order_entry(v: Mapping[str, Any]) -> bool:
    keys = set(v)
    if keys == {"column", "direction"}:
        return True
    return keys == {"column"} and str(v["column"]).upper() not in ("ASC", "DESC")


def coerce_options(options: QueryOptions | Mapping[str, Any] | None) -> QueryOptions:
    """Validate caller-supplied options into a QueryOptions instance."""
    if options is None:
        return QueryOptions()
    if isinstance(options, QueryOptions):
        return options
    return QueryOptions.model_validate(options)


def coerce_conditions(
    conditions: QueryOptions | Mapping[str, Any] | Iterable[Condition | Mapping[str, Any]] | None,
) -> list[Condition]:
    """Validate a bare condition list, or take the conditions of options."""
    if conditions is None:
        return []
    if isinstance(conditions, Mapping) and "column" in conditions:
        return [Condition.model_validate(conditions)]
    if isinstance(conditions, (QueryOptions, Mapping)):
        return list(coerce_options(conditions).where)
    return [
        cond if isinstance(cond, Condition) else Condition.model_validate(cond)
        for cond in conditions
    ]


def _predicate(col: Column, op: Operator, value: Any, params: list[Any]) -> str:
    if value is None:
        if op is Operator.EQ:
            return f"{col.name} IS NULL"
        if op is Operator.NE:
            return f"{col.name} IS NOT NULL"
        raise InvalidArgumentError(
            f"Cannot compare column '{col.name}' with None using '{op.value}'"
        )
    params.append(col.to_db(value))
    return f"{col.name} {op.value} ?"


def build_where(columns: Columns, conditions: Iterable[Condition]) -> tuple[str, list[Any]]:
    """Build ``WHERE ...`` and its parameters; ``("", [])`` when nothing applies."""
    clauses: list[str] = []
    params: list[Any] = []
    for cond in conditions:
        if cond.op is None or cond.column not in columns:
            continue
        col = columns[cond.column]
        if isinstance(cond.value, list):
            if not cond.value:
                continue
            members = [_predicate(col, cond.op, member, params) for member in cond.value]
            clauses.append("(" + " OR ".join(members) + ")")
        else:
            clauses.append(_predicate(col, cond.op, cond.value, params))
    if not clauses:
        return "", []
    return "WHERE " + " AND ".join(clauses), params


def build_order_by(columns: Columns, order: Mapping[str, Direction | None]) -> str:
    parts = [
        f"{name} {(direction or Direction.ASC).value}"
        for name, direction in order.items()
        if name in columns
    ]
    return "ORDER BY " + ", ".join(parts) if parts else ""


def build_limit(limit: int | None) -> str:
    return f"LIMIT {int(limit)}" if limit is not None and limit > 0 else ""


def build_clauses(columns: Columns, options: QueryOptions) -> tuple[str, list[Any]]:
    """Build the WHERE / ORDER BY / LIMIT tail of a statement.

    Returns:
        Tuple of the SQL fragment (empty when no clause applies) and the
        parameter list, in placeholder order.
    """
    where_sql, params = build_where(columns, options.where)
    parts = [where_sql, build_order_by(columns, options.order), build_limit(options.limit)]
    return " ".join(part for part in parts if part), params


__all__ = [
    "Condition",
    "Direction",
    "Operator",
    "QueryOptions",
    "build_clauses",
    "build_limit",
    "build_order_by",
    "build_where",
    "coerce_conditions",
    "coerce_options",
]
