# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Immutable row value type and raw-row coercion."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .column import Columns


def coerce_fields(raw: Mapping[str, Any], columns: Columns) -> dict[str, Any]:
    """Keep declared columns of a raw engine row, converted to Python types.

    Keys the schema does not declare (e.g. computed columns) are dropped.
    """
    return {
        key: columns[key].from_db(value)
        for key, value in raw.items()
        if key in columns
    }


class Row(Mapping[str, Any]):
    """Read-only row returned by table reads.

    Fields are reachable as mapping keys, as attributes, or through get():

        row = table.add({"name": "John Smith"})
        row["name"] == row.name == row.get("name")
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        object.__setattr__(self, "_data", dict(data or {}))

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(
                f"{type(self).__name__!r} object has no field {name!r}"
            ) from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return self._data == dict(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"

    def as_dict(self) -> dict[str, Any]:
        """Plain dict copy of the row's fields."""
        return dict(self._data)


__all__ = ["Row", "coerce_fields"]
