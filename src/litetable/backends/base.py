# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Base class for engine backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence


class Backend(ABC):
    """Abstract base class for engine backends.

    All statements use positional ``?`` placeholders. Parameters are bound
    in list order, so callers must build them in placeholder order.

    Attributes:
        name: Registry name of the backend variant.
        supports_returning: The backend can hand back the inserted row from
            the INSERT statement itself (``INSERT ... RETURNING *``). When
            False, callers re-query using insert_returning_key().
    """

    name: str = ""
    supports_returning: bool = False

    @abstractmethod
    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Execute a statement, return affected row count."""
        ...

    @abstractmethod
    def query(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """Execute a read, return all rows as dicts."""
        ...

    @abstractmethod
    def insert_returning_key(self, sql: str, params: Sequence[Any] = ()) -> int | None:
        """Execute an INSERT, return the engine's last inserted row id."""
        ...

    def insert_returning_row(
        self, sql: str, params: Sequence[Any] = ()
    ) -> dict[str, Any] | None:
        """Execute an INSERT with ``RETURNING *``, return the inserted row.

        Raises:
            NotImplementedError: If the backend does not support RETURNING.
        """
        raise NotImplementedError(f"{type(self).__name__} does not support RETURNING")

    def close(self) -> None:
        """Release the engine handle. The default is a no-op."""
        pass

    def __enter__(self) -> Backend:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
