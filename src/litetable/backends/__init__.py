# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Engine backends: native ``sqlite3`` and prepare/bind/step cursor engines."""

from __future__ import annotations

import sqlite3
from typing import Any

from .base import Backend
from .cursor import CursorBackend, CursorEngine, StatementHandle
from .native import NativeBackend

__all__ = [
    "BACKENDS",
    "Backend",
    "CursorBackend",
    "CursorEngine",
    "NativeBackend",
    "StatementHandle",
    "get_backend",
]

# Backend registry
BACKENDS: dict[str, type[Backend]] = {
    "native": NativeBackend,
    "cursor": CursorBackend,
}


def get_backend(target: Any) -> Backend:
    """Create a backend for a connection string or an engine handle.

    The variant is picked once, here; tables never probe the handle again.

    Accepted targets:
        - a Backend instance → returned as is
        - "/path/to/db.sqlite", "./db.sqlite" or ":memory:" → NativeBackend
        - "sqlite:/path/to/db.sqlite" or "sqlite::memory:" → NativeBackend
        - an open ``sqlite3.Connection`` → NativeBackend
        - a handle exposing ``prepare()`` but no ``execute()`` → CursorBackend

    Raises:
        ValueError: If the target matches none of the above.
    """
    if isinstance(target, Backend):
        return target

    if isinstance(target, sqlite3.Connection):
        return NativeBackend(target)

    if isinstance(target, str):
        if target == ":memory:" or target.startswith(("/", "./", "../")):
            return NativeBackend.open(target)

        if ":" not in target:
            raise ValueError(
                f"Invalid connection string: '{target}'. "
                "Expected 'sqlite:path', ':memory:' or a file path."
            )

        db_type, connection_info = target.split(":", 1)
        if db_type.lower() == "sqlite":
            return NativeBackend.open(connection_info)

        raise ValueError(
            f"Unknown database type: '{db_type}'. Supported: sqlite"
        )

    if callable(getattr(target, "prepare", None)) and not callable(
        getattr(target, "execute", None)
    ):
        return CursorBackend(target)

    raise ValueError(
        f"Cannot build a backend for {type(target).__name__}: expected a "
        "connection string, a sqlite3.Connection or a prepare/bind/step engine handle"
    )
