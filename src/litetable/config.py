# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Database configuration and INI loader.

Configuration file format (litetable.ini)::

    [database]
    # File path, ":memory:" or "sqlite:<path>"
    path = /var/app/data.db
    backend = native

    [logging]
    # Log every statement at DEBUG on the litetable loggers
    log_sql = true

Loading::

    config = load_database_config("/etc/app/litetable.ini")
    backend = open_backend(config)
"""

from __future__ import annotations

import configparser
import logging
from dataclasses import dataclass
from pathlib import Path

from .backends import BACKENDS, Backend, NativeBackend
from .logger import get_logger

logger = get_logger("Config")


@dataclass
class DatabaseConfig:
    """Settings needed to open a backend."""

    path: str = ":memory:"
    """SQLite database path, ":memory:" or "sqlite:<path>"."""

    backend: str = "native"
    """Backend variant name. Only "native" can be opened from a path."""

    log_sql: bool = False
    """Lower the litetable loggers to DEBUG so every statement is logged."""


def load_database_config(config_path: str | Path) -> DatabaseConfig:
    """Read a DatabaseConfig from an INI file.

    Missing sections or keys fall back to the DatabaseConfig defaults.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
        ValueError: If the backend name is unknown or log_sql is not a boolean.
    """
    if not Path(config_path).exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    parser = configparser.ConfigParser()
    parser.read(config_path)

    defaults = DatabaseConfig()
    path = parser.get("database", "path", fallback=defaults.path).strip()
    backend = parser.get("database", "backend", fallback=defaults.backend).strip().lower()
    log_sql = parser.getboolean("logging", "log_sql", fallback=defaults.log_sql)

    if backend not in BACKENDS:
        raise ValueError(
            f"Unknown backend: '{backend}'. Supported: {', '.join(sorted(BACKENDS))}"
        )

    logger.info(f"Loaded database config from {config_path}")
    return DatabaseConfig(path=path or defaults.path, backend=backend, log_sql=log_sql)


def open_backend(config: DatabaseConfig) -> Backend:
    """Open the backend described by config.

    Raises:
        ValueError: If config asks for a backend that cannot be opened from
            a path (cursor engines are handed in by the caller).
    """
    if config.backend != NativeBackend.name:
        raise ValueError(
            f"Backend '{config.backend}' wraps an engine handle and cannot be "
            "opened from configuration; pass the handle to get_backend()"
        )
    if config.log_sql:
        get_logger().setLevel(logging.DEBUG)
    path = config.path
    if path.lower().startswith("sqlite:"):
        path = path.split(":", 1)[1]
    return NativeBackend.open(path)


__all__ = ["DatabaseConfig", "load_database_config", "open_backend"]
