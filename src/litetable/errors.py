# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Exception hierarchy for litetable.

Engine errors (``sqlite3.Error`` and whatever a cursor engine raises) are
never wrapped: they reach the caller unchanged.
"""


class LiteTableError(Exception):
    """Base class for errors raised by litetable itself."""


class InvalidArgumentError(LiteTableError, ValueError):
    """An operation was called with arguments it cannot act on.

    Raised for an update without fields to set, or for a ``None`` value
    compared with an ordering operator.
    """


class SchemaError(LiteTableError, ValueError):
    """A table definition is inconsistent or cannot support an operation."""


__all__ = ["InvalidArgumentError", "LiteTableError", "SchemaError"]
