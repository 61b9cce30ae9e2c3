# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Logging utilities for litetable.

The library never configures handlers, levels or formats. That belongs to
the application entry point (usually ``logging.basicConfig()``), so that
embedding applications do not end up with duplicate handlers.

Example:
    Typical usage in a module::

        from litetable.logger import get_logger

        logger = get_logger("Table")
        logger.debug("Statement executed")
"""

import logging


def get_logger(name: str = "litetable") -> logging.Logger:
    """Retrieve a logger under the ``litetable`` namespace.

    Args:
        name: Logger name. Names that are not already dotted under
            ``litetable`` are nested below it, so ``get_logger("Table")``
            returns the ``litetable.Table`` logger.

    Returns:
        A ``logging.Logger`` instance bound to the given name.
    """
    if name != "litetable" and not name.startswith("litetable."):
        name = f"litetable.{name}"
    return logging.getLogger(name)
