"""Central logging utilities for the ledger entity engine.

Key Features
------------
1. configure_logging(): idempotent initialization of the root logger, with
   the level taken from ``Settings.log_level`` unless given explicitly.
2. get_logger(name): typed helper that always returns a configured logger
   under the ``ledger_core`` namespace.
3. reset_logging(): forget the configured flag so tests can re-initialize.
"""

from __future__ import annotations

import logging
from typing import Final

from beartype import beartype

from .config import get_settings

__all__: Final = [
    "configure_logging",
    "get_logger",
    "reset_logging",
]

_DEFAULT_LOG_FORMAT: Final = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_ROOT_LOGGER_NAME: Final = "ledger_core"
_is_configured: bool = False


@beartype
def configure_logging(
    *, level: int | None = None, fmt: str = _DEFAULT_LOG_FORMAT
) -> None:
    """Configure the root logger exactly once.

    Calling this function multiple times is safe – configuration will only
    be applied on the first invocation.
    """
    global _is_configured
    if _is_configured:
        return

    if level is None:
        level = get_settings().log_level_value

    logging.basicConfig(level=level, format=fmt)
    _is_configured = True


@beartype
def get_logger(name: str | None = None, *, level: int | None = None) -> logging.Logger:
    """Return a module-scoped logger that is guaranteed to be configured."""
    configure_logging()
    if name is None:
        logger_name = _ROOT_LOGGER_NAME
    elif name.startswith(_ROOT_LOGGER_NAME):
        logger_name = name
    else:
        logger_name = f"{_ROOT_LOGGER_NAME}.{name}"

    logger = logging.getLogger(logger_name)
    if level is not None:
        logger.setLevel(level)
    return logger


@beartype
def reset_logging() -> None:
    """Allow the next configure_logging() call to apply again (for testing)."""
    global _is_configured
    _is_configured = False
