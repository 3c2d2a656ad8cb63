"""
Logging for AetherCast.

Every component logs under the ``aethercast`` tree (``aethercast.parser``,
``aethercast.engine`` ...). Structured context travels on the record as
``details`` and is rendered by AetherFormatter after the message, so the
same call reads well on a terminal and greps cleanly in a log file:

    [2025-01-01 12:00:00] WARNING  engine: Hidden protocol engaged | protocol=kernel.space
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

ROOT_LOGGER_NAME = "aethercast"
LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(component)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class AetherFormatter(logging.Formatter):
    """Adds the component name and any structured details to each line."""

    def __init__(self):
        super().__init__(LOG_FORMAT, datefmt=DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        record.component = record.name.removeprefix(f"{ROOT_LOGGER_NAME}.")
        line = super().format(record)
        details: dict[str, Any] = getattr(record, "details", None) or {}
        if details:
            line += " | " + ", ".join(f"{k}={v}" for k, v in details.items())
        return line


def setup_logging(level: str = "WARNING", log_dir: str | Path | None = None) -> logging.Logger:
    """Configure the ``aethercast`` logger tree.

    Console output goes to stderr so command output on stdout stays clean.
    When ``log_dir`` is given, records are also appended to
    ``<log_dir>/aethercast.log``.

    Returns:
        The configured ``aethercast`` logger
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level.upper())
    root.handlers.clear()
    root.propagate = False

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_dir is not None:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path / "aethercast.log", encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(AetherFormatter())
        root.addHandler(handler)
    return root


def get_logger(name: str) -> logging.Logger:
    """Logger for one component, e.g. ``get_logger("engine")``."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name.removeprefix(ROOT_LOGGER_NAME + '.')}")


def log_operation(
    logger: logging.Logger,
    operation: str,
    details: dict[str, Any] | None = None,
    level: int = logging.INFO,
) -> None:
    """Log ``operation`` with its details attached to the record."""
    logger.log(level, operation, extra={"details": details or {}})


def log_error(
    logger: logging.Logger,
    operation: str,
    error: Exception,
    context: dict[str, Any] | None = None,
) -> None:
    """Log a failed operation with its traceback and context."""
    logger.error(
        "%s failed: %s: %s", operation, type(error).__name__, error,
        exc_info=error,
        extra={"details": context or {}},
    )


# Warnings to stderr until an entry point configures logging
if not logging.getLogger(ROOT_LOGGER_NAME).handlers:
    setup_logging()
