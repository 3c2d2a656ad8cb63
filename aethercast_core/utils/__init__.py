"""Shared utilities for AetherCast: logging and id generation."""

from .ids import generate_effect_id, generate_id
from .logging import get_logger, log_error, log_operation, setup_logging

__all__ = [
    "generate_id",
    "generate_effect_id",
    "get_logger",
    "log_error",
    "log_operation",
    "setup_logging",
]
