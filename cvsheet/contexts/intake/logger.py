"""
Intake context logger.

Provides logging interface for intake context with automatic [intake] prefix.
Sinks are configured once per session by the templating logger setup.
"""

from loguru import logger

CONTEXT_PREFIX = "[intake]"


# Wrapper functions with automatic [intake] prefix


def _log_error(message: str) -> None:
    """Log error message with [intake] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [intake] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level intake-specific logging helpers


def log_table_loaded(table: str, num_rows: int, location: str) -> None:
    """Log a successfully read table."""
    _log_debug(f"Read table '{table}' ({num_rows} rows) from {location}")


def log_source_failure(table: str, location: str, error: Exception) -> None:
    """Log a failed table read before it propagates."""
    _log_error(f"Could not read table '{table}' from {location}")
    _log_error(f"  Error: {error}")
