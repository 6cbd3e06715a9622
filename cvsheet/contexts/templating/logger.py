"""
Templating context logger.

Provides logging interface for templating context with automatic [render] prefix.
All templating modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from cvsheet.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[render]"


def setup_templating_logger(log_dir: Path, pdf_mode: bool = False, console: bool = True) -> Path:
    """
    Setup logger for templating context.

    Args:
        log_dir: Directory for this rendering session
        pdf_mode: Whether links are being stripped (recorded in provenance header)
        console: Also log INFO and above to stderr

    Returns:
        Path to log file

    Example:
        from cvsheet.contexts.templating.logger import setup_templating_logger, _log_info

        log_file = setup_templating_logger(log_dir, pdf_mode=True)
        _log_info("Starting render...")
    """
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        extra_provenance={"PDF mode": pdf_mode},
        console=console,
    )


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level templating-specific logging helpers


def log_model_start(location: str, pdf_mode: bool) -> None:
    """Log start of model construction."""
    _log_info(f"Loading CV data from {location}")
    _log_debug(f"  PDF mode: {pdf_mode}")


def log_model_loaded(table_sizes: dict, elapsed_time: float) -> None:
    """Log a fully loaded and normalized model."""
    summary = ", ".join(f"{name}: {size}" for name, size in table_sizes.items())
    _log_success(f"CV data loaded ({elapsed_time:.2f}s)")
    _log_info(f"  Rows: {summary}")


def log_section_rendered(kind: str, section_id: str, num_blocks: int) -> None:
    """Log a rendered section; empty sections are noted but are not errors."""
    if num_blocks == 0:
        _log_debug(f"No {kind} rows for section '{section_id}'; rendering empty fragment")
    else:
        _log_debug(f"Rendered {num_blocks} {kind} block(s) for section '{section_id}'")
