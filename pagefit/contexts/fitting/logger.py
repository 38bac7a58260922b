"""
Fitting context logger.

Provides logging interface for fitting context with automatic [fit] prefix.
All fitting modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from pagefit.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[fit]"


def setup_fitting_logger(
    log_dir: Optional[Path] = None,
    extra_provenance: Optional[dict] = None,
    console_level: str = "INFO",
) -> Optional[Path]:
    """
    Setup logger for fitting context.

    Args:
        log_dir: Directory for this session (None = console only)
        extra_provenance: Additional provenance (e.g., {"Resume": "cv.yaml"})
        console_level: Minimum level shown on the console

    Returns:
        Path to log file, or None
    """
    return _setup_logger(
        context_name="fit",
        log_dir=log_dir,
        extra_provenance=extra_provenance,
        console_level=console_level,
    )


# Wrapper functions with automatic [fit] prefix


def _log_info(message: str) -> None:
    """Log info message with [fit] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [fit] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [fit] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def _log_exception(message: str) -> None:
    """Log error with traceback and [fit] prefix."""
    logger.exception(f"{CONTEXT_PREFIX} {message}")


# High-level fitting-specific logging helpers


def log_fit_result(result, trigger: str) -> None:
    """
    Log the outcome of a fit cycle.

    Args:
        result: FitResult from FitSolver
        trigger: What started the cycle (e.g., "mount", "mutation")
    """
    _log_info(
        f"{result.status.value.upper()} via {trigger}: "
        f"{result.content_height:.1f}px / {result.target_height:.1f}px "
        f"(fill {result.fill_ratio:.1%}), density {result.config.density:.2f}"
    )


def log_cycle_skipped(trigger: str, reason: str) -> None:
    """Log a fit trigger that did not start a cycle."""
    _log_debug(f"Skipped {trigger}: {reason}")


def log_state_change(old_state, new_state) -> None:
    """Log a controller state transition."""
    _log_debug(f"State {old_state.value} -> {new_state.value}")


def log_manual_density(density: float) -> None:
    """Log a manual density override."""
    _log_info(f"Manual density {density:.2f} (auto-fit paused)")
