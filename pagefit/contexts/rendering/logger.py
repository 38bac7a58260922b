"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[render]"


# Wrapper functions with automatic [render] prefix


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_measurement(measurement, projects_visible: bool) -> None:
    """
    Log a content measurement with its components.

    Args:
        measurement: Measurement from ContentMeasurer
        projects_visible: Whether project nodes were counted
    """
    _log_debug(
        f"Measured {measurement.height:.1f}px "
        f"(main {measurement.main_extent:.1f}, sidebar {measurement.sidebar_extent:.1f}, "
        f"scroll {measurement.scroll_extent:.1f}; "
        f"{measurement.nodes_counted} nodes, {measurement.nodes_skipped} skipped, "
        f"projects {'shown' if projects_visible else 'hidden'})"
    )


def log_surface_unavailable(operation: str) -> None:
    """Log that an operation was skipped because the surface is not mounted."""
    _log_debug(f"{operation}: surface not mounted, skipping")


def log_applied(config, changed: int) -> None:
    """Log parameters written by the applier."""
    if changed == 0:
        _log_debug(f"Scales unchanged at density {config.density:.2f}")
        return
    _log_debug(
        f"Applied density {config.density:.2f}: header={config.header_scale:.3f}, "
        f"body={config.body_scale:.3f}, mainSpacing={config.main_spacing_scale:.3f}, "
        f"sidebarSpacing={config.sidebar_spacing_scale:.3f}, "
        f"workExpansion={config.work_expansion_scale:.3f}, lineHeight={config.line_height:.3f} "
        f"({changed} parameters changed)"
    )
