"""
Density-based scale model.

A single density value (0-1) controls how compact the page is. Each visual
element responds over its own range, so compaction preserves hierarchy:

- Headers: narrow range (0.88-1.0)
- Body text: moderate range (0.82-1.05)
- Spacing: widest range (main 0.35-1.15, work experience 0.35-3.0+)

0 = maximum compaction, 0.5 = baseline, 1 = maximum expansion.
"""

import math
from dataclasses import dataclass
from typing import Optional

from pagefit.contexts.scaling.config import (
    ScaleBounds,
    WorkExpansionBoosts,
    default_fit_config,
)

BASELINE_DENSITY = 0.5


@dataclass(frozen=True)
class ScaleConfiguration:
    """
    Named set of scale factors produced by the scale model.

    Attributes:
        density: Clamped density the factors were computed from
        header_scale: Scale for the name heading, section headers, company names
        body_scale: Scale for body text, bullets and contact values
        main_spacing_scale: Scale for main column margins and padding
        sidebar_spacing_scale: Scale for sidebar margins and padding
        work_expansion_scale: Spacing scale specific to the work-experience section
        line_height: Unitless line height for body text
    """

    density: float
    header_scale: float
    body_scale: float
    main_spacing_scale: float
    sidebar_spacing_scale: float
    work_expansion_scale: float
    line_height: float


def clamp_density(density: float) -> float:
    """Clamp to [0, 1]; NaN maps to the baseline density."""
    if density is None or math.isnan(density):
        return BASELINE_DENSITY
    return max(0.0, min(1.0, float(density)))


def step_density(density: float, delta: float) -> float:
    """Move a manual density by delta, staying inside [0, 1]."""
    return clamp_density(clamp_density(density) + delta)


def _work_expansion(
    density: float,
    projects_visible: bool,
    bounds: ScaleBounds,
    boosts: WorkExpansionBoosts,
) -> float:
    top = bounds.work_expansion.max
    scale = bounds.work_expansion.lerp(density)

    # Sparse content: spread remaining work entries further than uniform spacing would
    if density > boosts.mid_threshold:
        scale = min(top, scale + (density - boosts.mid_threshold) * boosts.mid_rate)

    if density > boosts.high_threshold:
        scale = min(
            top * boosts.high_cap, scale + (density - boosts.high_threshold) * boosts.high_rate
        )

    # A whole optional section is missing, so work experience absorbs more
    if not projects_visible and density > boosts.hidden_threshold:
        scale = min(
            top * boosts.hidden_cap,
            scale + (density - boosts.hidden_threshold) * boosts.hidden_rate,
        )

    return scale


def compute_scales(
    density: float,
    projects_visible: bool = True,
    bounds: Optional[ScaleBounds] = None,
    boosts: Optional[WorkExpansionBoosts] = None,
) -> ScaleConfiguration:
    """
    Map a density to a full scale configuration.

    Pure function: no measurement, no side effects.

    Args:
        density: Compaction/expansion control (clamped to [0, 1])
        projects_visible: Whether the projects section is shown; only biases
            the work-expansion factor
        bounds: Factor ranges (default: from scale_bounds.yaml)
        boosts: Work-expansion boost coefficients (default: from scale_bounds.yaml)

    Returns:
        ScaleConfiguration for the clamped density

    Example:
        >>> compute_scales(0).header_scale
        0.88
        >>> compute_scales(1).line_height
        1.8
    """
    if bounds is None or boosts is None:
        config = default_fit_config()
        bounds = bounds or config.bounds
        boosts = boosts or config.boosts

    density = clamp_density(density)

    return ScaleConfiguration(
        density=density,
        header_scale=bounds.header.lerp(density),
        body_scale=bounds.body.lerp(density),
        main_spacing_scale=bounds.main_spacing.lerp(density),
        sidebar_spacing_scale=bounds.sidebar_spacing.lerp(density),
        work_expansion_scale=_work_expansion(density, projects_visible, bounds, boosts),
        line_height=bounds.line_height.lerp(density),
    )
