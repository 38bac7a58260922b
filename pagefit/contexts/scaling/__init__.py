"""
Scaling Context

Responsibilities:
- Maps a density value to a named set of scale factors
- Loads factor bounds and fit tunables from scale_bounds.yaml

Owns: Scale factor ranges, work-expansion boosts, density clamping
Never: Measures or touches a rendering surface
"""

from pagefit.contexts.scaling.config import FitConfig, default_fit_config, load_fit_config
from pagefit.contexts.scaling.exceptions import InvalidScaleBoundsError
from pagefit.contexts.scaling.scale_model import (
    BASELINE_DENSITY,
    ScaleConfiguration,
    clamp_density,
    compute_scales,
    step_density,
)

__all__ = [
    "BASELINE_DENSITY",
    "FitConfig",
    "InvalidScaleBoundsError",
    "ScaleConfiguration",
    "clamp_density",
    "compute_scales",
    "default_fit_config",
    "load_fit_config",
    "step_density",
]
