"""
Rendering Context

Responsibilities:
- Defines the ContentSurface seen by the fit engine
- Lays out resume content on an in-memory A4 surface (ResumeSurface)
- Measures natural content height (ContentMeasurer)
- Writes scale configurations as style parameters (ScaleApplier)

Owns: Surface geometry, style parameters, measurement overrides
Never: Decides which density to use
"""

from pagefit.contexts.rendering.applier import (
    PARAMETER_FIELDS,
    ScaleApplier,
    parameter_values,
    render_style_declarations,
)
from pagefit.contexts.rendering.measurer import ContentMeasurer, Measurement
from pagefit.contexts.rendering.resume_surface import ResumeSurface, TextMetrics
from pagefit.contexts.rendering.surface import (
    ContentSurface,
    Mutation,
    NodeBox,
    RegionGeometry,
)

__all__ = [
    "PARAMETER_FIELDS",
    "ContentMeasurer",
    "ContentSurface",
    "Measurement",
    "Mutation",
    "NodeBox",
    "RegionGeometry",
    "ResumeSurface",
    "ScaleApplier",
    "TextMetrics",
    "parameter_values",
    "render_style_declarations",
]
