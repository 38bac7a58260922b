"""
Scale parameter application.

Writes a ScaleConfiguration onto a surface as named style parameters. This is
the only writer of fit parameters; the surface's own layout rules read them.

Parameter mapping:
    header_scale          -> --fit-header-scale
    body_scale            -> --fit-content-font-scale
    main_spacing_scale    -> --fit-main-spacing-scale
    sidebar_spacing_scale -> --fit-sidebar-spacing-scale
    work_expansion_scale  -> --fit-work-expansion-scale
    line_height           -> --fit-line-height
"""

from typing import Dict, Optional

from jinja2 import Environment, StrictUndefined

from pagefit.contexts.rendering.logger import log_applied, log_surface_unavailable
from pagefit.contexts.rendering.surface import (
    NEUTRAL_PARAMETERS,
    PARAM_BODY_SCALE,
    PARAM_HEADER_SCALE,
    PARAM_LINE_HEIGHT,
    PARAM_MAIN_SPACING_SCALE,
    PARAM_SIDEBAR_SPACING_SCALE,
    PARAM_WORK_EXPANSION_SCALE,
    ContentSurface,
)
from pagefit.contexts.scaling.config import ScaleBounds, default_fit_config
from pagefit.contexts.scaling.scale_model import ScaleConfiguration, clamp_density

# Surface parameter name -> ScaleConfiguration field
PARAMETER_FIELDS = {
    PARAM_HEADER_SCALE: "header_scale",
    PARAM_BODY_SCALE: "body_scale",
    PARAM_MAIN_SPACING_SCALE: "main_spacing_scale",
    PARAM_SIDEBAR_SPACING_SCALE: "sidebar_spacing_scale",
    PARAM_WORK_EXPANSION_SCALE: "work_expansion_scale",
    PARAM_LINE_HEIGHT: "line_height",
}

_STYLE_ENV = Environment(
    undefined=StrictUndefined, trim_blocks=True, lstrip_blocks=True, keep_trailing_newline=True
)
STYLE_TEMPLATE = _STYLE_ENV.from_string(
    "{{ selector }} {\n"
    "{% for name, value in parameters.items() %}\n"
    "  {{ name }}: {{ value }};\n"
    "{% endfor %}\n"
    "}\n"
)

ParameterSnapshot = Dict[str, Optional[str]]


def format_parameter(value: float) -> str:
    """Stable string form of a parameter value (same float -> same string)."""
    return f"{value:.6g}"


def parameter_values(config: ScaleConfiguration) -> Dict[str, str]:
    """Map a configuration to its named parameter strings."""
    return {
        name: format_parameter(getattr(config, field_name))
        for name, field_name in PARAMETER_FIELDS.items()
    }


def render_style_declarations(config: ScaleConfiguration, selector: str = ".resume-wrapper") -> str:
    """
    Render a configuration as a CSS declaration block.

    Example:
        >>> print(render_style_declarations(compute_scales(0.5)))
        .resume-wrapper {
          --fit-header-scale: 0.94;
          ...
        }
    """
    return STYLE_TEMPLATE.render(selector=selector, parameters=parameter_values(config))


class ScaleApplier:
    """
    Writes scale configurations onto a surface.

    Args:
        bounds: Factor ranges used when reading parameters back into a
            configuration (default: from scale_bounds.yaml)
    """

    def __init__(self, bounds: Optional[ScaleBounds] = None):
        self.bounds = bounds or default_fit_config().bounds

    def apply(self, surface: Optional[ContentSurface], config: ScaleConfiguration) -> None:
        """
        Write every field of config as a named surface parameter.

        Idempotent: parameters already holding the target value are not rewritten.
        No-op when the surface is missing or not mounted.
        """
        if surface is None or not surface.is_mounted:
            log_surface_unavailable("apply")
            return

        changed = 0
        for name, value in parameter_values(config).items():
            if surface.get_parameter(name) != value:
                surface.set_parameter(name, value)
                changed += 1

        log_applied(config, changed)

    def initialize(self, surface: Optional[ContentSurface]) -> None:
        """Set neutral parameters (all scales 1, line height 1.45) on a fresh surface."""
        if surface is None or not surface.is_mounted:
            log_surface_unavailable("initialize")
            return
        for name, value in NEUTRAL_PARAMETERS.items():
            surface.set_parameter(name, format_parameter(value))

    def snapshot(self, surface: ContentSurface) -> ParameterSnapshot:
        """Current raw parameter values (None for unset) for a later restore()."""
        return surface.parameters(PARAMETER_FIELDS)

    def restore(self, surface: ContentSurface, snapshot: ParameterSnapshot) -> None:
        """Put back parameters captured by snapshot(); unset ones fall back to neutral."""
        for name, value in snapshot.items():
            if value is None:
                value = format_parameter(NEUTRAL_PARAMETERS[name])
            if surface.get_parameter(name) != value:
                surface.set_parameter(name, value)

    def read_applied(self, surface: Optional[ContentSurface]) -> Optional[ScaleConfiguration]:
        """
        Read the currently applied parameters back into a configuration.

        Unset or unparsable parameters read as their neutral values. Density is
        not a surface parameter, so it is inferred from the body scale.

        Returns:
            ScaleConfiguration, or None when the surface is not mounted
        """
        if surface is None or not surface.is_mounted:
            return None

        values = {}
        for name, field_name in PARAMETER_FIELDS.items():
            raw = surface.get_parameter(name)
            try:
                values[field_name] = float(raw) if raw is not None else NEUTRAL_PARAMETERS[name]
            except ValueError:
                values[field_name] = NEUTRAL_PARAMETERS[name]

        body = self.bounds.body
        span = body.max - body.min
        density = (values["body_scale"] - body.min) / span if span else 0.5
        return ScaleConfiguration(density=clamp_density(density), **values)
