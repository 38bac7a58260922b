"""
Content height measurement.

Measures how tall the resume content is at the scales currently on the surface
(or at a trial configuration). Layout-only spacer nodes are ignored, since they
grow to absorb whatever space is left, and project nodes are ignored while the
projects section is hidden.

All heights are in the main column's content frame: 0 is the top of the main
column's content box (below its top padding).
"""

from dataclasses import dataclass
from typing import Optional

from pagefit.contexts.rendering.applier import ScaleApplier
from pagefit.contexts.rendering.logger import (
    _log_warning,
    log_measurement,
    log_surface_unavailable,
)
from pagefit.contexts.rendering.surface import (
    MAIN_REGION,
    NATURAL_HEIGHT,
    OVERRIDE_HEIGHT,
    OVERRIDE_OVERFLOW,
    ROLE_PROJECT,
    ROLE_SPACER,
    SIDEBAR_REGION,
    VISIBLE_OVERFLOW,
    ContentSurface,
    RegionGeometry,
)
from pagefit.contexts.scaling.config import MeasurementTuning, default_fit_config
from pagefit.contexts.scaling.scale_model import ScaleConfiguration


@dataclass(frozen=True)
class Measurement:
    """
    Result of one content measurement.

    Attributes:
        height: Content height used for fitting (max of the three extents)
        main_extent: Lowest main-column content node
        sidebar_extent: Lowest sidebar content node
        scroll_extent: Natural scroll extent plus buffer
        padding_top: Main column top padding at the measured scales
        padding_bottom: Main column bottom padding
        nodes_counted: Main-column nodes that contributed
        nodes_skipped: Main-column nodes excluded (spacers, hidden projects)
    """

    height: float
    main_extent: float
    sidebar_extent: float
    scroll_extent: float
    padding_top: float
    padding_bottom: float
    nodes_counted: int = 0
    nodes_skipped: int = 0


class ContentMeasurer:
    """
    Measures natural content height on a surface.

    Args:
        tuning: Measurement tunables (default: from scale_bounds.yaml)
        applier: Applier used to write and restore trial parameters
    """

    def __init__(
        self,
        tuning: Optional[MeasurementTuning] = None,
        applier: Optional[ScaleApplier] = None,
    ):
        self.tuning = tuning or default_fit_config().measurement
        self.applier = applier or ScaleApplier()

    def measure(
        self,
        surface: Optional[ContentSurface],
        projects_visible: bool = True,
        trial: Optional[ScaleConfiguration] = None,
    ) -> Optional[float]:
        """Content height in px, or None when the surface is not mounted."""
        measurement = self.measure_geometry(surface, projects_visible, trial)
        return None if measurement is None else measurement.height

    def measure_geometry(
        self,
        surface: Optional[ContentSurface],
        projects_visible: bool = True,
        trial: Optional[ScaleConfiguration] = None,
    ) -> Optional[Measurement]:
        """
        Measure content with the surface temporarily at natural height.

        Forces `height: auto` and `overflow: visible`, reflows synchronously,
        reads geometry, then restores the original overrides (and parameters,
        when a trial configuration was written) before returning.

        Args:
            surface: Surface to measure
            projects_visible: Count project nodes only when True
            trial: Optional configuration to measure at instead of the applied one

        Returns:
            Measurement, or None when the surface is not mounted
        """
        if surface is None or not surface.is_mounted:
            log_surface_unavailable("measure")
            return None

        saved_overrides = {
            name: surface.get_override(name) for name in (OVERRIDE_HEIGHT, OVERRIDE_OVERFLOW)
        }
        saved_parameters = self.applier.snapshot(surface) if trial is not None else None

        try:
            if trial is not None:
                self.applier.apply(surface, trial)
            surface.set_override(OVERRIDE_HEIGHT, NATURAL_HEIGHT)
            surface.set_override(OVERRIDE_OVERFLOW, VISIBLE_OVERFLOW)
            surface.reflow()
            measurement = self._read_geometry(surface, projects_visible)
        finally:
            for name, value in saved_overrides.items():
                surface.set_override(name, value)
            if saved_parameters is not None:
                self.applier.restore(surface, saved_parameters)
            surface.reflow()

        log_measurement(measurement, projects_visible)
        return measurement

    def _read_geometry(self, surface: ContentSurface, projects_visible: bool) -> Measurement:
        main = surface.region(MAIN_REGION)
        sidebar = surface.region(SIDEBAR_REGION)

        if main is None:
            _log_warning("Surface has no main region; measuring sidebar and scroll extent only")
            content_top = 0.0
            padding_top = padding_bottom = 0.0
        else:
            content_top = main.content_top
            padding_top, padding_bottom = main.padding_top, main.padding_bottom

        main_extent, counted, skipped = self._lowest_content(main, content_top, projects_visible)
        sidebar_extent, _, _ = self._lowest_content(sidebar, content_top, projects_visible=True)

        # Hidden project cards still on the surface must not reach the scroll fallback
        scroll_height = surface.scroll_height
        if not projects_visible:
            scroll_height -= self._project_span(main)

        scroll_extent = max(
            0.0,
            scroll_height - content_top - padding_bottom + self.tuning.scroll_buffer_px,
        )

        return Measurement(
            height=max(main_extent, sidebar_extent, scroll_extent),
            main_extent=main_extent,
            sidebar_extent=sidebar_extent,
            scroll_extent=scroll_extent,
            padding_top=padding_top,
            padding_bottom=padding_bottom,
            nodes_counted=counted,
            nodes_skipped=skipped,
        )

    @staticmethod
    def _project_span(region: Optional[RegionGeometry]) -> float:
        """Vertical space taken by project nodes, margins included."""
        if region is None:
            return 0.0
        projects = [node for node in region.nodes if node.has_role(ROLE_PROJECT)]
        if not projects:
            return 0.0
        return max(node.extent for node in projects) - min(node.top for node in projects)

    @staticmethod
    def _lowest_content(
        region: Optional[RegionGeometry],
        content_top: float,
        projects_visible: bool,
    ):
        """Lowest (bottom + margin) among content nodes, relative to content_top."""
        if region is None:
            return 0.0, 0, 0

        lowest = 0.0
        counted = skipped = 0
        for node in region.nodes:
            if node.has_role(ROLE_SPACER) or (
                not projects_visible and node.has_role(ROLE_PROJECT)
            ):
                skipped += 1
                continue
            counted += 1
            lowest = max(lowest, node.extent - content_top)
        return lowest, counted, skipped
