"""
Fit solver.

Decides which scale configuration a surface should use, from one measurement
at the currently applied scale:

    target     = (page height - top padding - bottom padding) * fill target
    fill ratio = content height / target

    range_min <= fill ratio <= 1.0  -> fit: keep the current state (hysteresis)
    fill ratio > 1.0                -> overflow: maximum compaction (density 0)
    otherwise                       -> underfill: baseline density 0.5

Underfill never searches for an exact filling density; flexible spacers on the
surface absorb the leftover space. Overflow must never clip content, so it
jumps straight to the most compact configuration.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pagefit.contexts.fitting.logger import _log_debug, _log_warning
from pagefit.contexts.rendering.applier import ScaleApplier
from pagefit.contexts.rendering.measurer import ContentMeasurer, Measurement
from pagefit.contexts.rendering.surface import ContentSurface
from pagefit.contexts.scaling.config import FitConfig, default_fit_config
from pagefit.contexts.scaling.scale_model import ScaleConfiguration, compute_scales


class FitStatus(Enum):
    FIT = "fit"
    OVERFLOW = "overflow"
    UNDERFILL = "underfill"


@dataclass(frozen=True)
class FitResult:
    """
    Scale configuration chosen by the solver, with the measurement behind it.

    Attributes:
        config: Configuration to apply
        content_height: Measured content height at the applied scale (px)
        target_height: Usable page height times the fill target (px)
        status: FIT, OVERFLOW or UNDERFILL
    """

    config: ScaleConfiguration
    content_height: float
    target_height: float
    status: FitStatus

    @property
    def density(self) -> float:
        return self.config.density

    @property
    def fill_ratio(self) -> float:
        if self.target_height <= 0:
            return 0.0
        return self.content_height / self.target_height


class FitSolver:
    """
    Chooses a scale configuration for a surface.

    Args:
        config: Bounds, page geometry and solver tunables (default: from scale_bounds.yaml)
        measurer: Content measurer (default: one built from config)
        applier: Used to read back the applied configuration when the caller
            does not pass one
    """

    def __init__(
        self,
        config: Optional[FitConfig] = None,
        measurer: Optional[ContentMeasurer] = None,
        applier: Optional[ScaleApplier] = None,
    ):
        self.config = config or default_fit_config()
        self.applier = applier or ScaleApplier(self.config.bounds)
        self.measurer = measurer or ContentMeasurer(self.config.measurement, self.applier)

    def scales(self, density: float, projects_visible: bool) -> ScaleConfiguration:
        return compute_scales(
            density, projects_visible, bounds=self.config.bounds, boosts=self.config.boosts
        )

    def target_height(self, measurement: Measurement, projects_visible: bool) -> float:
        usable = (
            self.config.page.height_px - measurement.padding_top - measurement.padding_bottom
        )
        return usable * self.config.solver.fill_target(projects_visible)

    def classify(self, fill_ratio: float, projects_visible: bool) -> FitStatus:
        """Band classification of a fill ratio (upper bound inclusive)."""
        tuning = self.config.solver
        if (
            tuning.range_min(projects_visible) <= fill_ratio <= 1.0
            and fill_ratio >= tuning.stable_floor
        ):
            return FitStatus.FIT
        if fill_ratio > 1.0:
            return FitStatus.OVERFLOW
        return FitStatus.UNDERFILL

    def is_compact(self, current: ScaleConfiguration) -> bool:
        """
        Whether current sits on the compact side of the two solver outcomes.

        The split point is halfway between the compact and baseline body scales.
        """
        tuning = self.config.solver
        body = self.config.bounds.body
        threshold = (body.lerp(tuning.compact_density) + body.lerp(tuning.baseline_density)) / 2
        return current.body_scale < threshold

    def stable_density(self, current: ScaleConfiguration) -> float:
        tuning = self.config.solver
        return tuning.compact_density if self.is_compact(current) else tuning.baseline_density

    def solve(
        self,
        surface: Optional[ContentSurface],
        current: Optional[ScaleConfiguration] = None,
        projects_visible: bool = True,
    ) -> Optional[FitResult]:
        """
        Measure the surface and choose a configuration.

        Args:
            surface: Surface to fit
            current: Configuration currently applied (default: read back from
                the surface parameters)
            projects_visible: Whether the projects section is shown

        Returns:
            FitResult, or None when the surface is not mounted
        """
        measurement = self.measurer.measure_geometry(surface, projects_visible)
        if measurement is None:
            return None

        if current is None:
            current = self.applier.read_applied(surface)
            if current is None:
                return None

        tuning = self.config.solver
        target = self.target_height(measurement, projects_visible)
        height = measurement.height

        if not math.isfinite(height) or height <= 0 or not math.isfinite(target) or target <= 0:
            _log_warning(
                f"Degenerate measurement (height={height}, target={target}); using baseline"
            )
            return FitResult(
                config=self.scales(tuning.baseline_density, projects_visible),
                content_height=height if math.isfinite(height) and height > 0 else 0.0,
                target_height=target if math.isfinite(target) and target > 0 else 0.0,
                status=FitStatus.UNDERFILL,
            )

        fill_ratio = height / target
        status = self.classify(fill_ratio, projects_visible)

        if status is FitStatus.FIT:
            config = self.scales(self.stable_density(current), projects_visible)
        elif status is FitStatus.OVERFLOW:
            config = self.scales(tuning.compact_density, projects_visible)
        else:
            config = self._underfill_config(surface, current, projects_visible)

        _log_debug(
            f"fill {fill_ratio:.3f} ({height:.1f}/{target:.1f}px) -> {status.value}, "
            f"density {config.density:.2f}"
        )
        return FitResult(
            config=config, content_height=height, target_height=target, status=status
        )

    def _underfill_config(
        self,
        surface: ContentSurface,
        current: ScaleConfiguration,
        projects_visible: bool,
    ) -> ScaleConfiguration:
        """
        Baseline configuration, unless leaving compaction would overflow again.

        Content that is underfull only because it is compacted is re-measured at
        baseline; if it would not fit there, compaction stays.
        """
        tuning = self.config.solver
        baseline = self.scales(tuning.baseline_density, projects_visible)
        if not self.is_compact(current):
            return baseline

        trial = self.measurer.measure_geometry(surface, projects_visible, trial=baseline)
        if trial is None:
            return baseline

        trial_target = self.target_height(trial, projects_visible)
        if trial_target > 0 and trial.height / trial_target > 1.0:
            _log_debug(
                f"Baseline would overflow ({trial.height:.1f}/{trial_target:.1f}px); "
                "staying compact"
            )
            return self.scales(tuning.compact_density, projects_visible)
        return baseline
