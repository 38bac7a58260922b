"""
Fit Configuration Loading

Loads scale factor bounds, page geometry and solver/controller tunables from
scale_bounds.yaml. The default file ships with the package; SCALE_BOUNDS_PATH
in the environment (or .env) points at an alternative.

Examples:
    >>> config = load_fit_config()
    >>> config.bounds.body.min
    0.82
    >>> round(config.page.height_px, 2)
    1122.52
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

from pagefit.contexts.scaling.exceptions import InvalidScaleBoundsError

load_dotenv()

DEFAULT_SCALE_BOUNDS_PATH = Path(__file__).parent / "scale_bounds.yaml"
SCALE_BOUNDS_PATH = Path(os.getenv("SCALE_BOUNDS_PATH", str(DEFAULT_SCALE_BOUNDS_PATH)))

MM_PER_INCH = 25.4

# Factor names in scale_bounds.yaml, in ScaleConfiguration field order
FACTOR_NAMES = (
    "header",
    "body",
    "main_spacing",
    "sidebar_spacing",
    "work_expansion",
    "line_height",
)


@dataclass(frozen=True)
class FactorRange:
    """Interpolation range of one scale factor (density 0 -> min, density 1 -> max)."""

    min: float
    max: float

    def lerp(self, density: float) -> float:
        # Weighted form of min + (max - min) * density; hits both endpoints exactly
        return self.min * (1.0 - density) + self.max * density


@dataclass(frozen=True)
class ScaleBounds:
    header: FactorRange
    body: FactorRange
    main_spacing: FactorRange
    sidebar_spacing: FactorRange
    work_expansion: FactorRange
    line_height: FactorRange


@dataclass(frozen=True)
class WorkExpansionBoosts:
    """
    Graduated boosts for the work-experience spacing factor.

    Caps are multiples of the work_expansion max bound.
    """

    mid_threshold: float = 0.5
    mid_rate: float = 0.6
    high_threshold: float = 0.8
    high_rate: float = 0.5
    high_cap: float = 1.2
    hidden_threshold: float = 0.6
    hidden_rate: float = 0.3
    hidden_cap: float = 1.3


@dataclass(frozen=True)
class PageGeometry:
    height_mm: float = 297.0
    width_mm: float = 210.0
    dpi: float = 96.0

    @property
    def height_px(self) -> float:
        return self.height_mm * self.dpi / MM_PER_INCH

    @property
    def width_px(self) -> float:
        return self.width_mm * self.dpi / MM_PER_INCH


@dataclass(frozen=True)
class SolverTuning:
    fill_target_projects_visible: float = 0.95
    fill_target_projects_hidden: float = 0.98
    range_min_projects_visible: float = 0.90
    range_min_projects_hidden: float = 0.92
    stable_floor: float = 0.90
    compact_density: float = 0.0
    baseline_density: float = 0.5

    def fill_target(self, projects_visible: bool) -> float:
        if projects_visible:
            return self.fill_target_projects_visible
        return self.fill_target_projects_hidden

    def range_min(self, projects_visible: bool) -> float:
        if projects_visible:
            return self.range_min_projects_visible
        return self.range_min_projects_hidden


@dataclass(frozen=True)
class MeasurementTuning:
    scroll_buffer_px: float = 20.0


@dataclass(frozen=True)
class ControllerTiming:
    """Delays (seconds) used by the fit controller."""

    settle_delay_s: float = 0.1
    mutation_debounce_s: float = 0.5
    resize_debounce_s: float = 0.2
    blur_grace_s: float = 0.3
    projects_toggle_delay_s: float = 0.3
    frame_s: float = 0.016
    settle_frames: int = 2
    manual_step: float = 0.05

    @property
    def layout_settle_s(self) -> float:
        return self.frame_s * self.settle_frames


@dataclass(frozen=True)
class FitConfig:
    bounds: ScaleBounds
    boosts: WorkExpansionBoosts
    page: PageGeometry
    solver: SolverTuning
    measurement: MeasurementTuning
    controller: ControllerTiming


def _require(data: Dict[str, Any], key: str, config_path: Optional[Path]) -> Any:
    if key not in data or data[key] is None:
        raise InvalidScaleBoundsError(f"Missing required config key '{key}'", key, config_path)
    return data[key]


def _parse_bounds(factors: Dict[str, Any], config_path: Optional[Path]) -> ScaleBounds:
    ranges = {}
    for name in FACTOR_NAMES:
        entry = _require(factors, name, config_path)
        try:
            factor_range = FactorRange(min=float(entry["min"]), max=float(entry["max"]))
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidScaleBoundsError(
                f"Factor '{name}' needs numeric 'min' and 'max' ({e})",
                f"factors.{name}",
                config_path,
            ) from e
        if factor_range.min > factor_range.max:
            raise InvalidScaleBoundsError(
                f"Factor '{name}' has min {factor_range.min} above max {factor_range.max}",
                f"factors.{name}",
                config_path,
            )
        if factor_range.min <= 0:
            raise InvalidScaleBoundsError(
                f"Factor '{name}' must stay positive (min={factor_range.min})",
                f"factors.{name}",
                config_path,
            )
        ranges[name] = factor_range
    return ScaleBounds(**ranges)


def _build_section(cls, data: Dict[str, Any], section: str, config_path: Optional[Path]):
    """Instantiate a tuning dataclass from an optional config section."""
    values = data.get(section) or {}
    if not isinstance(values, dict):
        raise InvalidScaleBoundsError(
            f"Section '{section}' must be a mapping", section, config_path
        )
    try:
        return cls(**values)
    except TypeError as e:
        raise InvalidScaleBoundsError(
            f"Invalid keys in section '{section}' ({e})", section, config_path
        ) from e


def fit_config_from_dict(data: Dict[str, Any], config_path: Optional[Path] = None) -> FitConfig:
    """
    Build a validated FitConfig from a plain dict (as loaded from YAML).

    Only `factors` is required; other sections fall back to their defaults.

    Raises:
        InvalidScaleBoundsError: If a factor is missing or its range is invalid,
            a section has unknown keys, or a solver threshold is out of range
    """
    bounds = _parse_bounds(_require(data, "factors", config_path), config_path)

    solver_data = data.get("solver") or {}
    fill_target = solver_data.get("fill_target") or {}
    range_min = solver_data.get("range_min") or {}
    defaults = SolverTuning()
    solver = SolverTuning(
        fill_target_projects_visible=fill_target.get(
            "projects_visible", defaults.fill_target_projects_visible
        ),
        fill_target_projects_hidden=fill_target.get(
            "projects_hidden", defaults.fill_target_projects_hidden
        ),
        range_min_projects_visible=range_min.get(
            "projects_visible", defaults.range_min_projects_visible
        ),
        range_min_projects_hidden=range_min.get(
            "projects_hidden", defaults.range_min_projects_hidden
        ),
        stable_floor=solver_data.get("stable_floor", defaults.stable_floor),
        compact_density=solver_data.get("compact_density", defaults.compact_density),
        baseline_density=solver_data.get("baseline_density", defaults.baseline_density),
    )
    for visible in (True, False):
        if not 0 < solver.fill_target(visible) <= 1:
            raise InvalidScaleBoundsError(
                f"Fill target must be in (0, 1], got {solver.fill_target(visible)}",
                "solver.fill_target",
                config_path,
            )
        if not 0 < solver.range_min(visible) <= 1:
            raise InvalidScaleBoundsError(
                f"Range minimum must be in (0, 1], got {solver.range_min(visible)}",
                "solver.range_min",
                config_path,
            )
    if not 0 < solver.stable_floor <= 1:
        raise InvalidScaleBoundsError(
            f"Stable floor must be in (0, 1], got {solver.stable_floor}",
            "solver.stable_floor",
            config_path,
        )

    controller = _build_section(ControllerTiming, data, "controller", config_path)
    for name, value in vars(controller).items():
        if value < 0:
            raise InvalidScaleBoundsError(
                f"Controller timing '{name}' must not be negative", f"controller.{name}", config_path
            )

    return FitConfig(
        bounds=bounds,
        boosts=_build_section(WorkExpansionBoosts, data, "work_expansion_boosts", config_path),
        page=_build_section(PageGeometry, data, "page", config_path),
        solver=solver,
        measurement=_build_section(MeasurementTuning, data, "measurement", config_path),
        controller=controller,
    )


def load_fit_config(config_path: Optional[Path] = None) -> FitConfig:
    """
    Load scale_bounds.yaml into a FitConfig.

    Args:
        config_path: Optional path to config file (defaults to SCALE_BOUNDS_PATH)

    Returns:
        Validated FitConfig

    Raises:
        FileNotFoundError: If the config file does not exist
        InvalidScaleBoundsError: If the config is malformed
    """
    if config_path is None:
        config_path = SCALE_BOUNDS_PATH
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Scale bounds config not found: {config_path}")

    data = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)
    if not isinstance(data, dict):
        raise InvalidScaleBoundsError("Config root must be a mapping", config_path=config_path)

    return fit_config_from_dict(data, config_path)


@lru_cache(maxsize=1)
def default_fit_config() -> FitConfig:
    """Process-wide FitConfig loaded from SCALE_BOUNDS_PATH."""
    return load_fit_config()
