"""Unit tests for the density scale model."""

import math

import pytest

from pagefit.contexts.scaling import (
    BASELINE_DENSITY,
    ScaleConfiguration,
    clamp_density,
    compute_scales,
    step_density,
)

SMOOTH_FIELDS = (
    "header_scale",
    "body_scale",
    "main_spacing_scale",
    "sidebar_spacing_scale",
    "line_height",
)


@pytest.mark.unit
def test_minimum_bounds_at_density_zero():
    """Density 0 hits every documented minimum exactly."""
    config = compute_scales(0, True)

    assert config.density == 0.0
    assert config.header_scale == 0.88
    assert config.body_scale == 0.82
    assert config.main_spacing_scale == 0.35
    assert config.sidebar_spacing_scale == 0.9
    assert config.work_expansion_scale == 0.35
    assert config.line_height == 1.15


@pytest.mark.unit
def test_maximum_bounds_at_density_one():
    """Density 1 hits the maxima; work expansion carries the high-density boost."""
    config = compute_scales(1, True)

    assert config.header_scale == 1.0
    assert config.body_scale == 1.05
    assert config.main_spacing_scale == 1.15
    assert config.sidebar_spacing_scale == 1.1
    assert config.line_height == 1.8
    # 3.0, mid boost capped at 3.0, then +0.2 * 0.5 under the 3.6 cap
    assert config.work_expansion_scale == pytest.approx(3.1)


@pytest.mark.unit
def test_baseline_values():
    config = compute_scales(BASELINE_DENSITY)

    assert config.header_scale == pytest.approx(0.94)
    assert config.body_scale == pytest.approx(0.935)
    assert config.main_spacing_scale == pytest.approx(0.75)
    assert config.sidebar_spacing_scale == pytest.approx(1.0)
    assert config.work_expansion_scale == pytest.approx(1.675)
    assert config.line_height == pytest.approx(1.475)


@pytest.mark.unit
@pytest.mark.parametrize("projects_visible", [True, False])
def test_monotonic_in_density(projects_visible):
    """Every factor is non-decreasing as density grows."""
    densities = [i / 100 for i in range(101)]
    configs = [compute_scales(d, projects_visible) for d in densities]

    for name in SMOOTH_FIELDS + ("work_expansion_scale",):
        values = [getattr(c, name) for c in configs]
        for lower, higher in zip(values, values[1:]):
            assert higher >= lower - 1e-12, name


@pytest.mark.unit
def test_hierarchy_header_shrinks_least():
    """Headers lose proportionally less than body text, body less than spacing."""
    compact = compute_scales(0)
    expanded = compute_scales(1)

    header_ratio = compact.header_scale / expanded.header_scale
    body_ratio = compact.body_scale / expanded.body_scale
    spacing_ratio = compact.main_spacing_scale / expanded.main_spacing_scale

    assert header_ratio > body_ratio > spacing_ratio


@pytest.mark.unit
def test_deterministic():
    assert compute_scales(0.37, False) == compute_scales(0.37, False)


@pytest.mark.unit
def test_hidden_projects_boost_work_expansion():
    """Hiding projects pushes more work-expansion at high density."""
    hidden = compute_scales(0.9, False)
    visible = compute_scales(0.9, True)

    assert hidden.work_expansion_scale >= visible.work_expansion_scale
    assert hidden.work_expansion_scale == pytest.approx(3.115)
    assert visible.work_expansion_scale == pytest.approx(3.025)


@pytest.mark.unit
def test_visibility_only_affects_work_expansion():
    hidden = compute_scales(0.75, False)
    visible = compute_scales(0.75, True)

    for name in SMOOTH_FIELDS:
        assert getattr(hidden, name) == getattr(visible, name)


@pytest.mark.unit
def test_work_expansion_boost_caps():
    """Boosts never exceed max x 1.3 even with projects hidden."""
    assert compute_scales(1, False).work_expansion_scale <= 3.0 * 1.3
    assert compute_scales(1, True).work_expansion_scale <= 3.0 * 1.2


@pytest.mark.unit
def test_below_boost_thresholds_is_pure_interpolation():
    config = compute_scales(0.4, False)
    assert config.work_expansion_scale == pytest.approx(0.35 + 2.65 * 0.4)


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw, expected",
    [(-0.5, 0.0), (1.7, 1.0), (0.3, 0.3), (float("nan"), 0.5), (None, 0.5)],
)
def test_clamp_density(raw, expected):
    assert clamp_density(raw) == expected


@pytest.mark.unit
def test_out_of_range_density_is_clamped():
    assert compute_scales(-3) == compute_scales(0)
    assert compute_scales(42, False) == compute_scales(1, False)


@pytest.mark.unit
def test_nan_density_never_produces_nan_factors():
    config = compute_scales(float("nan"))

    assert config == compute_scales(BASELINE_DENSITY)
    assert not any(math.isnan(v) for v in vars(config).values())


@pytest.mark.unit
def test_step_density_clamps():
    assert step_density(0.5, 0.05) == pytest.approx(0.55)
    assert step_density(0.98, 0.05) == 1.0
    assert step_density(0.02, -0.05) == 0.0


@pytest.mark.unit
def test_scale_configuration_is_frozen():
    config = compute_scales(0.5)
    with pytest.raises(AttributeError):
        config.body_scale = 2.0
    assert isinstance(config, ScaleConfiguration)
