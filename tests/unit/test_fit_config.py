"""Unit tests for scale_bounds.yaml loading and validation."""

import pytest

from pagefit.contexts.scaling import InvalidScaleBoundsError, compute_scales, load_fit_config
from pagefit.contexts.scaling.config import (
    DEFAULT_SCALE_BOUNDS_PATH,
    FACTOR_NAMES,
    fit_config_from_dict,
)

MINIMAL_FACTORS = {
    "header": {"min": 0.88, "max": 1.0},
    "body": {"min": 0.82, "max": 1.05},
    "main_spacing": {"min": 0.35, "max": 1.15},
    "sidebar_spacing": {"min": 0.9, "max": 1.1},
    "work_expansion": {"min": 0.35, "max": 3.0},
    "line_height": {"min": 1.15, "max": 1.8},
}


@pytest.mark.unit
def test_packaged_config_loads():
    config = load_fit_config(DEFAULT_SCALE_BOUNDS_PATH)

    assert config.bounds.body.min == 0.82
    assert config.bounds.work_expansion.max == 3.0
    assert config.page.height_px == pytest.approx(1122.52, abs=0.01)
    assert config.page.width_px == pytest.approx(793.7, abs=0.01)
    assert config.solver.fill_target(True) == 0.95
    assert config.solver.fill_target(False) == 0.98
    assert config.solver.range_min(True) == 0.90
    assert config.solver.range_min(False) == 0.92
    assert config.measurement.scroll_buffer_px == 20
    assert config.controller.mutation_debounce_s == 0.5
    assert config.controller.layout_settle_s == pytest.approx(0.032)


@pytest.mark.unit
def test_missing_file_raises():
    with pytest.raises(FileNotFoundError):
        load_fit_config("does/not/exist.yaml")


@pytest.mark.unit
def test_defaults_for_optional_sections():
    config = fit_config_from_dict({"factors": MINIMAL_FACTORS})

    assert config.solver.stable_floor == 0.90
    assert config.boosts.hidden_cap == 1.3
    assert config.controller.manual_step == 0.05


@pytest.mark.unit
def test_missing_factor_rejected():
    factors = {k: v for k, v in MINIMAL_FACTORS.items() if k != "line_height"}

    with pytest.raises(InvalidScaleBoundsError) as exc_info:
        fit_config_from_dict({"factors": factors})

    assert exc_info.value.key == "line_height"


@pytest.mark.unit
def test_inverted_range_rejected():
    factors = dict(MINIMAL_FACTORS, body={"min": 1.1, "max": 0.9})

    with pytest.raises(InvalidScaleBoundsError, match="above max"):
        fit_config_from_dict({"factors": factors})


@pytest.mark.unit
def test_non_numeric_factor_rejected():
    factors = dict(MINIMAL_FACTORS, header={"min": "small", "max": 1.0})

    with pytest.raises(InvalidScaleBoundsError) as exc_info:
        fit_config_from_dict({"factors": factors})

    assert exc_info.value.key == "factors.header"


@pytest.mark.unit
def test_fill_target_out_of_range_rejected():
    data = {"factors": MINIMAL_FACTORS, "solver": {"fill_target": {"projects_visible": 1.2}}}

    with pytest.raises(InvalidScaleBoundsError, match="Fill target"):
        fit_config_from_dict(data)


@pytest.mark.unit
def test_negative_delay_rejected():
    data = {"factors": MINIMAL_FACTORS, "controller": {"blur_grace_s": -1}}

    with pytest.raises(InvalidScaleBoundsError):
        fit_config_from_dict(data)


@pytest.mark.unit
def test_custom_yaml_drives_scale_model(tmp_path):
    """A custom bounds file changes the interpolation ranges."""
    lines = ["factors:"]
    for name in FACTOR_NAMES:
        lines.append(f"  {name}: {{min: 0.5, max: 1.5}}")
    config_file = tmp_path / "bounds.yaml"
    config_file.write_text("\n".join(lines) + "\n")

    config = load_fit_config(config_file)
    scales = compute_scales(0, bounds=config.bounds, boosts=config.boosts)

    assert scales.header_scale == 0.5
    assert scales.line_height == 0.5


@pytest.mark.unit
def test_error_message_names_config(tmp_path):
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("factors:\n  header: {min: 1, max: 2}\n")

    with pytest.raises(InvalidScaleBoundsError) as exc_info:
        load_fit_config(config_file)

    assert str(config_file) in str(exc_info.value)


@pytest.mark.unit
@pytest.mark.parametrize("section", ["controller", "page", "measurement", "work_expansion_boosts"])
def test_unknown_section_key_rejected(section):
    data = {"factors": MINIMAL_FACTORS, section: {"bogus": 1}}

    with pytest.raises(InvalidScaleBoundsError, match="bogus") as exc_info:
        fit_config_from_dict(data)

    assert exc_info.value.key == section


@pytest.mark.unit
def test_non_mapping_section_rejected():
    data = {"factors": MINIMAL_FACTORS, "controller": [0.5]}

    with pytest.raises(InvalidScaleBoundsError, match="must be a mapping"):
        fit_config_from_dict(data)


@pytest.mark.unit
@pytest.mark.parametrize("value", [0, -0.1, 1.2])
def test_range_min_out_of_range_rejected(value):
    data = {"factors": MINIMAL_FACTORS, "solver": {"range_min": {"projects_hidden": value}}}

    with pytest.raises(InvalidScaleBoundsError, match="Range minimum") as exc_info:
        fit_config_from_dict(data)

    assert exc_info.value.key == "solver.range_min"


@pytest.mark.unit
def test_stable_floor_out_of_range_rejected():
    data = {"factors": MINIMAL_FACTORS, "solver": {"stable_floor": 1.5}}

    with pytest.raises(InvalidScaleBoundsError, match="Stable floor"):
        fit_config_from_dict(data)


@pytest.mark.unit
def test_unknown_key_in_yaml_names_config(tmp_path):
    lines = ["factors:"]
    for name in FACTOR_NAMES:
        lines.append(f"  {name}: {{min: 0.5, max: 1.5}}")
    lines += ["controller:", "  bogus: 1"]
    config_file = tmp_path / "extra.yaml"
    config_file.write_text("\n".join(lines) + "\n")

    with pytest.raises(InvalidScaleBoundsError) as exc_info:
        load_fit_config(config_file)

    assert str(config_file) in str(exc_info.value)
