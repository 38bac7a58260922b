"""Unit tests for FitController scheduling and the fit state machine."""

import pytest

from pagefit.contexts.fitting import FitController, FitState, FitStatus, is_structural
from pagefit.contexts.rendering.surface import (
    MUTATION_ATTRIBUTES,
    MUTATION_CHARACTER_DATA,
    MUTATION_CHILD_LIST,
    PARAM_BODY_SCALE,
    PARAM_LINE_HEIGHT,
    Mutation,
)
from pagefit.contexts.scaling import compute_scales

STRUCTURAL = Mutation(MUTATION_CHILD_LIST, target="experience")


@pytest.fixture
def controller(surface, scheduler):
    controller = FitController(surface, scheduler)
    yield controller
    controller.dispose()


@pytest.fixture
def mounted(controller, scheduler):
    """Controller whose mount cycle has already run."""
    controller.mount()
    scheduler.run_all()
    assert controller.cycle_count == 1
    return controller


@pytest.mark.unit
def test_mount_initializes_then_fits_after_settle(controller, surface, scheduler):
    controller.mount()

    assert surface.get_parameter(PARAM_LINE_HEIGHT) == "1.45"
    assert controller.cycle_count == 0

    scheduler.advance(0.1)
    assert controller.cycle_count == 0  # layout frames still pending

    scheduler.advance(0.05)
    assert controller.cycle_count == 1
    assert controller.state is FitState.IDLE
    assert controller.last_result.status is FitStatus.UNDERFILL
    assert controller.applied == compute_scales(0.5)


@pytest.mark.unit
def test_mount_on_unmounted_surface_does_nothing(make_surface, scheduler):
    surface = make_surface(mounted=False)
    controller = FitController(surface, scheduler)

    controller.mount()

    assert scheduler.pending == 0
    assert surface.parameter_writes == []
    assert surface.observer_count == 0


@pytest.mark.unit
def test_mutation_burst_is_debounced_into_one_cycle(mounted, surface, scheduler):
    for _ in range(4):
        surface.emit(STRUCTURAL)
        scheduler.advance(0.2)

    assert mounted.cycle_count == 1

    scheduler.advance(0.6)
    assert mounted.cycle_count == 2


@pytest.mark.unit
def test_attribute_and_editable_mutations_are_ignored(mounted, surface, scheduler):
    surface.emit(Mutation(MUTATION_ATTRIBUTES, target=PARAM_BODY_SCALE))
    surface.emit(Mutation(MUTATION_CHARACTER_DATA, target="bullet", inside_editable=True))
    surface.emit(Mutation(MUTATION_CHILD_LIST, target="bullet", inside_editable=True))

    assert scheduler.pending == 0
    scheduler.run_all()
    assert mounted.cycle_count == 1


@pytest.mark.unit
@pytest.mark.parametrize(
    "mutation, expected",
    [
        (Mutation(MUTATION_CHILD_LIST), True),
        (Mutation(MUTATION_CHARACTER_DATA), True),
        (Mutation(MUTATION_ATTRIBUTES), False),
        (Mutation(MUTATION_CHARACTER_DATA, inside_editable=True), False),
        (Mutation("style"), False),
    ],
)
def test_is_structural(mutation, expected):
    assert is_structural(mutation) is expected


@pytest.mark.unit
def test_applier_writes_do_not_retrigger(mounted, surface, scheduler):
    """Parameters written by a cycle never schedule another cycle."""
    surface.content_height = 2000.0
    mounted.request_fit()
    scheduler.run_all()

    assert mounted.cycle_count == 2
    assert scheduler.pending == 0


@pytest.mark.unit
def test_resize_is_debounced(mounted, scheduler):
    mounted.notify_resize()
    scheduler.advance(0.1)
    mounted.notify_resize()
    scheduler.advance(0.2)
    assert mounted.cycle_count == 1

    scheduler.advance(0.05)
    assert mounted.cycle_count == 2


@pytest.mark.unit
def test_editing_suppresses_and_blur_resumes(mounted, surface, scheduler):
    mounted.set_editing(True)
    surface.emit(STRUCTURAL)
    mounted.notify_resize()
    mounted.request_fit()
    scheduler.run_all()

    assert mounted.cycle_count == 1

    mounted.set_editing(False)
    scheduler.advance(0.3)
    assert mounted.cycle_count == 1  # layout frames pending

    scheduler.advance(0.05)
    assert mounted.cycle_count == 2


@pytest.mark.unit
def test_focus_voids_pending_cycle(mounted, surface, scheduler):
    surface.emit(STRUCTURAL)
    scheduler.advance(0.51)  # debounce elapsed, waiting on layout frames

    mounted.set_editing(True)
    scheduler.run_all()

    assert mounted.cycle_count == 1


@pytest.mark.unit
def test_refocus_during_blur_grace(mounted, scheduler):
    mounted.set_editing(True)
    mounted.set_editing(False)
    scheduler.advance(0.1)
    mounted.set_editing(True)
    scheduler.run_all()

    assert mounted.cycle_count == 1


@pytest.mark.unit
def test_projects_toggle_forces_resolve(mounted, surface, scheduler, target_height):
    mounted.set_projects_visible(False)

    assert mounted.last_result is None
    scheduler.run_all()

    assert mounted.cycle_count == 2
    assert mounted.last_result.target_height == pytest.approx(target_height(False))
    assert mounted.applied == compute_scales(0.5, False)


@pytest.mark.unit
def test_unchanged_projects_flag_is_noop(mounted, scheduler):
    mounted.set_projects_visible(True)

    assert scheduler.pending == 0


@pytest.mark.unit
def test_trigger_during_cycle_coalesces_into_one_follow_up(mounted, scheduler):
    calls = []

    def listener(result):
        calls.append(mounted.state)
        if len(calls) == 1:
            # Several triggers while the first cycle is in flight
            mounted.request_fit()
            mounted.notify_resize()
            assert mounted.run_cycle("nested") is None

    mounted.add_result_listener(listener)
    mounted.request_fit()
    scheduler.run_all()

    assert mounted.cycle_count == 3  # mount, request, one follow-up
    assert calls == [FitState.APPLYING, FitState.APPLYING]
    assert not mounted.in_flight


@pytest.mark.unit
def test_cycle_failure_clears_in_flight(mounted, surface, scheduler):
    surface.fail_on_region = True

    assert mounted.run_cycle() is None
    assert not mounted.in_flight
    assert mounted.state is FitState.IDLE
    assert mounted.cycle_count == 1

    surface.fail_on_region = False
    mounted.request_fit()
    scheduler.run_all()
    assert mounted.cycle_count == 2


@pytest.mark.unit
def test_listener_error_does_not_block_pipeline(mounted, scheduler):
    def broken(result):
        raise ValueError("listener bug")

    remove = mounted.add_result_listener(broken)
    mounted.request_fit()
    scheduler.run_all()
    remove()

    assert not mounted.in_flight
    mounted.request_fit()
    scheduler.run_all()
    assert mounted.cycle_count == 3


@pytest.mark.unit
def test_manual_density_bypasses_solver(mounted, surface, scheduler):
    config = mounted.set_manual_density(0.3)

    assert config == compute_scales(0.3)
    assert mounted.applied == config
    assert surface.get_parameter(PARAM_BODY_SCALE) == f"{config.body_scale:.6g}"
    assert not mounted.auto_enabled

    mounted.request_fit()
    surface.emit(STRUCTURAL)
    assert scheduler.pending == 0


@pytest.mark.unit
def test_manual_stepping(mounted):
    mounted.set_manual_density(0.5)

    assert mounted.step_manual_density().density == pytest.approx(0.55)
    assert mounted.step_manual_density(-0.15).density == pytest.approx(0.4)
    assert mounted.step_manual_density(-5).density == 0.0
    assert mounted.step_manual_density(5).density == 1.0


@pytest.mark.unit
def test_manual_mode_reapplies_on_projects_toggle(mounted):
    mounted.set_manual_density(0.9)
    mounted.set_projects_visible(False)

    assert mounted.applied == compute_scales(0.9, False)


@pytest.mark.unit
def test_enable_auto_resolves(mounted, scheduler):
    mounted.set_manual_density(1.0)
    mounted.enable_auto()
    scheduler.run_all()

    assert mounted.auto_enabled
    assert mounted.cycle_count == 2
    assert mounted.applied == compute_scales(0.5)


@pytest.mark.unit
def test_dispose_cancels_and_disconnects(mounted, surface, scheduler):
    surface.emit(STRUCTURAL)
    mounted.dispose()

    assert surface.observer_count == 0
    assert scheduler.pending == 0
    mounted.request_fit()
    assert scheduler.pending == 0


@pytest.mark.unit
def test_result_listener_receives_results(controller, scheduler):
    results = []
    remove = controller.add_result_listener(results.append)

    controller.mount()
    scheduler.run_all()
    remove()
    controller.request_fit()
    scheduler.run_all()

    assert len(results) == 1
    assert results[0].status is FitStatus.UNDERFILL


@pytest.mark.unit
def test_blur_clears_flag_immediately_and_delays_refit(mounted, scheduler):
    mounted.set_editing(True)
    mounted.set_editing(False)

    assert not mounted.editing
    assert mounted.has_pending
    scheduler.advance(0.2)
    assert mounted.cycle_count == 1

    scheduler.run_all()
    assert mounted.cycle_count == 2
