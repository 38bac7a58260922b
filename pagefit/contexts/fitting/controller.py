"""
Fit controller.

Decides when the solver runs. A fit cycle is an explicit state machine:

    IDLE -> MEASURING -> APPLYING -> IDLE

with an orthogonal `editing` flag that suppresses every transition while an
inline-editable field has focus.

Triggers (each debounced, then delayed two layout frames before the cycle):
- mount:              settle delay (0.1s) after neutral parameters are set
- content mutations:  0.5s debounce; attribute writes and typing inside an
                      editable region are ignored
- container resize:   0.2s debounce
- projects toggle:    0.3s, always re-solves
- blur:               0.3s grace period after editing ends
- explicit request:   next frames

Only one cycle runs at a time. Triggers arriving while a cycle is in flight
are coalesced into a single follow-up cycle.
"""

from enum import Enum
from typing import Callable, Iterable, List, Optional

from pagefit.contexts.fitting.logger import (
    _log_debug,
    _log_exception,
    log_cycle_skipped,
    log_fit_result,
    log_manual_density,
    log_state_change,
)
from pagefit.contexts.fitting.scheduling import AsyncioScheduler, Scheduler
from pagefit.contexts.fitting.solver import FitResult, FitSolver
from pagefit.contexts.rendering.applier import ScaleApplier
from pagefit.contexts.rendering.surface import (
    MUTATION_ATTRIBUTES,
    MUTATION_CHARACTER_DATA,
    MUTATION_CHILD_LIST,
    ContentSurface,
    Mutation,
)
from pagefit.contexts.scaling.config import FitConfig, default_fit_config
from pagefit.contexts.scaling.scale_model import (
    ScaleConfiguration,
    clamp_density,
    compute_scales,
    step_density,
)

ResultListener = Callable[[FitResult], None]

# Trigger names, used in logs
TRIGGER_MOUNT = "mount"
TRIGGER_MUTATION = "mutation"
TRIGGER_RESIZE = "resize"
TRIGGER_REQUEST = "request"
TRIGGER_PROJECTS = "projects-toggle"
TRIGGER_BLUR = "blur"
TRIGGER_AUTO = "auto-enabled"
TRIGGER_FOLLOW_UP = "follow-up"


class FitState(Enum):
    IDLE = "idle"
    MEASURING = "measuring"
    APPLYING = "applying"


def is_structural(mutation: Mutation) -> bool:
    """
    Whether a mutation should trigger a re-fit.

    Attribute writes (including the applier's own parameter writes) and any
    change inside an editable region are ignored.
    """
    if mutation.kind == MUTATION_ATTRIBUTES or mutation.inside_editable:
        return False
    return mutation.kind in (MUTATION_CHILD_LIST, MUTATION_CHARACTER_DATA)


class FitController:
    """
    Schedules fit cycles for one surface.

    Args:
        surface: Surface to keep fitted
        scheduler: Timer source (default: asyncio event loop)
        config: Fit configuration (default: from scale_bounds.yaml)
        solver: Fit solver (default: one built from config)
        projects_visible: Initial projects visibility

    Example:
        >>> scheduler = ManualScheduler()
        >>> controller = FitController(ResumeSurface(default_resume()), scheduler)
        >>> controller.mount()
        >>> _ = scheduler.run_all()
        >>> controller.last_result is not None
        True
    """

    def __init__(
        self,
        surface: ContentSurface,
        scheduler: Optional[Scheduler] = None,
        config: Optional[FitConfig] = None,
        solver: Optional[FitSolver] = None,
        projects_visible: bool = True,
    ):
        self.surface = surface
        self.scheduler = scheduler or AsyncioScheduler()
        self.config = config or default_fit_config()
        self.solver = solver or FitSolver(self.config)
        self.applier: ScaleApplier = self.solver.applier
        self.timing = self.config.controller

        self.projects_visible = projects_visible
        self.editing = False
        self.manual_density: Optional[float] = None
        self.last_result: Optional[FitResult] = None
        self.cycle_count = 0

        self._state = FitState.IDLE
        self._applied: Optional[ScaleConfiguration] = None
        self._in_flight = False
        self._follow_up = False
        self._timer = None
        self._pending_trigger: Optional[str] = None
        self._listeners: List[ResultListener] = []
        self._disconnect: Optional[Callable[[], None]] = None
        self._disposed = False

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> FitState:
        return self._state

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def has_pending(self) -> bool:
        """Whether a trigger is waiting on a timer."""
        return self._timer is not None

    @property
    def applied(self) -> Optional[ScaleConfiguration]:
        """Configuration most recently written to the surface."""
        return self._applied

    @property
    def auto_enabled(self) -> bool:
        return self.manual_density is None

    def _set_state(self, state: FitState) -> None:
        if state is not self._state:
            log_state_change(self._state, state)
            self._state = state

    def add_result_listener(self, listener: ResultListener) -> Callable[[], None]:
        """Register a callback for each applied FitResult; returns a remover."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------

    def mount(self) -> None:
        """Initialise parameters, observe mutations and schedule the first fit."""
        if self._disposed:
            return
        if not self.surface.is_mounted:
            log_cycle_skipped(TRIGGER_MOUNT, "surface not mounted")
            return

        self.applier.initialize(self.surface)
        if self._disconnect is None:
            self._disconnect = self.surface.observe(self.notify_mutations)
        self._schedule(self.timing.settle_delay_s, TRIGGER_MOUNT)

    def notify_mutations(self, mutations: Iterable[Mutation]) -> None:
        """Debounce a re-fit when any mutation is a structural content change."""
        if not any(is_structural(m) for m in mutations):
            return
        self._schedule(self.timing.mutation_debounce_s, TRIGGER_MUTATION)

    def notify_resize(self) -> None:
        self._schedule(self.timing.resize_debounce_s, TRIGGER_RESIZE)

    def request_fit(self) -> None:
        """Run a fit cycle on the next layout frames."""
        self._schedule(0.0, TRIGGER_REQUEST)

    def set_projects_visible(self, visible: bool) -> None:
        """
        Change projects visibility.

        The last result is invalid across this flag, so a change always
        re-solves (or, in manual mode, re-applies the manual density).
        """
        if visible == self.projects_visible:
            return
        self.projects_visible = visible
        self.last_result = None

        if self.manual_density is not None:
            self._apply_manual()
            return
        self._schedule(self.timing.projects_toggle_delay_s, TRIGGER_PROJECTS)

    def set_editing(self, editing: bool) -> None:
        """
        Focus (True) or blur (False) of an inline-editable field.

        Focus voids any scheduled fit. On blur the flag clears at once and
        only the re-fit waits out the grace period; a refocus inside the grace
        period sets the flag again, which cancels the timer, and the flag is
        re-checked before every cycle.
        """
        if editing:
            self.editing = True
            self._follow_up = False
            self._cancel_timer()
            _log_debug("Editing started; fitting suspended")
            return

        if not self.editing:
            return
        self.editing = False
        self._schedule(self.timing.blur_grace_s, TRIGGER_BLUR)

    # ------------------------------------------------------------------
    # Manual density
    # ------------------------------------------------------------------

    def set_manual_density(self, density: float) -> ScaleConfiguration:
        """Apply a user-chosen density directly and pause automatic fitting."""
        self.manual_density = clamp_density(density)
        self._follow_up = False
        self._cancel_timer()
        return self._apply_manual()

    def step_manual_density(self, delta: Optional[float] = None) -> ScaleConfiguration:
        """Nudge the manual density (default step 0.05), starting from the current one."""
        if delta is None:
            delta = self.timing.manual_step
        if self.manual_density is not None:
            base = self.manual_density
        elif self._applied is not None:
            base = self._applied.density
        else:
            base = self.solver.config.solver.baseline_density
        return self.set_manual_density(step_density(base, delta))

    def enable_auto(self) -> None:
        """Return to automatic fitting and re-solve."""
        if self.manual_density is None:
            return
        self.manual_density = None
        self._schedule(0.0, TRIGGER_AUTO)

    def _apply_manual(self) -> ScaleConfiguration:
        config = compute_scales(
            self.manual_density,
            self.projects_visible,
            bounds=self.config.bounds,
            boosts=self.config.boosts,
        )
        self.applier.apply(self.surface, config)
        self._applied = config
        log_manual_density(config.density)
        return config

    # ------------------------------------------------------------------
    # Cycle
    # ------------------------------------------------------------------

    def _schedule(self, delay: float, trigger: str) -> None:
        if self._disposed:
            return
        if self.editing:
            log_cycle_skipped(trigger, "editing")
            return
        if self.manual_density is not None:
            log_cycle_skipped(trigger, "manual density")
            return
        if self._in_flight:
            self._follow_up = True
            log_cycle_skipped(trigger, "cycle in flight; coalesced into follow-up")
            return

        self._cancel_timer()
        self._pending_trigger = trigger
        self._timer = self.scheduler.call_later(delay, self._on_debounced)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_debounced(self) -> None:
        self._timer = None
        if self.editing:
            log_cycle_skipped(self._pending_trigger, "editing")
            return
        self._timer = self.scheduler.call_later(self.timing.layout_settle_s, self._on_frames)

    def _on_frames(self) -> None:
        self._timer = None
        trigger = self._pending_trigger or TRIGGER_REQUEST
        self._pending_trigger = None

        # Editing may have started while layout was settling
        if self.editing:
            log_cycle_skipped(trigger, "editing")
            return
        if self.manual_density is not None:
            log_cycle_skipped(trigger, "manual density")
            return
        self.run_cycle(trigger)

    def run_cycle(self, trigger: str = TRIGGER_REQUEST) -> Optional[FitResult]:
        """
        Measure, solve and apply once, synchronously.

        Returns:
            The applied FitResult, or None when nothing was applied
        """
        if self._disposed:
            return None
        if self._in_flight:
            self._follow_up = True
            log_cycle_skipped(trigger, "cycle in flight; coalesced into follow-up")
            return None

        self._in_flight = True
        result = None
        try:
            self._set_state(FitState.MEASURING)
            result = self.solver.solve(self.surface, self._applied, self.projects_visible)
            if result is None:
                log_cycle_skipped(trigger, "surface not mounted")
                return None

            self._set_state(FitState.APPLYING)
            self.applier.apply(self.surface, result.config)
            self._applied = result.config
            self.last_result = result
            self.cycle_count += 1
            log_fit_result(result, trigger)

            for listener in list(self._listeners):
                listener(result)
        except Exception:
            _log_exception(f"Fit cycle ({trigger}) failed")
            result = None
        finally:
            self._in_flight = False
            self._set_state(FitState.IDLE)
            if self._follow_up:
                self._follow_up = False
                self._schedule(0.0, TRIGGER_FOLLOW_UP)

        return result

    def dispose(self) -> None:
        """Cancel timers and stop observing the surface."""
        self._cancel_timer()
        self._follow_up = False
        if self._disconnect is not None:
            self._disconnect()
            self._disconnect = None
        self._listeners.clear()
        self._disposed = True
