"""
Batch fit sessions.

Lays a resume out on a ResumeSurface and drives a FitController to a stable
configuration on a virtual clock, for the CLI and for offline checks.
Each session gets its own timestamped log directory under LOGS_PATH.
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from pagefit.contexts.content import ResumeData
from pagefit.contexts.fitting.controller import FitController
from pagefit.contexts.fitting.logger import _log_info, _log_warning, setup_fitting_logger
from pagefit.contexts.fitting.scheduling import ManualScheduler
from pagefit.contexts.fitting.solver import FitResult, FitStatus
from pagefit.contexts.rendering.applier import render_style_declarations
from pagefit.contexts.rendering.resume_surface import ResumeSurface
from pagefit.contexts.scaling.config import FitConfig, default_fit_config
from pagefit.contexts.scaling.scale_model import ScaleConfiguration
from pagefit.utils.timestamp import now

load_dotenv()

LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

# Extra request_fit() rounds after mount before giving up on a fixed point
MAX_SETTLE_ROUNDS = 5


@dataclass
class FitSessionResult:
    """
    Outcome of a batch fit session.

    Attributes:
        config: Configuration left on the surface
        result: Last solver result (None in manual mode)
        cycles: Fit cycles run
        overflow_px: Content extending past the page bottom at the final scale
        manual: Whether a manual density was used instead of the solver
        log_dir: Session log directory, or None when logging was disabled
    """

    config: ScaleConfiguration
    result: Optional[FitResult] = None
    cycles: int = 0
    overflow_px: float = 0.0
    manual: bool = False
    log_dir: Optional[Path] = None

    @property
    def fits_page(self) -> bool:
        return self.overflow_px <= 0

    @property
    def status(self) -> Optional[FitStatus]:
        return self.result.status if self.result else None

    def style_declarations(self) -> str:
        return render_style_declarations(self.config)


def fit_resume(
    resume: ResumeData,
    projects_visible: Optional[bool] = None,
    manual_density: Optional[float] = None,
    config: Optional[FitConfig] = None,
    write_logs: bool = True,
    console_level: str = "INFO",
) -> FitSessionResult:
    """
    Fit a resume to one page.

    Mounts the controller, runs every scheduled timer, then requests further
    cycles until the applied configuration stops changing.

    Args:
        resume: Content to fit
        projects_visible: Projects visibility (default: resume.show_projects)
        manual_density: Bypass the solver with this density
        config: Fit configuration (default: from scale_bounds.yaml)
        write_logs: Create a timestamped log directory and configure sinks
        console_level: Console log level when write_logs is True

    Returns:
        FitSessionResult
    """
    config = config or default_fit_config()
    if projects_visible is None:
        projects_visible = resume.show_projects
    elif projects_visible != resume.show_projects:
        resume = replace(resume, show_projects=projects_visible)

    log_dir = None
    if write_logs:
        log_dir = LOGS_PATH / f"fit_{now()}"
        setup_fitting_logger(
            log_dir,
            extra_provenance={"Resume": resume.personal_info.name or "(unnamed)"},
            console_level=console_level,
        )

    if resume.is_empty():
        _log_warning("Resume has no main-column content; expecting baseline underfill")

    surface = ResumeSurface(resume, page=config.page)
    scheduler = ManualScheduler()
    controller = FitController(
        surface, scheduler, config=config, projects_visible=projects_visible
    )

    try:
        controller.mount()
        scheduler.run_all()

        if manual_density is not None:
            controller.set_manual_density(manual_density)
        else:
            for _ in range(MAX_SETTLE_ROUNDS):
                previous = controller.applied
                controller.request_fit()
                scheduler.run_all()
                if controller.applied == previous:
                    break
            else:
                _log_warning(f"No fixed point after {MAX_SETTLE_ROUNDS} extra cycles")

        session = FitSessionResult(
            config=controller.applied or controller.applier.read_applied(surface),
            result=controller.last_result,
            cycles=controller.cycle_count,
            overflow_px=surface.overflow_px,
            manual=manual_density is not None,
            log_dir=log_dir,
        )
    finally:
        controller.dispose()

    _log_info(
        f"Session done: density {session.config.density:.2f}, {session.cycles} cycles, "
        f"overflow {session.overflow_px:.1f}px"
    )
    return session
