"""
Fitting Context

Responsibilities:
- Chooses the scale configuration for a measured surface (FitSolver)
- Schedules fit cycles on mount, content change, resize and visibility toggles
  (FitController)
- Manual density override
- Batch fit sessions on a virtual clock (fit_resume)

Owns: Fit decisions, cycle state machine, timers
Never: Writes surface parameters itself (delegates to ScaleApplier)
"""

from pagefit.contexts.fitting.controller import FitController, FitState, is_structural
from pagefit.contexts.fitting.logger import setup_fitting_logger
from pagefit.contexts.fitting.scheduling import AsyncioScheduler, ManualScheduler, Scheduler
from pagefit.contexts.fitting.session import FitSessionResult, fit_resume
from pagefit.contexts.fitting.solver import FitResult, FitSolver, FitStatus

__all__ = [
    "AsyncioScheduler",
    "FitController",
    "FitResult",
    "FitSessionResult",
    "FitSolver",
    "FitState",
    "FitStatus",
    "ManualScheduler",
    "Scheduler",
    "fit_resume",
    "is_structural",
    "setup_fitting_logger",
]
