"""Shared fixtures: a scriptable content surface and a virtual-clock scheduler."""

from typing import Callable, List, Optional, Union

import pytest

from pagefit.contexts.content import default_resume
from pagefit.contexts.fitting.scheduling import ManualScheduler
from pagefit.contexts.rendering.surface import (
    MAIN_REGION,
    MUTATION_ATTRIBUTES,
    NEUTRAL_PARAMETERS,
    OVERRIDE_HEIGHT,
    OVERRIDE_OVERFLOW,
    ROLE_PROJECT,
    ROLE_SPACER,
    SIDEBAR_REGION,
    ContentSurface,
    Mutation,
    NodeBox,
    RegionGeometry,
)
from pagefit.contexts.scaling.config import default_fit_config

HeightSpec = Union[float, Callable[["FakeSurface"], float]]


class FakeSurface(ContentSurface):
    """
    Content surface with scripted geometry.

    The main column holds one content node of `content_height` (a number, or a
    callable of the surface so height can depend on the applied parameters),
    followed by an optional project node and a tall spacer. All heights are in
    the main content frame.
    """

    def __init__(
        self,
        content_height: HeightSpec = 500.0,
        sidebar_height: float = 300.0,
        project_height: float = 0.0,
        padding_top: float = 45.0,
        padding_bottom: float = 83.0,
        mounted: bool = True,
    ):
        self.content_height = content_height
        self.sidebar_height = sidebar_height
        self.project_height = project_height
        self.padding_top = padding_top
        self.padding_bottom = padding_bottom
        self.mounted = mounted
        self.scroll_override: Optional[float] = None
        self.fail_on_region = False

        self._parameters = {}
        self._overrides = {OVERRIDE_HEIGHT: "297mm", OVERRIDE_OVERFLOW: "hidden"}
        self._observers = []
        self.parameter_writes: List[tuple] = []
        self.override_log: List[tuple] = []
        self.reflow_count = 0

    # Scripting helpers

    def param(self, name: str) -> float:
        raw = self._parameters.get(name)
        return float(raw) if raw is not None else NEUTRAL_PARAMETERS[name]

    def height(self) -> float:
        height = self.content_height
        return height(self) if callable(height) else height

    def emit(self, *mutations: Mutation) -> None:
        for callback in list(self._observers):
            callback(list(mutations))

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    # ContentSurface

    @property
    def is_mounted(self) -> bool:
        return self.mounted

    def get_parameter(self, name):
        return self._parameters.get(name)

    def set_parameter(self, name, value):
        self._parameters[name] = value
        self.parameter_writes.append((name, value))
        self.emit(Mutation(MUTATION_ATTRIBUTES, target=name))

    def get_override(self, name):
        return self._overrides.get(name)

    def set_override(self, name, value):
        self.override_log.append((name, value))
        if value is None:
            self._overrides.pop(name, None)
        else:
            self._overrides[name] = value

    def reflow(self):
        self.reflow_count += 1

    def region(self, name):
        if self.fail_on_region:
            raise RuntimeError("layout engine failure")
        content_top = self.padding_top
        if name == MAIN_REGION:
            height = self.height()
            nodes = [NodeBox("content", content_top, content_top + height)]
            if self.project_height:
                nodes.append(
                    NodeBox(
                        "project-card",
                        content_top + height,
                        content_top + height + self.project_height,
                        roles=frozenset({ROLE_PROJECT}),
                    )
                )
            nodes.append(
                NodeBox("main-content-spacer", content_top, 5000.0, roles=frozenset({ROLE_SPACER}))
            )
            return RegionGeometry(
                MAIN_REGION,
                top=0.0,
                bottom=1122.52,
                padding_top=self.padding_top,
                padding_bottom=self.padding_bottom,
                nodes=nodes,
            )
        if name == SIDEBAR_REGION:
            return RegionGeometry(
                SIDEBAR_REGION,
                top=0.0,
                bottom=1122.52,
                nodes=[NodeBox("sidebar-group", content_top, content_top + self.sidebar_height)],
            )
        return None

    @property
    def scroll_height(self):
        if self.scroll_override is not None:
            return self.scroll_override
        return self.padding_top + self.height() + self.project_height

    def observe(self, callback):
        self._observers.append(callback)

        def disconnect():
            if callback in self._observers:
                self._observers.remove(callback)

        return disconnect


@pytest.fixture
def fit_config():
    return default_fit_config()


@pytest.fixture
def target_height(fit_config):
    """Fill target height (px) for the fake surface paddings."""

    def _target(projects_visible: bool = True, padding_top: float = 45.0, padding_bottom: float = 83.0):
        usable = fit_config.page.height_px - padding_top - padding_bottom
        return usable * fit_config.solver.fill_target(projects_visible)

    return _target


@pytest.fixture
def make_surface():
    """Factory for FakeSurface instances."""
    return FakeSurface


@pytest.fixture
def surface():
    return FakeSurface()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def sample_resume():
    return default_resume()
