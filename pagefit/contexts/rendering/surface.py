"""
Content surface abstraction.

A ContentSurface is the rendered resume owned by the presentation layer. The
fit engine treats it as an opaque measurable object:

- Named style parameters (e.g. --fit-header-scale) consumed by its layout rules
- Inline overrides for `height` and `overflow` used during measurement
- A synchronous reflow() that recomputes geometry after changes
- Per-region geometry with node boxes tagged by role
- Total scroll extent

Mutation records describe content changes observed on the surface, so the fit
controller can tell structural edits from typing inside an editable field.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, List, Optional

# Node roles
ROLE_SPACER = "spacer"  # flexible layout-only node, absorbs leftover space
ROLE_PROJECT = "project"  # belongs to the projects section
ROLE_EDITABLE = "editable"  # inline-editable content

# Region names
MAIN_REGION = "main"
SIDEBAR_REGION = "sidebar"

# Style parameters consumed by the surface's layout rules
PARAM_HEADER_SCALE = "--fit-header-scale"
PARAM_BODY_SCALE = "--fit-content-font-scale"
PARAM_MAIN_SPACING_SCALE = "--fit-main-spacing-scale"
PARAM_SIDEBAR_SPACING_SCALE = "--fit-sidebar-spacing-scale"
PARAM_WORK_EXPANSION_SCALE = "--fit-work-expansion-scale"
PARAM_LINE_HEIGHT = "--fit-line-height"

# Values the layout rules fall back to when a parameter is unset
NEUTRAL_PARAMETERS = {
    PARAM_HEADER_SCALE: 1.0,
    PARAM_BODY_SCALE: 1.0,
    PARAM_MAIN_SPACING_SCALE: 1.0,
    PARAM_SIDEBAR_SPACING_SCALE: 1.0,
    PARAM_WORK_EXPANSION_SCALE: 1.0,
    PARAM_LINE_HEIGHT: 1.45,
}

# Inline override names and values
OVERRIDE_HEIGHT = "height"
OVERRIDE_OVERFLOW = "overflow"
NATURAL_HEIGHT = "auto"
VISIBLE_OVERFLOW = "visible"

# Mutation kinds
MUTATION_CHILD_LIST = "child_list"
MUTATION_CHARACTER_DATA = "character_data"
MUTATION_ATTRIBUTES = "attributes"


@dataclass(frozen=True)
class NodeBox:
    """
    Bounding box of one rendered node, in surface pixels from the surface top.

    Attributes:
        name: Node identifier for diagnostics (e.g. "job-card:exp-1")
        top: Top edge
        bottom: Bottom edge (border box)
        margin_bottom: Bottom margin below the border box
        roles: Role tags (ROLE_SPACER, ROLE_PROJECT, ROLE_EDITABLE)
    """

    name: str
    top: float
    bottom: float
    margin_bottom: float = 0.0
    roles: FrozenSet[str] = frozenset()

    @property
    def extent(self) -> float:
        """Lowest point this node occupies, margin included."""
        return self.bottom + self.margin_bottom

    def has_role(self, role: str) -> bool:
        return role in self.roles


@dataclass
class RegionGeometry:
    """Geometry of a layout region (main column or sidebar)."""

    name: str
    top: float
    bottom: float
    padding_top: float = 0.0
    padding_bottom: float = 0.0
    nodes: List[NodeBox] = field(default_factory=list)

    @property
    def content_top(self) -> float:
        return self.top + self.padding_top


@dataclass(frozen=True)
class Mutation:
    """
    One observed change on the surface.

    Attributes:
        kind: MUTATION_CHILD_LIST, MUTATION_CHARACTER_DATA or MUTATION_ATTRIBUTES
        target: Identifier of the changed node
        inside_editable: True when the target is (inside) an inline-editable region
    """

    kind: str
    target: str = ""
    inside_editable: bool = False


MutationCallback = Callable[[List[Mutation]], None]


class ContentSurface(ABC):
    """Rendered resume surface as seen by the fit engine."""

    @property
    @abstractmethod
    def is_mounted(self) -> bool:
        """False until the presentation layer has rendered the surface."""

    @abstractmethod
    def get_parameter(self, name: str) -> Optional[str]:
        """Current value of a named style parameter, or None when unset."""

    @abstractmethod
    def set_parameter(self, name: str, value: str) -> None:
        """Set a named style parameter."""

    @abstractmethod
    def get_override(self, name: str) -> Optional[str]:
        """Current inline override (OVERRIDE_HEIGHT / OVERRIDE_OVERFLOW), or None."""

    @abstractmethod
    def set_override(self, name: str, value: Optional[str]) -> None:
        """Set an inline override; None removes it."""

    @abstractmethod
    def reflow(self) -> None:
        """Recompute layout synchronously."""

    @abstractmethod
    def region(self, name: str) -> Optional[RegionGeometry]:
        """Geometry of a region after the last reflow, or None if absent."""

    @property
    @abstractmethod
    def scroll_height(self) -> float:
        """Total natural extent of the surface content."""

    def parameters(self, names) -> Dict[str, Optional[str]]:
        """Snapshot of several parameters."""
        return {name: self.get_parameter(name) for name in names}

    def observe(self, callback: MutationCallback) -> Callable[[], None]:
        """
        Register a mutation observer.

        Returns a function that disconnects the observer. Surfaces that never
        report mutations can keep this default.
        """
        return lambda: None
