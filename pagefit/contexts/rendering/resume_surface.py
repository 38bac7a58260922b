"""
In-memory resume surface.

Lays out a ResumeData tree on a single A4 page using the editor's style rules
(two-column grid, fixed-width sidebar, main column with flexible bottom spacer)
driven by the named fit parameters. Geometry is computed synchronously on
reflow(), so the fit engine can measure it exactly like a browser surface.

Layout model (pixels at 96 DPI):
- Block flow, top to bottom; margins add up (no margin collapsing)
- Text wraps on word boundaries using an average glyph advance
- With the page height clamped (`height: 297mm`), the bottom spacers grow to
  absorb leftover space; with `height: auto` they collapse to zero
"""

import textwrap
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional

from pagefit.contexts.content.resume_data_structure import ResumeData
from pagefit.contexts.rendering.surface import (
    MAIN_REGION,
    MUTATION_ATTRIBUTES,
    MUTATION_CHARACTER_DATA,
    MUTATION_CHILD_LIST,
    NATURAL_HEIGHT,
    NEUTRAL_PARAMETERS,
    OVERRIDE_HEIGHT,
    OVERRIDE_OVERFLOW,
    PARAM_BODY_SCALE,
    PARAM_HEADER_SCALE,
    PARAM_LINE_HEIGHT,
    PARAM_MAIN_SPACING_SCALE,
    PARAM_SIDEBAR_SPACING_SCALE,
    PARAM_WORK_EXPANSION_SCALE,
    ROLE_EDITABLE,
    ROLE_PROJECT,
    ROLE_SPACER,
    SIDEBAR_REGION,
    ContentSurface,
    Mutation,
    MutationCallback,
    NodeBox,
    RegionGeometry,
)
from pagefit.contexts.scaling.config import PageGeometry, default_fit_config

# Base sizes from the editor stylesheet (px)
PAGE_PADDING = 45.0
BOTTOM_MARGIN_TARGET = 83.0  # 22mm
SIDEBAR_WIDTH = 220.0
SIDEBAR_SIDE_PADDING = 28.0
MAIN_LEFT_PADDING = 45.0
MAIN_RIGHT_PADDING = 75.0
BULLET_INDENT = 18.0
JOB_DATE_MIN_WIDTH = 120.0

EDITABLE = frozenset({ROLE_EDITABLE})
PROJECT = frozenset({ROLE_PROJECT})
PROJECT_EDITABLE = frozenset({ROLE_PROJECT, ROLE_EDITABLE})
SPACER = frozenset({ROLE_SPACER})


@dataclass(frozen=True)
class TextMetrics:
    """
    Approximate text metrics for line wrapping.

    Attributes:
        char_width_em: Average glyph advance as a fraction of the font size
    """

    char_width_em: float = 0.5

    def line_count(self, text: str, font_px: float, width_px: float) -> int:
        """Number of wrapped lines; empty text renders no lines."""
        if not text or not text.strip():
            return 0
        chars_per_line = max(1, int(width_px // max(font_px * self.char_width_em, 1e-6)))
        return max(1, len(textwrap.wrap(text, chars_per_line)))


class _Flow:
    """Block-flow cursor collecting node boxes for one region."""

    def __init__(self, start_y: float):
        self.y = start_y
        self.nodes: List[NodeBox] = []

    def block(
        self,
        name: str,
        height: float,
        margin_top: float = 0.0,
        margin_bottom: float = 0.0,
        roles: FrozenSet[str] = frozenset(),
    ) -> NodeBox:
        self.y += margin_top
        box = NodeBox(name, self.y, self.y + max(height, 0.0), margin_bottom, roles)
        self.nodes.append(box)
        self.y = box.extent
        return box

    def container(
        self,
        name: str,
        start_y: float,
        margin_bottom: float = 0.0,
        roles: FrozenSet[str] = frozenset(),
    ) -> NodeBox:
        """Wrap everything placed since start_y in a container box."""
        box = NodeBox(name, start_y, self.y, margin_bottom, roles)
        self.nodes.append(box)
        self.y = box.extent
        return box


class ResumeSurface(ContentSurface):
    """
    Resume rendered on a single page, measurable and parameterised.

    Args:
        resume: Content tree to lay out
        page: Page geometry (default: from scale_bounds.yaml)
        sidebar_width: Sidebar column width in px
        metrics: Text metrics used for wrapping
        mounted: Whether the surface starts mounted

    Example:
        >>> surface = ResumeSurface(default_resume())
        >>> surface.region("main").padding_top
        45.0
    """

    def __init__(
        self,
        resume: ResumeData,
        page: Optional[PageGeometry] = None,
        sidebar_width: float = SIDEBAR_WIDTH,
        metrics: Optional[TextMetrics] = None,
        mounted: bool = True,
    ):
        self._resume = resume
        self._page = page or default_fit_config().page
        self.sidebar_width = sidebar_width
        self.metrics = metrics or TextMetrics()
        self._mounted = mounted
        self._parameters: Dict[str, str] = {}
        self._overrides: Dict[str, str] = {
            OVERRIDE_HEIGHT: f"{self._page.height_mm:g}mm",
            OVERRIDE_OVERFLOW: "hidden",
        }
        self._observers: List[MutationCallback] = []
        self._regions: Dict[str, RegionGeometry] = {}
        self._scroll_height = 0.0
        self._natural_height = 0.0
        self._natural_main_bottom = 0.0
        self._natural_sidebar_bottom = 0.0
        self.reflow_count = 0
        self._dirty = True
        if mounted:
            self.reflow()

    # ------------------------------------------------------------------
    # Lifecycle and content
    # ------------------------------------------------------------------

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    def mount(self) -> None:
        self._mounted = True
        self.reflow()

    def unmount(self) -> None:
        self._mounted = False
        self._regions = {}
        self._dirty = True

    @property
    def resume(self) -> ResumeData:
        return self._resume

    def set_resume(self, resume: ResumeData) -> None:
        """Replace the content tree (a structural change) and re-render."""
        self._resume = resume
        self.reflow()
        self._emit([Mutation(MUTATION_CHILD_LIST, target="resume")])

    def type_text(self, target: str) -> None:
        """Record keystrokes inside an inline-editable node (content committed on blur)."""
        self._emit([Mutation(MUTATION_CHARACTER_DATA, target=target, inside_editable=True)])

    def observe(self, callback: MutationCallback):
        self._observers.append(callback)

        def disconnect() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return disconnect

    def _emit(self, mutations: List[Mutation]) -> None:
        for callback in list(self._observers):
            callback(mutations)

    # ------------------------------------------------------------------
    # Parameters and overrides
    # ------------------------------------------------------------------

    def get_parameter(self, name: str) -> Optional[str]:
        return self._parameters.get(name)

    def set_parameter(self, name: str, value: str) -> None:
        if self._parameters.get(name) == value:
            return
        self._parameters[name] = value
        self._dirty = True
        self._emit([Mutation(MUTATION_ATTRIBUTES, target=name)])

    def get_override(self, name: str) -> Optional[str]:
        return self._overrides.get(name)

    def set_override(self, name: str, value: Optional[str]) -> None:
        if value is None:
            self._overrides.pop(name, None)
        else:
            self._overrides[name] = value
        self._dirty = True

    def _param(self, name: str) -> float:
        raw = self._parameters.get(name)
        try:
            return float(raw) if raw is not None else NEUTRAL_PARAMETERS[name]
        except ValueError:
            return NEUTRAL_PARAMETERS[name]

    @property
    def height_clamped(self) -> bool:
        return self._overrides.get(OVERRIDE_HEIGHT, NATURAL_HEIGHT) != NATURAL_HEIGHT

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def region(self, name: str) -> Optional[RegionGeometry]:
        if not self._mounted:
            return None
        self._ensure_layout()
        return self._regions.get(name)

    @property
    def scroll_height(self) -> float:
        self._ensure_layout()
        return self._scroll_height

    @property
    def overflow_px(self) -> float:
        """How far the natural content extends past the page bottom (0 when it fits)."""
        self._ensure_layout()
        return max(0.0, self._natural_height - self._page.height_px)

    def _ensure_layout(self) -> None:
        """Layout is recomputed lazily when geometry is read after a change."""
        if self._dirty:
            self.reflow()

    def reflow(self) -> None:
        if not self._mounted:
            return
        self.reflow_count += 1
        self._dirty = False

        main = self._layout_main()
        sidebar = self._layout_sidebar()
        self._regions = {MAIN_REGION: main, SIDEBAR_REGION: sidebar}

        self._natural_height = max(self._natural_main_bottom, self._natural_sidebar_bottom)
        if self.height_clamped:
            self._scroll_height = max(self._page.height_px, self._natural_height)
        else:
            self._scroll_height = self._natural_height

    def _fill_spacer(self, flow: _Flow, name: str, padding_bottom: float) -> None:
        """Flexible spacer: grows to the page bottom only when height is clamped."""
        slack = 0.0
        if self.height_clamped:
            slack = max(0.0, self._page.height_px - padding_bottom - flow.y)
        flow.block(name, slack, roles=SPACER)

    def _layout_main(self) -> RegionGeometry:
        resume = self._resume
        hs = self._param(PARAM_HEADER_SCALE)
        bs = self._param(PARAM_BODY_SCALE)
        ms = self._param(PARAM_MAIN_SPACING_SCALE)
        we = self._param(PARAM_WORK_EXPANSION_SCALE)
        lh = self._param(PARAM_LINE_HEIGHT)
        lines = self.metrics.line_count

        padding_top = PAGE_PADDING * ms
        padding_bottom = BOTTOM_MARGIN_TARGET
        width = (
            self._page.width_px
            - self.sidebar_width
            - MAIN_LEFT_PADDING * ms
            - MAIN_RIGHT_PADDING * ms
        )
        body_px = 14.0 * bs
        bullet_width = width - BULLET_INDENT * bs

        flow = _Flow(padding_top)

        # Header: name and summary
        header_start = flow.y + (-8.0 * ms)
        flow.y = header_start
        name_px = 38.0 * hs
        flow.block(
            "name",
            lines(resume.personal_info.name, name_px, width) * name_px,
            margin_bottom=12.0 * ms,
            roles=EDITABLE,
        )
        flow.block(
            "summary",
            lines(resume.personal_info.summary, body_px, width * 0.95) * body_px * 1.35,
            margin_top=max(12.0, 16.0 * ms),
            roles=EDITABLE,
        )
        flow.container("header", header_start)
        flow.block("section-spacer", 0.0, roles=SPACER)

        rendered = 0
        for section_type in resume.section_order:
            if section_type == "experience" and resume.experience:
                first = rendered == 0
                section_start = flow.y
                header_px = 16.0 * hs
                flow.block(
                    "section-header:experience",
                    header_px * lh + (0.0 if first else 4.0 * ms),
                    margin_top=0.0 if first else 28.0 * we,
                    margin_bottom=12.0 * we,
                    roles=EDITABLE,
                )
                for job in resume.experience:
                    card_start = flow.y
                    company_px = 15.0 * hs
                    flow.block(
                        f"company:{job.id}",
                        max(1, lines(job.company, company_px, width)) * company_px * lh,
                        margin_bottom=8.0 * we,
                        roles=EDITABLE,
                    )
                    title_width = width - JOB_DATE_MIN_WIDTH * bs
                    flow.block(
                        f"role-header:{job.id}",
                        max(1, lines(job.title, body_px, title_width)) * body_px * 1.2,
                        margin_bottom=10.0 * we,
                        roles=EDITABLE,
                    )
                    for i, bullet in enumerate(job.bullets):
                        flow.block(
                            f"bullet:{job.id}:{i}",
                            lines(bullet, body_px, bullet_width) * body_px * 1.4,
                            margin_bottom=12.0 * we,
                            roles=EDITABLE,
                        )
                    flow.container(f"job-card:{job.id}", card_start, margin_bottom=20.0 * we)
                flow.container("resume-section:experience", section_start)
                rendered += 1

            elif section_type == "projects" and resume.show_projects and resume.projects:
                first = rendered == 0
                section_start = flow.y
                header_px = 16.0 * hs
                flow.block(
                    "section-header:projects",
                    header_px * lh + 4.0 * ms,
                    margin_top=0.0 if first else max(18.0, 28.0 * ms),
                    margin_bottom=max(10.0, 12.0 * ms),
                    roles=PROJECT_EDITABLE,
                )
                for project in resume.projects:
                    card_start = flow.y
                    flow.block(
                        f"project-title:{project.id}",
                        max(1, lines(project.title, body_px, width)) * body_px * lh,
                        margin_bottom=6.0 * ms,
                        roles=PROJECT_EDITABLE,
                    )
                    description = project.description
                    if project.link:
                        description = f"{description} {project.link_text or project.link}"
                    flow.block(
                        f"project-description:{project.id}",
                        lines(description, body_px, bullet_width) * body_px * 1.4,
                        margin_bottom=6.0 * ms,
                        roles=PROJECT_EDITABLE,
                    )
                    flow.container(
                        f"project-card:{project.id}",
                        card_start,
                        margin_bottom=max(12.0, 16.0 * ms),
                        roles=PROJECT,
                    )
                flow.container("resume-section:projects", section_start, roles=PROJECT)
                rendered += 1

        self._natural_main_bottom = flow.y + padding_bottom
        self._fill_spacer(flow, "main-content-spacer", padding_bottom)

        bottom = self._page.height_px if self.height_clamped else self._natural_main_bottom
        return RegionGeometry(
            name=MAIN_REGION,
            top=0.0,
            bottom=bottom,
            padding_top=padding_top,
            padding_bottom=padding_bottom,
            nodes=flow.nodes,
        )

    def _sidebar_title(self, flow: _Flow, name: str, hs: float, ss: float, lh: float) -> None:
        flow.block(
            f"sidebar-title:{name}",
            13.0 * hs * lh + 6.0 * ss + 2.0 * hs,
            margin_bottom=18.0 * ss,
            roles=EDITABLE,
        )

    def _layout_sidebar(self) -> RegionGeometry:
        resume = self._resume
        hs = self._param(PARAM_HEADER_SCALE)
        bs = self._param(PARAM_BODY_SCALE)
        ss = self._param(PARAM_SIDEBAR_SPACING_SCALE)
        lh = self._param(PARAM_LINE_HEIGHT)
        lines = self.metrics.line_count

        padding = PAGE_PADDING * ss
        width = self.sidebar_width - 2 * SIDEBAR_SIDE_PADDING * ss
        value_px = 13.0 * bs
        group_gap = max(30.0, 38.0 * ss)

        flow = _Flow(padding)
        groups = []

        def close_group(name: str, start: float) -> None:
            groups.append(flow.container(f"sidebar-group:{name}", start, margin_bottom=group_gap))

        start = flow.y
        self._sidebar_title(flow, "contact", hs, ss, lh)
        for field_name in resume.contact_order:
            value = getattr(resume.contact, field_name, "")
            if not value:
                continue
            item_start = flow.y
            flow.block(
                f"contact-label:{field_name}",
                10.0 * bs * lh,
                margin_bottom=2.0 * ss,
            )
            # Contact values never wrap
            flow.block(f"contact-value:{field_name}", value_px * lh, roles=EDITABLE)
            flow.container(f"contact-item:{field_name}", item_start, margin_bottom=14.0)
        close_group("contact", start)

        for name, items in (("expertise", resume.expertise), ("tech-stack", resume.tech_stack)):
            start = flow.y
            self._sidebar_title(flow, name, hs, ss, lh)
            for i, item in enumerate(items):
                flow.block(
                    f"skill:{name}:{i}",
                    lines(item, value_px, width) * value_px * lh,
                    margin_bottom=10.0,
                    roles=EDITABLE,
                )
            close_group(name, start)

        if resume.education:
            start = flow.y
            self._sidebar_title(flow, "education", hs, ss, lh)
            for edu in resume.education:
                item_start = flow.y
                flow.block(
                    f"degree:{edu.id}", lines(edu.degree, value_px, width) * value_px * lh
                )
                flow.block(
                    f"institution:{edu.id}",
                    lines(edu.institution, value_px, width) * value_px * lh,
                )
                flow.block(f"education-dates:{edu.id}", 11.0 * lh, margin_top=2.0)
                flow.container(f"education-item:{edu.id}", item_start, margin_bottom=14.0)
            close_group("education", start)

        # .sidebar-group:last-child has no bottom margin
        if groups:
            flow.y -= group_gap
            last = groups[-1]
            flow.nodes[flow.nodes.index(last)] = NodeBox(
                last.name, last.top, last.bottom, 0.0, last.roles
            )

        self._natural_sidebar_bottom = flow.y + padding
        self._fill_spacer(flow, "sidebar-spacer", padding)

        bottom = self._page.height_px if self.height_clamped else self._natural_sidebar_bottom
        return RegionGeometry(
            name=SIDEBAR_REGION,
            top=0.0,
            bottom=bottom,
            padding_top=padding,
            padding_bottom=padding,
            nodes=flow.nodes,
        )
