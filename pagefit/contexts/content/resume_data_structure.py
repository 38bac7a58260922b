"""
Resume Content Structure

Defines the structured resume content tree consumed by the rendering surface.
This structure is the interface between the editor's CRUD layer (external) and
the auto-fit engine: the engine reads it, never writes it.

YAML layout (snake_case keys):

    personal_info: {name, role, summary}
    contact: {location, phone, email, linkedin}
    contact_order: [location, phone, email, linkedin]
    expertise: [...]
    tech_stack: [...]
    education: [{id, degree, institution, start_date, end_date}]
    experience: [{id, company, title, start_date, end_date, bullets: [...]}]
    projects: [{id, title, description, link, link_text}]
    show_projects: true
    section_titles: {experience, projects, expertise, tech_stack}
    section_order: [experience, projects]
    metadata: {...}
    scale: 0.5
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from omegaconf import OmegaConf

from pagefit.contexts.content.exceptions import InvalidResumeDataError

CONTACT_FIELDS = ("location", "phone", "email", "linkedin")
SECTION_TYPES = ("experience", "projects")


@dataclass
class PersonalInfo:
    name: str = ""
    role: str = ""
    summary: str = ""


@dataclass
class ContactInfo:
    location: str = ""
    phone: str = ""
    email: str = ""
    linkedin: str = ""


@dataclass
class Education:
    id: str
    degree: str = ""
    institution: str = ""
    start_date: str = ""
    end_date: str = ""


@dataclass
class JobExperience:
    id: str
    company: str = ""
    title: str = ""
    start_date: str = ""
    end_date: str = ""
    bullets: List[str] = field(default_factory=list)


@dataclass
class Project:
    id: str
    title: str = ""
    description: str = ""
    link: Optional[str] = None
    link_text: Optional[str] = None


@dataclass
class SectionTitles:
    experience: str = "Professional Experience"
    projects: str = "Key Technical Projects"
    expertise: str = "Expertise"
    tech_stack: str = "Tech Stack"


@dataclass
class ResumeData:
    """
    Complete resume content tree.

    Attributes:
        personal_info: Name, role and summary shown in the main column header
        contact: Contact values shown at the top of the sidebar
        contact_order: Display order of contact fields
        expertise: Sidebar skill list
        tech_stack: Sidebar tool list
        education: Sidebar education entries
        experience: Work history (main column)
        projects: Project cards (main column, only when show_projects)
        show_projects: Visibility flag for the projects section
        section_titles: Editable section headings
        section_order: Main column section order
        metadata: Free-form metadata (target role, company, ...)
        scale: Manual density (0-1) used when auto-fit is off
    """

    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    contact: ContactInfo = field(default_factory=ContactInfo)
    contact_order: List[str] = field(default_factory=lambda: list(CONTACT_FIELDS))
    expertise: List[str] = field(default_factory=list)
    tech_stack: List[str] = field(default_factory=list)
    education: List[Education] = field(default_factory=list)
    experience: List[JobExperience] = field(default_factory=list)
    projects: List[Project] = field(default_factory=list)
    show_projects: bool = True
    section_titles: SectionTitles = field(default_factory=SectionTitles)
    section_order: List[str] = field(default_factory=lambda: list(SECTION_TYPES))
    metadata: Dict[str, Any] = field(default_factory=dict)
    scale: float = 0.5

    def is_empty(self) -> bool:
        """True when the main column has no entries at all."""
        return not (
            self.personal_info.name
            or self.personal_info.summary
            or self.experience
            or self.projects
        )


def _build(cls, data: Any, field_path: str, source_path: Optional[Path]):
    """Instantiate a flat dataclass from a mapping, rejecting unknown keys."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InvalidResumeDataError(
            f"Expected a mapping for {cls.__name__}, got {type(data).__name__}",
            field_path,
            source_path,
        )

    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise InvalidResumeDataError(
            f"Unknown keys for {cls.__name__}: {unknown}", field_path, source_path
        )

    try:
        return cls(**data)
    except TypeError as e:
        raise InvalidResumeDataError(str(e), field_path, source_path) from e


def _build_list(cls, items: Any, field_path: str, source_path: Optional[Path]) -> list:
    if items is None:
        return []
    if not isinstance(items, list):
        raise InvalidResumeDataError("Expected a list", field_path, source_path)
    return [_build(cls, item, f"{field_path}[{i}]", source_path) for i, item in enumerate(items)]


def _string_list(items: Any, field_path: str, source_path: Optional[Path]) -> List[str]:
    if items is None:
        return []
    if not isinstance(items, list):
        raise InvalidResumeDataError("Expected a list of strings", field_path, source_path)
    return [str(item) for item in items]


def resume_from_dict(data: Dict[str, Any], source_path: Optional[Path] = None) -> ResumeData:
    """
    Build a ResumeData tree from a plain dict.

    Args:
        data: Resume content (see module docstring for layout)
        source_path: Originating file, used in error messages

    Returns:
        ResumeData instance

    Raises:
        InvalidResumeDataError: On unknown keys, wrong types or invalid orders
    """
    if not isinstance(data, dict):
        raise InvalidResumeDataError("Resume root must be a mapping", source_path=source_path)

    if "personal_info" not in data:
        raise InvalidResumeDataError(
            "Missing required 'personal_info' key", "personal_info", source_path
        )

    unknown = sorted(set(data) - {f.name for f in fields(ResumeData)})
    if unknown:
        raise InvalidResumeDataError(f"Unknown resume keys: {unknown}", source_path=source_path)

    experience = []
    for i, job in enumerate(data.get("experience") or []):
        if isinstance(job, dict) and "bullets" in job:
            job = {**job, "bullets": _string_list(job["bullets"], f"experience[{i}].bullets", source_path)}
        experience.append(_build(JobExperience, job, f"experience[{i}]", source_path))

    resume = ResumeData(
        personal_info=_build(PersonalInfo, data.get("personal_info"), "personal_info", source_path),
        contact=_build(ContactInfo, data.get("contact"), "contact", source_path),
        expertise=_string_list(data.get("expertise"), "expertise", source_path),
        tech_stack=_string_list(data.get("tech_stack"), "tech_stack", source_path),
        education=_build_list(Education, data.get("education"), "education", source_path),
        experience=experience,
        projects=_build_list(Project, data.get("projects"), "projects", source_path),
        show_projects=bool(data.get("show_projects", True)),
        section_titles=_build(
            SectionTitles, data.get("section_titles"), "section_titles", source_path
        ),
        metadata=dict(data.get("metadata") or {}),
        scale=float(data.get("scale") if data.get("scale") is not None else 0.5),
    )

    if "contact_order" in data:
        contact_order = _string_list(data["contact_order"], "contact_order", source_path)
        invalid = [name for name in contact_order if name not in CONTACT_FIELDS]
        if invalid:
            raise InvalidResumeDataError(
                f"Unknown contact fields: {invalid}", "contact_order", source_path
            )
        resume.contact_order = contact_order

    if "section_order" in data:
        section_order = _string_list(data["section_order"], "section_order", source_path)
        invalid = [name for name in section_order if name not in SECTION_TYPES]
        if invalid:
            raise InvalidResumeDataError(
                f"Unknown section types: {invalid}", "section_order", source_path
            )
        resume.section_order = section_order

    return resume


def load_resume(yaml_path: Union[str, Path]) -> ResumeData:
    """
    Load resume content from a YAML file.

    Raises:
        FileNotFoundError: If yaml_path does not exist
        InvalidResumeDataError: If the YAML structure is invalid
    """
    yaml_path = Path(yaml_path)
    if not yaml_path.exists():
        raise FileNotFoundError(f"Resume YAML not found: {yaml_path}")

    yaml_dict = OmegaConf.to_container(OmegaConf.load(yaml_path), resolve=True)
    return resume_from_dict(yaml_dict, source_path=yaml_path)
