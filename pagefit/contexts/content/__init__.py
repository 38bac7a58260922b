"""
Content Context

Responsibilities:
- Defines the resume content tree read by the rendering surface
- Loads resume content from YAML
- Provides the editor's sample resume

Owns: Resume content structure
Never: Knows about scales, measurement or layout
"""

from pagefit.contexts.content.defaults import default_resume
from pagefit.contexts.content.exceptions import InvalidResumeDataError
from pagefit.contexts.content.resume_data_structure import (
    ContactInfo,
    Education,
    JobExperience,
    PersonalInfo,
    Project,
    ResumeData,
    SectionTitles,
    load_resume,
    resume_from_dict,
)

__all__ = [
    "ContactInfo",
    "Education",
    "InvalidResumeDataError",
    "JobExperience",
    "PersonalInfo",
    "Project",
    "ResumeData",
    "SectionTitles",
    "default_resume",
    "load_resume",
    "resume_from_dict",
]
