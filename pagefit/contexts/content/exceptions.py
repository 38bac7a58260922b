"""Custom exceptions for the content context."""

from pathlib import Path
from typing import Optional


class InvalidResumeDataError(ValueError):
    """
    Exception raised when resume content is missing required fields or has wrong types.

    Attributes:
        message: Error description
        field_path: Dotted path of the offending field (e.g., 'experience[2].bullets')
        source_path: YAML file the data came from, if any
    """

    def __init__(
        self,
        message: str,
        field_path: Optional[str] = None,
        source_path: Optional[Path] = None,
    ):
        self.message = message
        self.field_path = field_path
        self.source_path = source_path

        parts = [message]
        if field_path:
            parts.append(f"Field: {field_path}")
        if source_path:
            parts.append(f"Source: {source_path}")

        super().__init__("\n".join(parts))
