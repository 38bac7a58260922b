"""Custom exceptions for the scaling context."""

from pathlib import Path
from typing import Optional


class InvalidScaleBoundsError(ValueError):
    """
    Exception raised when the scale bounds configuration is malformed.

    Attributes:
        message: Error description
        key: Dotted config key that failed validation (e.g., 'factors.body')
        config_path: Path to the YAML file being loaded
    """

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        config_path: Optional[Path] = None,
    ):
        self.message = message
        self.key = key
        self.config_path = config_path

        parts = [message]
        if key:
            parts.append(f"Key: {key}")
        if config_path:
            parts.append(f"Config: {config_path}")

        super().__init__("\n".join(parts))
