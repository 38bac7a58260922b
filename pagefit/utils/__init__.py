"""
Shared utilities for PAGEFIT.

Common functionality used across contexts:
- Logger setup with provenance tracking
- Timestamps for log directories
"""

from pagefit.utils.timestamp import now

__all__ = ["now"]
