"""Timestamp helpers for session directories."""

from datetime import datetime


def now() -> str:
    """Filesystem-safe timestamp, e.g. 20251114_123456."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")

