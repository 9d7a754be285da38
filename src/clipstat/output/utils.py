"""Shared helpers for statistics plots."""

import math
from pathlib import Path


def ensure_directory(path: str | Path) -> Path:
    """Create the directory at ``path`` if needed and return its Path."""
    directory = Path(path)
    if not directory.exists():
        directory.mkdir(parents=True, exist_ok=True)
    return directory


def format_statistic(value: float, digits: int = 4) -> str:
    """Format a statistic for a legend label, spelling out undefined values."""
    if math.isnan(value):
        return "undefined"
    return f"{value:.{digits}g}"
