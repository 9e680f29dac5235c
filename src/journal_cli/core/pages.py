"""Page addressing - pure path and date logic with no I/O."""

from datetime import date, datetime, timedelta
from pathlib import Path

DEFAULT_EXTENSION = "txt"
TEMPLATE_NAME = "template"


def locate(root: Path, target_date: date, extension: str = DEFAULT_EXTENSION) -> Path:
    """Page path for a date: ``root/YYYY/MM/DD.ext``."""
    return (
        Path(root)
        / str(target_date.year)
        / f"{target_date.month:02d}"
        / f"{target_date.day:02d}.{extension}"
    )


def template_path(root: Path) -> Path:
    """The single template file of a journal."""
    return Path(root) / TEMPLATE_NAME


def resolve_today(now: datetime, midnight_offset: int = 0) -> date:
    """
    The journal day for a wall-clock time.

    Up to and including the offset hour, it is still the previous day.
    """
    if now.hour <= midnight_offset:
        return now.date() - timedelta(days=1)
    return now.date()
