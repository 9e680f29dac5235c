"""Functional core - pure business logic with no I/O."""

from .pages import DEFAULT_EXTENSION, locate, resolve_today, template_path
from .macros import DateMacro, expand
from .session import SessionOutcome, SessionState

__all__ = [
    # Pages
    "DEFAULT_EXTENSION",
    "locate",
    "resolve_today",
    "template_path",
    # Macros
    "DateMacro",
    "expand",
    # Session
    "SessionOutcome",
    "SessionState",
]
