"""Macro producer interface."""

from typing import Protocol


class MacroProducer(Protocol):
    """Zero-argument text source bound to a macro name."""

    def produce(self) -> str:
        """Return the macro's text. Raises MacroExecutionError on failure."""
        ...
