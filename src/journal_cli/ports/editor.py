"""Text editor interface."""

from pathlib import Path
from typing import Protocol


class Editor(Protocol):
    """Interface for interactively editing a file."""

    def launch(self, path: Path) -> int:
        """Open path and block until the editor exits. Returns the exit status."""
        ...
