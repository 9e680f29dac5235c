"""Version control interface."""

from pathlib import Path
from typing import Protocol


class VersionControl(Protocol):
    """Interface for syncing the journal working tree with a remote.

    Each operation returns True on success and False on failure.
    """

    def pull(self) -> bool:
        """Fetch and merge remote changes."""
        ...

    def add(self, path: Path) -> bool:
        """Stage a file."""
        ...

    def commit(self, message: str) -> bool:
        """Commit staged changes."""
        ...

    def push(self) -> bool:
        """Push local commits to the remote."""
        ...
