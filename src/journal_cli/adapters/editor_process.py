"""Editor adapter - runs the user's editor as a blocking child process."""

import logging
import shlex
import subprocess
from pathlib import Path

from journal_cli.errors import EditorLaunchError

logger = logging.getLogger(__name__)


class ProcessEditor:
    """
    Editor subprocess adapter.

    Implements Editor protocol. The command string may carry its own
    arguments (``code --wait``); the file path is appended last.
    """

    def __init__(self, command: str):
        self.command = command

    def launch(self, path: Path) -> int:
        """Open path and block until the editor exits. Returns the exit status."""
        try:
            argv = shlex.split(self.command)
        except ValueError as e:
            raise EditorLaunchError(f"Invalid editor command '{self.command}': {e}")
        if not argv:
            raise EditorLaunchError("Editor command is empty")

        cmd = [*argv, str(path)]
        logger.debug(f"Launching editor: {cmd}")
        try:
            proc = subprocess.run(cmd)
        except OSError as e:
            raise EditorLaunchError(f"Failed to start editor '{argv[0]}': {e}")
        return proc.returncode
