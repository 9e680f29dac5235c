"""git adapter - subprocess wrapper for the journal repository."""

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


class GitRepository:
    """
    git subprocess adapter.

    Implements VersionControl protocol. Runs ``git -C <root> ...`` and
    reports success purely from the exit status; output goes straight
    to the terminal.
    """

    def __init__(self, root: Path | str, binary: str = "git"):
        self.root = Path(root)
        self.binary = binary

    def _command(self, *args: str) -> list[str]:
        return [self.binary, "-C", str(self.root), *args]

    def _run(self, *args: str) -> bool:
        cmd = self._command(*args)
        logger.debug(f"Running {' '.join(cmd)}")
        try:
            proc = subprocess.run(cmd)
        except FileNotFoundError:
            logger.error(f"{self.binary} not found")
            return False
        except OSError as e:
            logger.error(f"Failed to run {self.binary}: {e}")
            return False
        if proc.returncode != 0:
            logger.debug(f"git {args[0]} exited with status {proc.returncode}")
        return proc.returncode == 0

    def pull(self) -> bool:
        return self._run("pull")

    def add(self, path: Path) -> bool:
        return self._run("add", str(path))

    def commit(self, message: str) -> bool:
        return self._run("commit", "--message", message)

    def push(self) -> bool:
        return self._run("push")
