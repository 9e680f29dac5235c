"""Command macro adapter - expands a macro to a program's output."""

import logging
import subprocess

from journal_cli.errors import MacroExecutionError

logger = logging.getLogger(__name__)


class CommandMacro:
    """
    User-defined macro backed by an external command.

    Implements MacroProducer protocol. The command is split on whitespace
    (no shell), run to completion and its stdout returned untrimmed.
    The exit status is not checked. There is no timeout: a hanging
    command hangs page creation.
    """

    def __init__(self, name: str, command: str):
        self.name = name
        self.command = command

    def produce(self) -> str:
        argv = self.command.split()
        if not argv:
            raise MacroExecutionError(f"Macro '{self.name}' has an empty command")

        logger.debug(f"Running macro {self.name}: {argv}")
        try:
            proc = subprocess.run(argv, stdout=subprocess.PIPE, text=True)
        except OSError as e:
            raise MacroExecutionError(f"Failed to run command for macro '{self.name}': {e}")
        except UnicodeDecodeError as e:
            raise MacroExecutionError(f"Output of macro '{self.name}' is not valid text: {e}")
        if proc.returncode != 0:
            logger.debug(f"Macro {self.name} exited with status {proc.returncode}")
        return proc.stdout
