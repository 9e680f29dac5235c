"""Exceptions raised by journal-cli.

Everything fatal derives from JournalError; the CLI turns it into an
``error:`` line and exit status 1.
"""


class JournalError(RuntimeError):
    """Base class for fatal journal errors."""

    pass


class ConfigError(JournalError):
    """Raised when the config file can't be read, parsed or written."""

    pass


class MissingJournalPathError(JournalError):
    def __init__(self):
        super().__init__("Journal path not set in config.")


class MissingEditorError(JournalError):
    def __init__(self):
        super().__init__("Text editor wasn't set in config, nor EDITOR env variable was defined")


class EditorLaunchError(JournalError):
    """Raised when the editor process can't be started."""

    pass


class MacroExecutionError(JournalError):
    """Raised when a macro producer fails to run."""

    pass


class InvalidMacroName(JournalError):
    def __init__(self, name: str):
        super().__init__(f"Invalid macro name '{name}': only alphanumeric characters are allowed")
        self.name = name


class PageWriteError(JournalError):
    """Raised when a page or its directory can't be written."""

    pass


class SyncError(JournalError):
    """Raised when a version-control step fails after editing."""

    def __init__(self, operation: str, message: str):
        super().__init__(message)
        self.operation = operation
