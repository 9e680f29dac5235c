"""Shared workflow layer between the CLI and the core.

Each open_* / edit_* function resolves a target file, creates it from the
template when needed, and runs it through a pull-edit-commit-push session.
"""

import logging
import os
from collections.abc import Callable, Mapping
from datetime import date, datetime
from pathlib import Path

from .adapters.editor_process import ProcessEditor
from .adapters.git_repo import GitRepository
from .adapters.shell_macro import CommandMacro
from .config import Config, resolve_editor
from .core.macros import DateMacro, expand
from .core.pages import locate, resolve_today, template_path
from .core.session import SessionOutcome, SessionState
from .errors import EditorLaunchError, PageWriteError, SyncError
from .ports import Editor, MacroProducer, VersionControl

logger = logging.getLogger(__name__)

PAGE_COMMIT_MESSAGE = "Page updated"
TEMPLATE_COMMIT_MESSAGE = "Template updated"


# ============== Macros ==============


def build_registry(
    config: Config,
    clock: Callable[[], datetime] = datetime.now,
) -> dict[str, MacroProducer]:
    """
    Assemble the macro lookup for template expansion.

    Built-ins go in first; a user macro with the same name replaces it.
    """
    registry: dict[str, MacroProducer] = {
        "DATE": DateMacro(config.midnight_offset, clock),
    }
    for name, command in config.macros.items():
        if name in registry:
            logger.debug(f"User macro {name} overrides built-in")
        registry[name] = CommandMacro(name, command)
    return registry


# ============== Pages ==============


def ensure_parent_directory(path: Path) -> None:
    """Create the directory holding path if it doesn't exist yet."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PageWriteError(f"Failed to create directory {path.parent}: {e}")


def materialize(journal_root: Path, page_path: Path, macros: Mapping[str, MacroProducer]) -> bool:
    """
    Create a new page from the journal template.

    Only call this for a page that doesn't exist: the expanded template
    replaces whatever is at page_path. Returns True when a template was
    found and written.
    """
    ensure_parent_directory(page_path)

    template = template_path(journal_root)
    if not template.exists():
        logger.debug(f"No template at {template}, page starts empty")
        return False

    try:
        text = template.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PageWriteError(f"Failed to read template {template}: {e}")

    content = expand(text, macros)

    try:
        page_path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise PageWriteError(f"Failed to write page {page_path}: {e}")

    logger.info(f"Created {page_path} from template")
    return True


# ============== Sync session ==============


def run_session(
    vcs: VersionControl,
    editor: Editor,
    target: Path,
    commit_message: str,
    offline: bool = False,
    outcome: SessionOutcome | None = None,
) -> SessionOutcome:
    """
    Pull, edit target, then add, commit and push it.

    Offline sessions only edit. A failed pull is a warning and editing
    continues on local data; any failure after editing raises SyncError
    and stops the remaining steps. The editor's exit status doesn't block
    the commit. Pass an outcome to inspect the final state after a failure.
    """
    if outcome is None:
        outcome = SessionOutcome(target=target, offline=offline)

    if not offline:
        outcome.advance(SessionState.PULLING)
        outcome.pulled = vcs.pull()
        if not outcome.pulled:
            message = "Failed to pull data from remote, using local old data."
            logger.warning(message)
            outcome.warnings.append(message)

    outcome.advance(SessionState.EDITING)
    try:
        outcome.editor_status = editor.launch(target)
    except EditorLaunchError:
        outcome.advance(SessionState.FAILED)
        raise
    if outcome.editor_status != 0:
        outcome.warnings.append(f"Editor exited with status {outcome.editor_status}.")

    if not offline:
        steps = [
            (SessionState.STAGING, "add", lambda: vcs.add(target), "Failed to add changes."),
            (SessionState.COMMITTING, "commit", lambda: vcs.commit(commit_message), "Failed to commit file."),
            (SessionState.PUSHING, "push", vcs.push, "Failed to push changes."),
        ]
        for state, operation, step, error_message in steps:
            outcome.advance(state)
            if not step():
                outcome.advance(SessionState.FAILED)
                raise SyncError(operation, error_message)

    outcome.advance(SessionState.DONE)
    return outcome


# ============== Commands ==============


def get_repository(journal_root: Path) -> GitRepository:
    return GitRepository(journal_root)


def get_editor(config: Config, environ: Mapping[str, str] | None = None) -> ProcessEditor:
    """Resolve the editor command from config or the environment."""
    env = os.environ if environ is None else environ
    return ProcessEditor(resolve_editor(config, env))


def open_page(
    config: Config,
    target_date: date,
    offline: bool = False,
    *,
    vcs: VersionControl | None = None,
    editor: Editor | None = None,
    clock: Callable[[], datetime] = datetime.now,
) -> SessionOutcome:
    """Open the page for a date, creating it from the template first if needed."""
    root = config.journal_root()
    editor = editor or get_editor(config)
    vcs = vcs or get_repository(root)

    page = locate(root, target_date, config.extension)
    if not page.exists():
        materialize(root, page, build_registry(config, clock))

    return run_session(vcs, editor, page, PAGE_COMMIT_MESSAGE, offline)


def open_today(
    config: Config,
    offline: bool = False,
    *,
    vcs: VersionControl | None = None,
    editor: Editor | None = None,
    clock: Callable[[], datetime] = datetime.now,
) -> SessionOutcome:
    """Open the page for the current journal day."""
    today = resolve_today(clock(), config.midnight_offset)
    return open_page(config, today, offline, vcs=vcs, editor=editor, clock=clock)


def edit_template(
    config: Config,
    offline: bool = False,
    *,
    vcs: VersionControl | None = None,
    editor: Editor | None = None,
) -> SessionOutcome:
    """Edit the journal template."""
    root = config.journal_root()
    editor = editor or get_editor(config)
    vcs = vcs or get_repository(root)

    template = template_path(root)
    ensure_parent_directory(template)
    return run_session(vcs, editor, template, TEMPLATE_COMMIT_MESSAGE, offline)
