"""Tests for the shared workflow layer."""

from datetime import date, datetime
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from journal_cli.adapters.shell_macro import CommandMacro
from journal_cli.config import Config
from journal_cli.core.macros import DateMacro
from journal_cli.core.session import SessionOutcome, SessionState
from journal_cli.errors import EditorLaunchError, MissingEditorError, PageWriteError, SyncError
from journal_cli.workflows import (
    PAGE_COMMIT_MESSAGE,
    TEMPLATE_COMMIT_MESSAGE,
    build_registry,
    edit_template,
    materialize,
    open_page,
    open_today,
    run_session,
)


class FakeRepo:
    """VersionControl double that records calls."""

    def __init__(self, fail: set[str] | None = None):
        self.fail = fail or set()
        self.calls: list[tuple] = []

    def _result(self, op: str) -> bool:
        return op not in self.fail

    def pull(self) -> bool:
        self.calls.append(("pull",))
        return self._result("pull")

    def add(self, path: Path) -> bool:
        self.calls.append(("add", path))
        return self._result("add")

    def commit(self, message: str) -> bool:
        self.calls.append(("commit", message))
        return self._result("commit")

    def push(self) -> bool:
        self.calls.append(("push",))
        return self._result("push")

    @property
    def operations(self) -> list[str]:
        return [c[0] for c in self.calls]


class FakeEditor:
    """Editor double that records launches and optionally writes content."""

    def __init__(self, status: int = 0, error: Exception | None = None):
        self.status = status
        self.error = error
        self.launched: list[Path] = []

    def launch(self, path: Path) -> int:
        if self.error:
            raise self.error
        self.launched.append(path)
        return self.status


class Const:
    def __init__(self, value: str):
        self.value = value

    def produce(self) -> str:
        return self.value


@pytest.fixture
def config(tmp_path):
    return Config(editor="vim", path=str(tmp_path))


@pytest.fixture
def clock():
    return lambda: datetime(2024, 5, 1, 12, 0)


class TestBuildRegistry:
    def test_always_has_date(self):
        registry = build_registry(Config())
        assert isinstance(registry["DATE"], DateMacro)

    def test_date_uses_offset_and_clock(self):
        registry = build_registry(Config(midnight_offset=3), clock=lambda: datetime(2024, 5, 1, 1, 0))
        assert registry["DATE"].produce() == "2024-04-30"

    def test_registers_user_macros(self):
        registry = build_registry(Config(macros={"WEATHER": "curl wttr.in"}))
        assert isinstance(registry["WEATHER"], CommandMacro)
        assert registry["WEATHER"].command == "curl wttr.in"

    def test_user_macro_overrides_builtin(self):
        registry = build_registry(Config(macros={"DATE": "date +%F"}))
        assert isinstance(registry["DATE"], CommandMacro)


class TestMaterialize:
    def test_expands_template_into_new_page(self, tmp_path):
        (tmp_path / "template").write_text("Day: $DATE\n", encoding="utf-8")
        page = tmp_path / "2024" / "05" / "01.txt"

        assert materialize(tmp_path, page, {"DATE": Const("2024-05-01")}) is True

        assert page.read_text(encoding="utf-8") == "Day: 2024-05-01\n"

    def test_without_template_only_creates_directory(self, tmp_path):
        page = tmp_path / "2024" / "05" / "01.txt"

        assert materialize(tmp_path, page, {}) is False

        assert page.parent.is_dir()
        assert not page.exists()

    def test_empty_template_creates_empty_page(self, tmp_path):
        (tmp_path / "template").write_text("", encoding="utf-8")
        page = tmp_path / "2024" / "05" / "01.txt"

        materialize(tmp_path, page, {})

        assert page.read_text(encoding="utf-8") == ""

    def test_non_utf8_template_is_fatal(self, tmp_path):
        (tmp_path / "template").write_bytes(b"caf\xe9 $DATE")
        page = tmp_path / "2024" / "05" / "01.txt"

        with pytest.raises(PageWriteError, match="Failed to read template"):
            materialize(tmp_path, page, {"DATE": Const("2024-05-01")})

        assert not page.exists()

    def test_macro_failure_leaves_no_page(self, tmp_path):
        (tmp_path / "template").write_text("$BROKEN", encoding="utf-8")
        page = tmp_path / "2024" / "05" / "01.txt"
        broken = MagicMock()
        broken.produce.side_effect = RuntimeError("cannot run")

        with pytest.raises(RuntimeError):
            materialize(tmp_path, page, {"BROKEN": broken})

        assert not page.exists()


class TestRunSession:
    def test_online_full_sequence(self, tmp_path):
        repo, editor = FakeRepo(), FakeEditor()
        target = tmp_path / "page.txt"

        outcome = run_session(repo, editor, target, "Page updated")

        assert repo.calls == [("pull",), ("add", target), ("commit", "Page updated"), ("push",)]
        assert editor.launched == [target]
        assert outcome.state == SessionState.DONE
        assert outcome.history == [
            SessionState.PULLING,
            SessionState.EDITING,
            SessionState.STAGING,
            SessionState.COMMITTING,
            SessionState.PUSHING,
            SessionState.DONE,
        ]
        assert outcome.committed
        assert outcome.warnings == []

    def test_offline_makes_no_vcs_calls(self, tmp_path):
        repo, editor = FakeRepo(), FakeEditor()

        outcome = run_session(repo, editor, tmp_path / "page.txt", "msg", offline=True)

        assert repo.calls == []
        assert len(editor.launched) == 1
        assert outcome.history == [SessionState.EDITING, SessionState.DONE]
        assert not outcome.committed

    def test_failed_pull_still_edits_and_pushes(self, tmp_path):
        repo, editor = FakeRepo(fail={"pull"}), FakeEditor()

        outcome = run_session(repo, editor, tmp_path / "page.txt", "msg")

        assert repo.operations == ["pull", "add", "commit", "push"]
        assert len(editor.launched) == 1
        assert outcome.pulled is False
        assert outcome.state == SessionState.DONE
        assert any("Failed to pull" in w for w in outcome.warnings)

    def test_failed_add_stops_before_commit(self, tmp_path):
        repo, editor = FakeRepo(fail={"add"}), FakeEditor()

        with pytest.raises(SyncError, match="Failed to add changes") as exc:
            run_session(repo, editor, tmp_path / "page.txt", "msg")

        assert exc.value.operation == "add"
        assert repo.operations == ["pull", "add"]

    def test_failed_commit_stops_before_push(self, tmp_path):
        repo, editor = FakeRepo(fail={"commit"}), FakeEditor()

        with pytest.raises(SyncError, match="Failed to commit file"):
            run_session(repo, editor, tmp_path / "page.txt", "msg")

        assert repo.operations == ["pull", "add", "commit"]

    def test_failed_push_is_fatal(self, tmp_path):
        repo, editor = FakeRepo(fail={"push"}), FakeEditor()

        with pytest.raises(SyncError, match="Failed to push changes") as exc:
            run_session(repo, editor, tmp_path / "page.txt", "msg")

        assert exc.value.operation == "push"

    def test_editor_launch_failure_aborts_before_commit(self, tmp_path):
        repo = FakeRepo()
        editor = FakeEditor(error=EditorLaunchError("Failed to start editor"))

        with pytest.raises(EditorLaunchError):
            run_session(repo, editor, tmp_path / "page.txt", "msg")

        assert repo.operations == ["pull"]

    def test_editor_launch_failure_marks_session_failed(self, tmp_path):
        target = tmp_path / "page.txt"
        outcome = SessionOutcome(target=target, offline=False)
        editor = FakeEditor(error=EditorLaunchError("Failed to start editor"))

        with pytest.raises(EditorLaunchError):
            run_session(FakeRepo(), editor, target, "msg", outcome=outcome)

        assert outcome.state == SessionState.FAILED
        assert outcome.history == [SessionState.PULLING, SessionState.EDITING, SessionState.FAILED]

    def test_nonzero_editor_exit_still_commits(self, tmp_path):
        repo, editor = FakeRepo(), FakeEditor(status=1)

        outcome = run_session(repo, editor, tmp_path / "page.txt", "msg")

        assert repo.operations == ["pull", "add", "commit", "push"]
        assert outcome.editor_status == 1
        assert any("status 1" in w for w in outcome.warnings)


class TestOpenPage:
    def test_offline_empty_template(self, config, tmp_path, clock):
        (tmp_path / "template").write_text("", encoding="utf-8")
        repo, editor = FakeRepo(), FakeEditor()

        open_page(config, date(2024, 5, 1), offline=True, vcs=repo, editor=editor, clock=clock)

        page = tmp_path / "2024" / "05" / "01.txt"
        assert page.exists()
        assert page.read_text(encoding="utf-8") == ""
        assert editor.launched == [page]
        assert repo.calls == []

    @patch("journal_cli.adapters.shell_macro.subprocess.run")
    def test_template_with_custom_macro(self, mock_run, tmp_path, clock):
        mock_run.return_value = MagicMock(stdout="sunny", returncode=0)
        (tmp_path / "template").write_text("Day: $DATE, $WEATHER", encoding="utf-8")
        config = Config(editor="vim", path=str(tmp_path), macros={"WEATHER": "weather --short"})

        open_page(config, date(2024, 5, 1), offline=True, vcs=FakeRepo(), editor=FakeEditor(), clock=clock)

        page = tmp_path / "2024" / "05" / "01.txt"
        assert page.read_text(encoding="utf-8") == "Day: 2024-05-01, sunny"
        mock_run.assert_called_once()
        assert mock_run.call_args[0][0] == ["weather", "--short"]

    def test_existing_page_is_not_materialized(self, config, tmp_path, clock):
        (tmp_path / "template").write_text("from template", encoding="utf-8")
        page = tmp_path / "2024" / "05" / "01.txt"
        page.parent.mkdir(parents=True)
        page.write_text("my notes", encoding="utf-8")

        with patch("journal_cli.workflows.materialize") as mock_materialize:
            open_page(config, date(2024, 5, 1), offline=True, vcs=FakeRepo(), editor=FakeEditor(), clock=clock)

        mock_materialize.assert_not_called()
        assert page.read_text(encoding="utf-8") == "my notes"

    def test_online_commits_page(self, config, tmp_path, clock):
        repo = FakeRepo()

        open_page(config, date(2024, 5, 1), vcs=repo, editor=FakeEditor(), clock=clock)

        page = tmp_path / "2024" / "05" / "01.txt"
        assert repo.calls == [("pull",), ("add", page), ("commit", PAGE_COMMIT_MESSAGE), ("push",)]

    def test_uses_configured_extension(self, tmp_path, clock):
        config = Config(editor="vim", path=str(tmp_path), extension="md")
        editor = FakeEditor()

        open_page(config, date(2024, 3, 7), offline=True, vcs=FakeRepo(), editor=editor, clock=clock)

        assert editor.launched == [tmp_path / "2024" / "03" / "07.md"]

    def test_missing_editor_is_fatal(self, tmp_path, monkeypatch):
        monkeypatch.delenv("EDITOR", raising=False)
        config = Config(path=str(tmp_path))

        with pytest.raises(MissingEditorError):
            open_page(config, date(2024, 5, 1), offline=True, vcs=FakeRepo())


class TestOpenToday:
    def test_applies_midnight_offset(self, tmp_path):
        config = Config(editor="vim", path=str(tmp_path), midnight_offset=3)
        editor = FakeEditor()

        open_today(config, offline=True, vcs=FakeRepo(), editor=editor,
                   clock=lambda: datetime(2024, 5, 1, 2, 0))

        assert editor.launched == [tmp_path / "2024" / "04" / "30.txt"]


class TestEditTemplate:
    def test_edits_template_with_template_message(self, config, tmp_path):
        repo, editor = FakeRepo(), FakeEditor()

        edit_template(config, vcs=repo, editor=editor)

        template = tmp_path / "template"
        assert editor.launched == [template]
        assert ("commit", TEMPLATE_COMMIT_MESSAGE) in repo.calls
        assert ("add", template) in repo.calls
