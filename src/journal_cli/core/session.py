"""Sync session state model."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class SessionState(Enum):
    """Steps of a pull-edit-commit-push session."""

    IDLE = "idle"
    PULLING = "pulling"
    EDITING = "editing"
    STAGING = "staging"
    COMMITTING = "committing"
    PUSHING = "pushing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class SessionOutcome:
    """What happened during one edit session."""

    target: Path
    offline: bool
    state: SessionState = SessionState.IDLE
    history: list[SessionState] = field(default_factory=list)
    pulled: bool = False
    editor_status: int | None = None
    warnings: list[str] = field(default_factory=list)

    def advance(self, state: SessionState) -> None:
        self.state = state
        self.history.append(state)

    @property
    def committed(self) -> bool:
        return not self.offline and self.state == SessionState.DONE
