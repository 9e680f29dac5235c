"""Adapters - I/O implementations of ports."""

from .git_repo import GitRepository
from .editor_process import ProcessEditor
from .shell_macro import CommandMacro

__all__ = [
    "GitRepository",
    "ProcessEditor",
    "CommandMacro",
]
