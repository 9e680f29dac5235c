"""Ports - interfaces/protocols for external dependencies."""

from .version_control import VersionControl
from .editor import Editor
from .macro_producer import MacroProducer

__all__ = [
    "VersionControl",
    "Editor",
    "MacroProducer",
]
