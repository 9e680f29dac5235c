"""Template macro expansion - pure text transformation."""

from collections.abc import Callable, Mapping
from datetime import datetime
from enum import Enum

from journal_cli.ports.macro_producer import MacroProducer

from .pages import resolve_today

TRIGGER = "$"


class _State(Enum):
    NORMAL = "normal"
    COLLECTING = "collecting"


def _emit(name: str, macros: Mapping[str, MacroProducer]) -> str:
    producer = macros.get(name)
    if producer is None:
        return ""
    return producer.produce()


def expand(text: str, macros: Mapping[str, MacroProducer]) -> str:
    """
    Expand ``$NAME`` tokens in text.

    Single left-to-right scan. A ``$`` starts collecting a name from the
    following alphanumeric characters; the first character that isn't
    alphanumeric ends the name and is copied to the output. Another ``$``
    drops the pending name unexpanded and starts over. Unknown names
    expand to nothing. End of input finishes a pending name without
    emitting anything extra.

    Every occurrence calls its producer again, in document order.
    There is no way to write a literal ``$``.
    """
    state = _State.NORMAL
    name: list[str] = []
    out: list[str] = []

    for char in text:
        if char == TRIGGER:
            # A new trigger discards any name still being collected
            state = _State.COLLECTING
            name = []
            continue

        if state is _State.NORMAL:
            out.append(char)
            continue

        if char.isalnum():
            name.append(char)
            continue

        out.append(_emit("".join(name), macros))
        out.append(char)
        state = _State.NORMAL

    if state is _State.COLLECTING:
        out.append(_emit("".join(name), macros))

    return "".join(out)


class DateMacro:
    """
    Built-in ``$DATE`` macro.

    Produces the current journal day as ``YYYY-MM-DD``, honouring the
    midnight offset.
    """

    def __init__(self, midnight_offset: int = 0, clock: Callable[[], datetime] = datetime.now):
        self.midnight_offset = midnight_offset
        self.clock = clock

    def produce(self) -> str:
        return resolve_today(self.clock(), self.midnight_offset).isoformat()
