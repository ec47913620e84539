"""
InputModeController — Line-level state machine of the session

Two states:
- Normal: each non-empty line is an entry of its own
- Accumulating: lines are buffered until the multi-line token closes the block

    >  a: 1                 -> Entry(INPUT, "a: 1")
    >  :print               -> Entry(COMMAND, "print")
    >  =b: a                -> Entry(STATEMENT, "b: a")
    >  ;;                   -> (opens block)
    .. x: 1
    .. y: 2
    .. ;;                   -> Entry(STATEMENT, "x: 1\\ny: 2")

Empty lines never produce an entry and never open or close a block.
Deciding whether INPUT is an expression or a statement is left to the
session, which owns the parser.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class EntryKind(Enum):
    COMMAND = "command"
    STATEMENT = "statement"
    INPUT = "input"


@dataclass(frozen=True)
class Entry:
    """
    A completed input.

    Attributes:
        kind: How the session dispatches it
        text: What is dispatched (prefix removed)
        source: Literal text recorded to line-edit history
    """
    kind: EntryKind
    text: str
    source: str


class InputModeController:
    """Turns raw lines into Entries, buffering multi-line blocks."""

    def __init__(self, command_prefix: str = ":", statement_prefix: str = "=",
                 multiline_token: str = ";;"):
        self.command_prefix = command_prefix
        self.statement_prefix = statement_prefix
        self.multiline_token = multiline_token
        self._buffer: Optional[List[str]] = None

    @property
    def accumulating(self) -> bool:
        return self._buffer is not None

    @property
    def buffered(self) -> List[str]:
        return list(self._buffer or [])

    def feed(self, line: str) -> Optional[Entry]:
        """
        Consume one line.

        Returns:
            The completed Entry, or None when the line was empty, toggled a
            block open, or was buffered
        """
        line = line.rstrip()
        if not line.strip():
            return None

        if line.strip() == self.multiline_token:
            return self._toggle()

        if self._buffer is not None:
            self._buffer.append(line)
            return None

        text = line.strip()
        if text.startswith(self.command_prefix):
            return Entry(EntryKind.COMMAND, text[len(self.command_prefix):].strip(), text)
        if text.startswith(self.statement_prefix):
            return Entry(EntryKind.STATEMENT, text[len(self.statement_prefix):].strip(), text)
        return Entry(EntryKind.INPUT, text, text)

    def _toggle(self) -> Optional[Entry]:
        if self._buffer is None:
            self._buffer = []
            return None
        block = "\n".join(self._buffer)
        self._buffer = None
        if not block:
            return None
        return Entry(EntryKind.STATEMENT, block, block)
