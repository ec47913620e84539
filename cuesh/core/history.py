"""
History — Checkpointed values of a session

Entry 0 is the value the session started with. Each successful mutation
appends the rebuilt value. Entries are never removed and indices never
change, so `restore N` always means the same value within a session.
"""

from dataclasses import dataclass
from typing import Iterator, List

from ..errors import OutOfRangeError
from ..lang.values import Value


@dataclass(frozen=True)
class HistoryEntry:
    index: int
    value: Value


class History:
    """Append-only list of checkpoints."""

    def __init__(self, initial: Value):
        self._entries: List[HistoryEntry] = [HistoryEntry(0, initial)]

    def checkpoint(self, value: Value) -> HistoryEntry:
        entry = HistoryEntry(len(self._entries), value)
        self._entries.append(entry)
        return entry

    def latest(self) -> HistoryEntry:
        return self._entries[-1]

    def get(self, index: int) -> HistoryEntry:
        """
        Entry at index.

        Raises:
            OutOfRangeError: index is negative or past the last entry
        """
        if not 0 <= index < len(self._entries):
            raise OutOfRangeError(
                f"history index {index} out of range (0..{len(self._entries) - 1})"
            )
        return self._entries[index]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(list(self._entries))
