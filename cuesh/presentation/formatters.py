"""
Formatters — Values and session data to display text

Centralized formatting logic for session output. This module handles:
- Value and syntax node formatting (delegates to the language formatter)
- History listings
- One-line error reports

Dependency direction: commands → presentation → lang
"""

from typing import Sequence, TYPE_CHECKING

from ..lang.format import Renderable, render
from .symbols import SymbolSet, colorize

# Avoid circular imports - only import types for type checking
if TYPE_CHECKING:
    from ..core.history import HistoryEntry


def format_value(node: Renderable) -> str:
    """
    Format a value or syntax node for display.

    Trailing whitespace is trimmed. FormatError propagates.
    """
    return render(node).rstrip()


def format_history(entries: Sequence['HistoryEntry'], symbols: SymbolSet, color: bool = False) -> str:
    """
    Format history entries as one listing.

    Example (ASCII symbols):
        ====
        0
        {}
        ----
        1
        {
            a: 1
        }
        ====

    Every entry is formatted before anything is returned, so a FormatError
    produces no partial listing.
    """
    rule = colorize(symbols.rule, "blue", color)
    divider = colorize(symbols.divider, "blue", color)
    lines = [rule]
    for position, entry in enumerate(entries):
        lines.append(colorize(str(entry.index), "blue", color))
        lines.append(format_value(entry.value))
        if position != len(entries) - 1:
            lines.append(divider)
    lines.append(rule)
    return "\n".join(lines)


def format_error(message: str, color: bool = False) -> str:
    """One-line error report: 'error: <message>'."""
    return f"{colorize('error', 'red', color)}: {message}"
