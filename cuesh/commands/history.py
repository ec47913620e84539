"""
HistoryCommand — List every checkpoint

Each entry is shown with its index, entries are separated by a divider
and the whole listing is framed by rules.
"""

from ..commands.base import BaseCommand
from ..presentation.formatters import format_history
from .model import History


class HistoryCommand(BaseCommand):
    """Print the session's checkpoints in order."""

    def history_listing(self):
        self.emit(format_history(list(self.history), self.symbols, color=self._session.color))


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND = History


def handle(session, command: History):
    """Handle history command dispatch."""
    HistoryCommand(session).history_listing()
