"""
LookupCommand — Print the value at a dotted path

A path that does not resolve is a reported miss, not an error: the
session prints "error: no value" and nothing else.
"""

from typing import Sequence

from ..commands.base import BaseCommand
from .model import Lookup


NO_VALUE = "no value"


class LookupCommand(BaseCommand):
    """Navigate the current value along a label path."""

    def lookup(self, path: Sequence[str]) -> bool:
        """
        Print the value at path.

        Returns:
            True when the path resolved, False for a miss
        """
        value = self.evaluator.value().lookup(path)
        if value is None:
            self._session.report(NO_VALUE)
            return False
        self.emit_value(value)
        return True


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND = Lookup


def handle(session, command: Lookup):
    """Handle lookup command dispatch."""
    LookupCommand(session).lookup(command.path)
