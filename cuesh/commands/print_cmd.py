"""
PrintCommand — Rebuild the program and print its value
"""

from ..commands.base import BaseCommand
from .model import Print


class PrintCommand(BaseCommand):
    """Print the current value of the whole program."""

    def print_value(self):
        self.emit_value(self.evaluator.value())


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND = Print


def handle(session, command: Print):
    """Handle print command dispatch."""
    PrintCommand(session).print_value()
