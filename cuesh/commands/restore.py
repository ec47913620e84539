"""
RestoreCommand — Reset the program to a history entry

The entry's value is formatted and becomes the whole program. Restoring
is itself checkpointed, so the restored value is the new latest entry.

An entry holding an error value cannot be restored: `_|_` carries no
message in source form, so the restored value would differ from the
entry.
"""

from ..commands.base import BaseCommand
from ..errors import EvalError
from ..lang.format import render_file
from .model import Restore


class RestoreCommand(BaseCommand):
    """Replace the program with a checkpointed value."""

    def restore(self, index: int):
        entry = self.history.get(index)
        error = entry.value.first_error()
        if error is not None:
            raise EvalError(f"history entry {index} holds an error: {error.message}")
        self.replace_program(render_file(entry.value))


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND = Restore


def handle(session, command: Restore):
    """Handle restore command dispatch."""
    RestoreCommand(session).restore(command.index)
