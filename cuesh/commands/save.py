"""
SaveCommand — Move the current value under a path

Takes the latest checkpoint, places it at the given path of an empty
unit, and makes the formatted result the whole program:

    a: 1        :save config        config: {
                                        a: 1
                                    }
"""

from typing import Sequence

from ..commands.base import BaseCommand
from ..errors import EvalError
from ..lang.evaluator import compile_unit
from ..lang.format import render_file
from .model import Save


class SaveCommand(BaseCommand):
    """Nest the latest checkpoint under a path and reload it."""

    def save(self, path: Sequence[str]):
        latest = self.history.latest().value
        filled = compile_unit().value.fill(latest, path)
        error = filled.first_error()
        if error is not None:
            raise EvalError(error.message)
        self.replace_program(render_file(filled))


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND = Save


def handle(session, command: Save):
    """Handle save command dispatch."""
    SaveCommand(session).save(command.path)
