"""
InjectCommand — Bulk-load files into the program

Injected files stay separate from typed statements: each one becomes
its own file of the program. The grown program is checkpointed; if it
does not build, the injection is undone.
"""

from ..commands.base import BaseCommand
from .model import Inject


class InjectCommand(BaseCommand):
    """Add a file, or a directory of source files, to the program."""

    def inject(self, ref: str):
        with self.accumulator.transaction():
            added = self.accumulator.inject(ref)
            self._session.checkpoint()
        names = ", ".join(f.name for f in added)
        self.emit(f"{self.symbols.check} injected {names}")


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND = Inject


def handle(session, command: Inject):
    """Handle inject command dispatch."""
    InjectCommand(session).inject(command.ref)
