"""
HelpCommand — Static usage text
"""

from ..commands.base import BaseCommand
from ..content.help_text import render_help
from .model import Help


class HelpCommand(BaseCommand):
    """Print the command reference and the input grammar."""

    def help(self):
        repl = self.config.repl
        self.emit(render_help(
            command_prefix=repl.command_prefix,
            statement_prefix=repl.statement_prefix,
            multiline_token=repl.multiline_token,
        ))


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND = Help


def handle(session, command: Help):
    """Handle help command dispatch."""
    HelpCommand(session).help()
