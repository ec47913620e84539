"""
BaseCommand — Shared foundation for all session commands

Provides access to session resources via composition.
Commands receive the Session instance and access its resources through properties.
"""

from typing import TYPE_CHECKING

from ..lang.values import Value
from ..presentation.formatters import format_value

if TYPE_CHECKING:
    from ..repl.session import Session


class BaseCommand:
    """
    Base class for session commands with access to shared resources.

    Commands don't own state; the program and history live on the Session.
    """

    def __init__(self, session: 'Session'):
        """
        Initialize command with session instance.

        Args:
            session: The Session holding the program, history and output
        """
        self._session = session

    # -------------------------------------------------------------------------
    # Core resources (convenience properties)
    # -------------------------------------------------------------------------

    @property
    def accumulator(self):
        """Program accumulator (the only mutable program state)."""
        return self._session.accumulator

    @property
    def evaluator(self):
        """Expression evaluator adapter."""
        return self._session.evaluator

    @property
    def history(self):
        """Checkpoint history."""
        return self._session.history

    @property
    def config(self):
        """Session configuration."""
        return self._session.config

    @property
    def symbols(self):
        """Symbol set for display (Unicode/ASCII)."""
        return self._session.symbols

    @property
    def prefix(self) -> str:
        return self._session.config.repl.command_prefix

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def emit(self, text: str) -> None:
        self._session.emit(text)

    def emit_value(self, value: Value) -> None:
        """Format a value and print it. FormatError propagates."""
        self.emit(format_value(value))

    # -------------------------------------------------------------------------
    # Program replacement (save / restore)
    # -------------------------------------------------------------------------

    def replace_program(self, text: str) -> None:
        """
        Reset the program, add text as its new content and checkpoint.

        The previous program comes back if any step fails.
        """
        with self.accumulator.transaction():
            self.accumulator.reset(self._session.reset_source)
            self.accumulator.append(text)
            self._session.checkpoint()
