"""
REPL — Session state machine and its terminal front end

- InputModeController: lines to entries (single-line and block input)
- Session: owns program and history, dispatches entries
- completion: best-effort candidates for a partial line
- terminal: prompt_toolkit line editor and the read loop
"""

from .input_mode import Entry, EntryKind, InputModeController
from .session import Session
from .completion import completion_candidates

__all__ = ['Entry', 'EntryKind', 'InputModeController', 'Session', 'completion_candidates']
