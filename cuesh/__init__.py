"""
cuesh — Interactive session for a CUE-style configuration language

Type statements to grow a live program, expressions to query it, and
colon commands to inspect, save and restore it.

Usage:
    cuesh repl
    cuesh repl --no-discover
    cuesh --version

In the session:
    a: 1            add a field
    a + 1           evaluate against the program
    :print          show the whole value
    :lookup a       show one field
    :history        list checkpoints
    :restore 0      go back to one
"""

__version__ = "0.1.0"

# Core layer (state)
from .core import Program, SourceFile, ProgramAccumulator, ResetSource, History, HistoryEntry

# Session layer
from .repl import Session, InputModeController, Entry, EntryKind

# Configuration
from .config import Config, ConfigManager

# Errors
from .errors import (
    SessionError, ParseError, EvalError, FormatError, UsageError,
    OutOfRangeError, UnknownCommandError, LoadError,
)

__all__ = [
    '__version__',
    'Program', 'SourceFile', 'ProgramAccumulator', 'ResetSource', 'History', 'HistoryEntry',
    'Session', 'InputModeController', 'Entry', 'EntryKind',
    'Config', 'ConfigManager',
    'SessionError', 'ParseError', 'EvalError', 'FormatError', 'UsageError',
    'OutOfRangeError', 'UnknownCommandError', 'LoadError',
]
