"""
Errors — Session error taxonomy

Every failure a user can cause from the prompt is a SessionError.
The session loop catches them at the dispatch boundary and reports them;
none of them end the session.

- ParseError: malformed input text
- EvalError: build or evaluation failure of well-formed input
- FormatError: a value that has no source form
- UsageError: wrong argument count or shape for a command
- OutOfRangeError: history index that does not exist
- UnknownCommandError: command token that matches nothing
- LoadError: a file that cannot be read for injection or discovery
"""

from typing import List, Optional


class SessionError(Exception):
    """Base class for errors reported at the prompt."""

    label = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ParseError(SessionError):
    """Raised when source text does not parse."""

    def __init__(self, message: str, filename: str = "", line: int = 0, column: int = 0):
        self.filename = filename
        self.line = line
        self.column = column
        location = ""
        if line:
            location = f"{filename or '-'}:{line}:{column}: "
        super().__init__(f"{location}{message}")
        self.reason = message


class EvalError(SessionError):
    """Raised when the program or an expression fails to evaluate."""


class FormatError(SessionError):
    """Raised when a value or node cannot be rendered as source."""


class UsageError(SessionError):
    """Raised when a command is called with the wrong arguments."""

    def __init__(self, message: str, usage: Optional[str] = None):
        self.usage = usage
        if usage:
            message = f"{message} (usage: {usage})"
        super().__init__(message)


class OutOfRangeError(UsageError):
    """Raised when a history index does not exist."""


class UnknownCommandError(SessionError):
    """Raised for a command token that matches no known command."""

    def __init__(self, name: str, suggestions: Optional[List[str]] = None):
        self.name = name
        self.suggestions = suggestions or []
        message = f"unknown command {name!r}" if name else "missing command name"
        if self.suggestions:
            message += f"; did you mean {', '.join(self.suggestions)}?"
        super().__init__(message)


class LoadError(SessionError):
    """Raised when a source file cannot be read."""
