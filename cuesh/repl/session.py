"""
Session — Explicit owner of all session state

A Session holds the program accumulator, the checkpoint history, the
input mode and the output stream. Nothing lives in module globals; the
front end creates one Session and feeds it lines:

    session = Session.start(Path.cwd(), config=config)
    while not session.closed:
        session.handle_line(read())

Each line runs to completion before the next is read. Every
SessionError is caught in handle_line() and reported as one
"error: ..." line; the session carries on.
"""

import os
import sys
import traceback
from pathlib import Path
from typing import List, Optional

from ..commands import dispatch, parse_command
from ..config import Config
from ..core.accumulator import ProgramAccumulator, ResetSource
from ..core.discovery import discover_project
from ..core.evaluation import EXPRESSION_FILENAME, ExpressionEvaluator
from ..core.history import History, HistoryEntry
from ..errors import ParseError, SessionError
from ..lang.parser import parse_expression
from ..lang.values import Value
from ..presentation.formatters import format_error, format_value
from ..presentation.symbols import SymbolSet, color_enabled, colorize, get_symbols, safe_print
from .completion import completion_candidates
from .input_mode import Entry, EntryKind, InputModeController


def _is_debug_mode() -> bool:
    """Check if debug mode is enabled via CUESH_DEBUG environment variable."""
    return os.environ.get('CUESH_DEBUG', '').lower() in ('1', 'true', 'yes')


def _furthest(first: ParseError, second: ParseError) -> ParseError:
    """The error of whichever reading got further into the text."""
    if (second.line, second.column) > (first.line, first.column):
        return second
    return first


class Session:
    """
    One interactive session.

    Args:
        accumulator: Program holder, already loaded with the initial program
        config: Configuration (defaults when None)
        out: Output stream (sys.stdout when None)
        symbols: Symbol set (from config.display.symbols when None)
        color: Force ANSI colour on or off (from config.display.color when None)
        reset_source: What save and restore reset to (PROJECT when the
            initial program came from a project)

    Raises:
        EvalError: the initial program does not build
    """

    def __init__(self, accumulator: ProgramAccumulator, config: Optional[Config] = None,
                 out=None, symbols: Optional[SymbolSet] = None, color: Optional[bool] = None,
                 reset_source: Optional[ResetSource] = None):
        self.config = config or Config()
        self.accumulator = accumulator
        self.evaluator = ExpressionEvaluator(accumulator)
        self.out = out
        self.symbols = symbols or get_symbols(self.config.display.symbols)
        self.color = color if color is not None else color_enabled(
            self.config.display.color, out if out is not None else sys.stdout
        )
        if reset_source is None:
            reset_source = ResetSource.PROJECT if accumulator.module else ResetSource.EMPTY
        self.reset_source = reset_source

        repl = self.config.repl
        self.input_mode = InputModeController(
            command_prefix=repl.command_prefix,
            statement_prefix=repl.statement_prefix,
            multiline_token=repl.multiline_token,
        )
        self.history = History(self.evaluator.value())
        self.closed = False

    @classmethod
    def start(cls, directory: Path, config: Optional[Config] = None,
              discover: bool = True, **kwargs) -> 'Session':
        """
        Start a session in directory.

        With discover, a project directory pre-loads its files; otherwise
        (or outside a project) the program starts empty.

        Raises:
            LoadError, ParseError: a project file cannot be loaded
            EvalError: the project does not build
        """
        directory = Path(directory)
        program = discover_project(directory) if discover else None
        accumulator = ProgramAccumulator(directory, program)
        reset_source = ResetSource.PROJECT if program is not None else ResetSource.EMPTY
        return cls(accumulator, config=config, reset_source=reset_source, **kwargs)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def module(self) -> Optional[str]:
        return self.accumulator.module

    @property
    def mode_line(self) -> str:
        if self.module:
            return f"(running in module {self.module})"
        return "(running in freestyle mode)"

    @property
    def prompt(self) -> str:
        marker = self.symbols.continuation if self.input_mode.accumulating else self.symbols.prompt
        return f"{colorize(marker, 'blue', self.color)} "

    def close(self) -> None:
        self.closed = True

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def emit(self, text: str) -> None:
        safe_print(text, file=self.out)

    def report(self, message: str) -> None:
        self.emit(format_error(message, self.color))

    def show(self, value: Value) -> None:
        self.emit(format_value(value))

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def checkpoint(self) -> HistoryEntry:
        """Build the program and record its value. EvalError leaves History unchanged."""
        return self.history.checkpoint(self.evaluator.value())

    def add_statement(self, text: str) -> None:
        """
        Add statement text to the program and checkpoint.

        A parse failure, or a program that no longer builds, leaves both
        the program and the history as they were.
        """
        if not text.strip():
            return
        with self.accumulator.transaction():
            self.accumulator.append(text)
            self.checkpoint()

    def evaluate(self, text: str) -> Value:
        """Evaluate an expression against the program without changing it."""
        return self.evaluator.eval_expression(text)

    def run_command(self, text: str):
        """Parse and dispatch one command line (prefix optional)."""
        command = parse_command(text, self.config.repl.command_prefix)
        return dispatch(self, command)

    def handle_input(self, text: str) -> None:
        """
        Unprefixed input: evaluate it when it reads as an expression,
        otherwise add it as a statement.
        """
        try:
            parse_expression(EXPRESSION_FILENAME, text)
        except ParseError as expr_error:
            try:
                self.add_statement(text)
            except ParseError as stmt_error:
                raise _furthest(stmt_error, expr_error) from None
            return
        self.show(self.evaluate(text))

    def dispatch(self, entry: Entry) -> None:
        if entry.kind is EntryKind.COMMAND:
            self.run_command(entry.text)
        elif entry.kind is EntryKind.STATEMENT:
            self.add_statement(entry.text)
        else:
            self.handle_input(entry.text)

    def handle_line(self, line: str) -> Optional[Entry]:
        """
        Feed one raw line through the input mode and dispatch what it completes.

        Returns:
            The dispatched Entry (whether or not it succeeded), or None when
            the line completed nothing
        """
        entry = self.input_mode.feed(line)
        if entry is None:
            return None
        try:
            self.dispatch(entry)
        except SessionError as e:
            self.report(e.message)
            if _is_debug_mode():
                traceback.print_exc(file=self.out if self.out is not None else sys.stderr)
        return entry

    def complete(self, text: str) -> List[str]:
        """Best-effort completion candidates for text."""
        return completion_candidates(self, text)
