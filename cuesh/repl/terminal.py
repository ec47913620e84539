"""
Terminal — Line editor front end and the read loop

The session decides what a line means; this module only gets lines to
it:
- prompt_toolkit PromptSession with persistent history and completion
  when stdin is a terminal
- plain line reading otherwise (pipes, files, tests)

Interrupts follow the usual shell convention: Ctrl-C on an empty line
leaves, Ctrl-C with text on the line discards the text only.
"""

from pathlib import Path
from typing import Callable, Iterable, Optional, TextIO

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.history import FileHistory
from prompt_toolkit.key_binding import KeyBindings

from .completion import completion_word
from .session import Session


class LineInterrupted(Exception):
    """Ctrl-C with text on the line: drop the line, keep the session."""


ReadLine = Callable[[str], str]
Record = Callable[[str], None]


# =============================================================================
# prompt_toolkit integration
# =============================================================================

class SessionHistory(FileHistory):
    """
    File history that stores only what the session dispatched.

    prompt_toolkit appends every accepted line on its own; that is turned
    off so a multi-line block is stored once, as the joined block.
    """

    def append_string(self, string: str) -> None:
        pass

    def record(self, string: str) -> None:
        super().append_string(string)


class SessionCompleter(Completer):
    """Completes command names and field labels from the live session."""

    def __init__(self, session: Session):
        self.session = session

    def get_completions(self, document, complete_event) -> Iterable[Completion]:
        text = document.text_before_cursor
        word = completion_word(text, self.session.config.repl.command_prefix)
        for candidate in self.session.complete(text):
            yield Completion(candidate, start_position=-len(word))


def interrupt_bindings() -> KeyBindings:
    bindings = KeyBindings()

    @bindings.add("c-c")
    def _(event):
        if event.current_buffer.text:
            event.app.exit(exception=LineInterrupted())
        else:
            event.app.exit(exception=KeyboardInterrupt())

    return bindings


def create_prompt_session(session: Session, history_path: Path) -> PromptSession:
    """
    Build the line editor for a session.

    The history file's directory is created when missing.

    Raises:
        OSError: the history directory cannot be created or no terminal is available
    """
    history_path = Path(history_path)
    history_path.parent.mkdir(parents=True, exist_ok=True)
    return PromptSession(
        history=SessionHistory(str(history_path)),
        completer=SessionCompleter(session),
        key_bindings=interrupt_bindings(),
        complete_while_typing=False,
    )


def prompt_reader(prompt_session: PromptSession) -> ReadLine:
    def read_line(prompt: str) -> str:
        return prompt_session.prompt(ANSI(prompt))
    return read_line


# =============================================================================
# Plain input
# =============================================================================

def stream_reader(stream: TextIO) -> ReadLine:
    """Read lines from a stream without prompting; EOFError at end of input."""
    def read_line(prompt: str) -> str:
        line = stream.readline()
        if not line:
            raise EOFError
        return line.rstrip("\n")
    return read_line


# =============================================================================
# Loop
# =============================================================================

def run_loop(session: Session, read_line: ReadLine, record: Optional[Record] = None) -> None:
    """
    Read and handle lines until the session closes or input ends.

    Args:
        session: The session to feed
        read_line: Returns the next line; raises EOFError at end of input,
            KeyboardInterrupt to leave, LineInterrupted to drop the line
        record: Receives the source text of every dispatched entry
    """
    while not session.closed:
        try:
            line = read_line(session.prompt)
        except LineInterrupted:
            continue
        except (EOFError, KeyboardInterrupt):
            break
        entry = session.handle_line(line)
        if entry is not None and record is not None:
            record(entry.source)
