"""
Completion — What to suggest for a partial input line

completion_candidates() is best-effort by contract: if the program does
not build, field completion returns an empty list instead of raising.
An empty list therefore means either "nothing matches" or "nothing
could be computed"; callers must not treat it as a signal of either.

    ""            -> [":help", ":print", ...]
    ":"  / ":pr"  -> ["help", ...] / ["print"]
    "a + in"      -> labels of the current value starting with "in"
    ":l srv.po"   -> ["srv.port"]
"""

import re
from typing import List, TYPE_CHECKING

from ..commands.model import command_names
from ..errors import SessionError
from ..lang.values import Struct

if TYPE_CHECKING:
    from .session import Session


WORD = re.compile(r"[A-Za-z0-9_$.]*$")


def _command_word(text: str, prefix: str):
    """The partial command name when text is a prefix plus one word, else None."""
    stripped = text.lstrip()
    if not stripped.startswith(prefix):
        return None
    partial = stripped[len(prefix):]
    if any(c.isspace() for c in partial):
        return None
    return partial


def completion_word(text: str, prefix: str = ":") -> str:
    """The trailing part of text that a candidate replaces."""
    if not text.strip():
        return ""
    partial = _command_word(text, prefix)
    if partial is not None:
        return partial
    return WORD.search(text).group(0)


def field_candidates(session: 'Session', word: str) -> List[str]:
    """Labels of the current value that complete a (possibly dotted) word."""
    *path, partial = word.split(".")
    try:
        value = session.evaluator.value()
    except SessionError:
        return []
    target = value.lookup(path)
    if not isinstance(target, Struct):
        return []
    head = "".join(f"{label}." for label in path)
    return [head + label for label in target.labels() if label.startswith(partial)]


def completion_candidates(session: 'Session', text: str) -> List[str]:
    """
    Ordered completions for text (the input before the cursor).

    Command names come in display order, field labels in field order.
    """
    prefix = session.config.repl.command_prefix
    if not text.strip():
        return [prefix + name for name in command_names()]
    partial = _command_word(text, prefix)
    if partial is not None:
        return [name for name in command_names() if name.startswith(partial)]
    return field_candidates(session, completion_word(text, prefix))
