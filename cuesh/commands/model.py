"""
Command model — Tagged command variants and the command-line parser

parse_command() is the only place command text is tokenised. It turns
a prefixed line into exactly one variant:

    :print          -> Print()
    :l a.b          -> Lookup(path=("a", "b"))
    :restore 2      -> Restore(index=2)
    :frobnicate     -> Unknown(raw="frobnicate")

Argument counts are checked here, so a handler never sees a malformed
command.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple, Type

from ..errors import UsageError


# =============================================================================
# Variants
# =============================================================================

class Command:
    """Base class for parsed commands."""


@dataclass(frozen=True)
class Help(Command):
    pass


@dataclass(frozen=True)
class Print(Command):
    pass


@dataclass(frozen=True)
class Lookup(Command):
    path: Tuple[str, ...]


@dataclass(frozen=True)
class Inject(Command):
    ref: str


@dataclass(frozen=True)
class Save(Command):
    path: Tuple[str, ...]


@dataclass(frozen=True)
class Restore(Command):
    index: int


@dataclass(frozen=True)
class History(Command):
    pass


@dataclass(frozen=True)
class Exit(Command):
    pass


@dataclass(frozen=True)
class Unknown(Command):
    raw: str


# =============================================================================
# Command table
# =============================================================================

@dataclass(frozen=True)
class CommandSpec:
    """Name, aliases, argument placeholders and one-line summary of a command."""
    name: str
    aliases: Tuple[str, ...]
    args: Tuple[str, ...]
    summary: str
    variant: Type[Command]

    def usage(self, prefix: str = ":") -> str:
        return " ".join((f"{prefix}{self.name}",) + tuple(f"<{a}>" for a in self.args))


# Order determines help display order
COMMANDS: List[CommandSpec] = [
    CommandSpec("help", ("?",), (), "show this help", Help),
    CommandSpec("print", ("p",), (), "print the current value", Print),
    CommandSpec("lookup", ("l",), ("path",), "print the value at a dotted path", Lookup),
    CommandSpec("inject", ("i",), ("file",), "add a file or directory of files to the program", Inject),
    CommandSpec("save", ("s",), ("path",), "move the current value under a dotted path", Save),
    CommandSpec("restore", ("r",), ("index",), "reset the program to a history entry", Restore),
    CommandSpec("history", ("h",), (), "list every checkpointed value", History),
    CommandSpec("exit", ("q", "quit"), (), "leave the session", Exit),
]

# name or alias -> spec
COMMAND_LOOKUP: Dict[str, CommandSpec] = {
    key: spec for spec in COMMANDS for key in (spec.name,) + spec.aliases
}


def command_names() -> List[str]:
    """Long command names in display order."""
    return [spec.name for spec in COMMANDS]


def spec_for(variant: Type[Command]) -> CommandSpec:
    for spec in COMMANDS:
        if spec.variant is variant:
            return spec
    raise KeyError(variant.__name__)


# =============================================================================
# Parser
# =============================================================================

def parse_path(text: str) -> Tuple[str, ...]:
    """Split a dotted path; empty labels are not allowed."""
    labels = tuple(text.split("."))
    if any(not label for label in labels):
        raise UsageError(f"invalid path {text!r}")
    return labels


def _parse_index(text: str, usage: str) -> int:
    try:
        index = int(text)
    except ValueError:
        raise UsageError(f"history index must be an integer, got {text!r}", usage)
    if index < 0:
        raise UsageError(f"history index must not be negative, got {index}", usage)
    return index


def parse_command(text: str, prefix: str = ":") -> Command:
    """
    Parse a command line into a Command variant.

    Args:
        text: The line, with or without the leading prefix
        prefix: Command prefix to strip

    Returns:
        The parsed variant; Unknown for a token that names no command

    Raises:
        UsageError: wrong number of arguments, bad path or bad index
    """
    if prefix and text.startswith(prefix):
        text = text[len(prefix):]
    fields = text.split()
    if not fields:
        return Unknown("")

    name, args = fields[0], fields[1:]
    spec = COMMAND_LOOKUP.get(name)
    if spec is None:
        return Unknown(name)

    usage = spec.usage(prefix)
    if len(args) != len(spec.args):
        expected = len(spec.args)
        plural = "" if expected == 1 else "s"
        raise UsageError(f"{spec.name} takes {expected} argument{plural}, got {len(args)}", usage)

    if spec.variant is Lookup:
        return Lookup(parse_path(args[0]))
    if spec.variant is Save:
        return Save(parse_path(args[0]))
    if spec.variant is Inject:
        return Inject(args[0])
    if spec.variant is Restore:
        return Restore(_parse_index(args[0], usage))
    return spec.variant()
