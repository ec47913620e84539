"""
Commands — Session command implementations with self-registration

Each command module:
1. Defines XxxCommand class (handler implementation)
2. Exports COMMAND, the Command variant it handles
3. Exports handle(session, command) to run it

Registry pattern enables:
- Locality: Handler next to its variant
- Exhaustiveness: register_all() refuses to finish with a variant unhandled
- Open/Closed: Add command = add variant, table row and module
"""

import importlib
from typing import Any, Callable, Dict, List, Type

from rapidfuzz import fuzz, process

from ..errors import UnknownCommandError
from .base import BaseCommand
from .model import (
    COMMAND_LOOKUP, COMMANDS, Command, Exit, Help, History, Inject, Lookup,
    Print, Restore, Save, Unknown, command_names, parse_command,
)

# Command modules that participate in auto-registration
COMMAND_MODULES = [
    'help_cmd',
    'print_cmd',
    'lookup',
    'inject',
    'save',
    'restore',
    'history',
    'exit_cmd',
]

# Handler registry: Command variant -> handle function
_handlers: Dict[Type[Command], Callable] = {}

# Minimum fuzz.ratio score (0-100) for a "did you mean" suggestion
SUGGESTION_CUTOFF = 50


def register_all() -> None:
    """
    Import every command module and register its handler.

    Raises:
        RuntimeError: a variant in the command table has no handler, or two
            modules claim the same variant
    """
    _handlers.clear()

    for module_name in COMMAND_MODULES:
        module = importlib.import_module(f'.{module_name}', __package__)
        variant = module.COMMAND
        if variant in _handlers:
            raise RuntimeError(f"{variant.__name__} registered twice ({module_name})")
        _handlers[variant] = module.handle

    missing = [spec.name for spec in COMMANDS if spec.variant not in _handlers]
    if missing:
        raise RuntimeError(f"commands without a handler: {', '.join(missing)}")


def suggestions(name: str, limit: int = 3) -> List[str]:
    """Closest known command names and aliases for an unknown token."""
    matches = process.extract(
        name, list(COMMAND_LOOKUP), scorer=fuzz.ratio, limit=limit, score_cutoff=SUGGESTION_CUTOFF
    )
    return [choice for choice, _score, _index in matches]


def dispatch(session: Any, command: Command) -> Any:
    """
    Dispatch a parsed command to its registered handler.

    Args:
        session: Session instance
        command: Parsed Command variant

    Returns:
        Result from handler (if any)

    Raises:
        UnknownCommandError: command is Unknown
    """
    if not _handlers:
        register_all()
    if isinstance(command, Unknown):
        raise UnknownCommandError(command.raw, suggestions(command.raw) if command.raw else [])
    handler = _handlers.get(type(command))
    if handler is None:
        raise RuntimeError(f"no handler registered for {type(command).__name__}")
    return handler(session, command)


def get_registered_commands() -> List[str]:
    """Get list of registered command names."""
    return [spec.name for spec in COMMANDS if spec.variant in _handlers]


__all__ = [
    'BaseCommand', 'register_all', 'dispatch', 'get_registered_commands',
    'parse_command', 'command_names', 'suggestions',
    'Command', 'Help', 'Print', 'Lookup', 'Inject', 'Save', 'Restore',
    'History', 'Exit', 'Unknown',
]
