"""
Help text for the cuesh session.

Placeholders are filled with the configured prefixes by render_help().
"""

from ..commands.model import COMMANDS


HELP_TEXT = """
cuesh -- interactive configuration session
==========================================

Type statements to grow the program, expressions to query it.


INPUT
-----

{input}


COMMANDS
--------

{commands}

  End of input (Ctrl-D) or Ctrl-C on an empty line also leaves.
"""

COLUMN = 28


def _row(left: str, right: str) -> str:
    return f"  {left:<{COLUMN}}{right}"


def render_help(command_prefix: str = ":", statement_prefix: str = "=",
                multiline_token: str = ";;") -> str:
    """Fill HELP_TEXT with the command table and the configured prefixes."""
    input_rows = [
        _row("a: 1", "Statement: added to the program"),
        _row("a + 1", "Expression: evaluated against the program"),
        _row(f"{statement_prefix}x: a", "Always added as a statement"),
        _row(f"{multiline_token} ... {multiline_token}", "Multi-line block, added as one statement"),
    ]
    command_rows = []
    for spec in COMMANDS:
        aliases = ", ".join(command_prefix + a for a in spec.aliases)
        command_rows.append(_row(spec.usage(command_prefix), f"{spec.summary} ({aliases})"))
    return HELP_TEXT.format(
        input="\n".join(input_rows),
        commands="\n".join(command_rows),
    ).strip("\n")
