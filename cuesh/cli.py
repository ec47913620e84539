"""
CLI — Command-line entry point

    cuesh repl [--no-discover] [--directory DIR]
    cuesh --version

Startup failures (no home directory, invalid configuration, a project
that does not load, a line editor that cannot start) print one error
line to stderr and exit 1. Every normal way of leaving the session
exits 0.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from . import __version__
from .config import ConfigManager
from .errors import SessionError
from .presentation.formatters import format_error
from .presentation.symbols import safe_print
from .repl.session import Session, _is_debug_mode
from .repl.terminal import create_prompt_session, prompt_reader, run_loop, stream_reader


WELCOME = "Welcome to the cuesh repl"
FAREWELL = "bye"


def _fail(message: str) -> int:
    safe_print(format_error(message), file=sys.stderr)
    if _is_debug_mode():
        import traceback
        traceback.print_exc()
    return 1


def run_repl(directory: Path, discover: Optional[bool] = None,
             stdin: Optional[TextIO] = None, out: Optional[TextIO] = None,
             user_dir: Optional[Path] = None) -> int:
    """
    Run an interactive session until it ends.

    Args:
        directory: Session directory (project discovery, injected paths)
        discover: Override repl.discover from configuration
        stdin: Input stream (sys.stdin); the line editor is used only for a terminal
        out: Output stream (sys.stdout)
        user_dir: User configuration directory (~/.config/cuesh)

    Returns:
        Process exit status
    """
    stdin = stdin if stdin is not None else sys.stdin
    out = out if out is not None else sys.stdout

    try:
        config = ConfigManager(directory, user_dir=user_dir).load()
    except RuntimeError as e:
        return _fail(str(e))
    error = config.validate()
    if error:
        return _fail(f"invalid configuration: {error}")
    if discover is None:
        discover = config.repl.discover

    try:
        session = Session.start(directory, config=config, discover=discover, out=out)
    except SessionError as e:
        return _fail(e.message)

    if stdin.isatty():
        try:
            prompt_session = create_prompt_session(session, config.repl.history_path())
        except (OSError, RuntimeError) as e:
            return _fail(f"cannot start line editor: {e}")
        read_line, record = prompt_reader(prompt_session), prompt_session.history.record
    else:
        read_line, record = stream_reader(stdin), None

    session.emit(WELCOME)
    session.emit(session.mode_line)
    run_loop(session, read_line, record)
    session.emit(FAREWELL)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the cuesh CLI.

    Returns:
        Process exit status
    """
    parser = argparse.ArgumentParser(
        prog="cuesh",
        description="cuesh -- interactive session for CUE-style configuration",
        epilog="Statements grow the program. Expressions query it."
    )

    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'cuesh {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    p = subparsers.add_parser('repl', help='Start an interactive session')
    p.add_argument(
        '--no-discover',
        dest='discover',
        action='store_false',
        default=None,
        help='Start empty even inside a project (default: load project files)'
    )
    p.add_argument(
        '--directory', '-C',
        default='.',
        help='Session directory (default: current)'
    )

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    return run_repl(Path(args.directory), discover=args.discover)


if __name__ == '__main__':
    sys.exit(main())
