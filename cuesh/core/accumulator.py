"""
ProgramAccumulator — Owns the session's Program

All mutation of the Program goes through here:
- append(): typed statements (whole file first, fragments after)
- inject(): external files, each kept as its own file
- reset(): replace the Program with an empty or freshly discovered one
- transaction(): roll back every change made inside the block on failure

A failed call leaves the Program exactly as it was.
"""

from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Callable, Iterator, List, Optional

from ..errors import LoadError, SessionError
from .discovery import discover_project, parse_sources, source_files
from .program import Program, SourceFile


class ResetSource(Enum):
    """What a reset starts from."""
    EMPTY = "empty"
    PROJECT = "project"


Discover = Callable[[Path], Optional[Program]]


class ProgramAccumulator:
    """
    Mutable holder of the accumulated Program.

    Args:
        directory: Session directory; injected paths and discovery are relative to it
        program: Initial program (empty when None)
        discover: Project discovery collaborator used by reset(PROJECT)
    """

    def __init__(self, directory: Path, program: Optional[Program] = None,
                 discover: Discover = discover_project):
        self.directory = Path(directory)
        self.program = program if program is not None else Program()
        self._discover = discover

    @property
    def module(self) -> Optional[str]:
        return self.program.module

    def append(self, text: str) -> None:
        """Add statement text. ParseError leaves the Program unchanged."""
        self.program.append(text)

    def inject(self, ref: str) -> List[SourceFile]:
        """
        Add a file, or every source file of a directory, as new files.

        All files are parsed before any is added.

        Raises:
            LoadError: path missing, unreadable, or a directory with no source files
            ParseError: a file does not parse
        """
        path = Path(ref).expanduser()
        if not path.is_absolute():
            path = self.directory / path
        if path.is_dir():
            paths = source_files(path)
            if not paths:
                raise LoadError(f"{ref}: no source files in directory")
        else:
            paths = [path]
        parsed = parse_sources(paths, base=self.directory)
        added = [SourceFile.from_ast(p) for p in parsed]
        self.program.files.extend(added)
        return added

    def reset(self, source: ResetSource = ResetSource.EMPTY) -> None:
        """
        Replace the Program.

        PROJECT re-runs discovery and falls back to an empty Program when
        the directory is no longer a project.
        """
        if source is ResetSource.PROJECT:
            discovered = self._discover(self.directory)
            if discovered is not None:
                self.program = discovered
                return
        self.program = Program(module=self.program.module)

    def snapshot(self) -> Program:
        return self.program.copy()

    def rollback(self, snapshot: Program) -> None:
        self.program = snapshot

    @contextmanager
    def transaction(self) -> Iterator[Program]:
        """Restore the Program if a SessionError escapes the block."""
        snapshot = self.snapshot()
        try:
            yield self.program
        except SessionError:
            self.rollback(snapshot)
            raise
