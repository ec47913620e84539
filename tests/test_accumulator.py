"""
Tests for ProgramAccumulator — All mutation of the session program

These tests validate:
- inject adds files (single file or directory), atomically
- reset to empty or to the rediscovered project
- transaction() restores the program on SessionError
"""

import pytest

from cuesh.core.accumulator import ResetSource
from cuesh.core.program import Program
from cuesh.errors import EvalError, LoadError, ParseError


class TestInject:
    """File injection."""

    def test_inject_file(self, factory):
        """An injected file becomes its own program file."""
        factory.write("extra.cue", "b: 2")
        acc = factory.accumulator()
        acc.append("a: 1")
        added = acc.inject("extra.cue")
        assert [f.name for f in added] == ["extra.cue"]
        assert [f.name for f in acc.program.files] == ["repl", "extra.cue"]

    def test_inject_directory(self, factory):
        """Every source file of a directory is added in name order."""
        factory.write("conf/b.cue", "b: 2")
        factory.write("conf/a.cue", "a: 1")
        factory.write("conf/notes.txt", "ignored")
        acc = factory.accumulator()
        acc.inject("conf")
        assert [f.name for f in acc.program.files] == ["conf/a.cue", "conf/b.cue"]

    def test_inject_missing_file(self, factory):
        """A missing file is a LoadError and adds nothing."""
        acc = factory.accumulator()
        with pytest.raises(LoadError, match="no such file"):
            acc.inject("missing.cue")
        assert acc.program.is_empty

    def test_inject_empty_directory(self, factory):
        """A directory without source files is a LoadError."""
        (factory.directory / "empty").mkdir()
        with pytest.raises(LoadError, match="no source files"):
            factory.accumulator().inject("empty")

    def test_inject_is_atomic(self, factory):
        """One bad file in a directory adds none of them."""
        factory.write("conf/a.cue", "a: 1")
        factory.write("conf/b.cue", "b: {")
        acc = factory.accumulator()
        with pytest.raises(ParseError):
            acc.inject("conf")
        assert acc.program.is_empty

    def test_inject_absolute_path(self, factory):
        """Absolute paths are used as given."""
        path = factory.write("abs.cue", "a: 1")
        acc = factory.accumulator()
        acc.inject(str(path))
        assert len(acc.program.files) == 1


class TestReset:
    """Program replacement."""

    def test_reset_empty(self, factory):
        """EMPTY discards everything."""
        acc = factory.accumulator()
        acc.append("a: 1")
        acc.reset(ResetSource.EMPTY)
        assert acc.program.is_empty

    def test_reset_project_reloads_files(self, factory):
        """PROJECT rediscovers the project files."""
        factory.make_project({"base.cue": "a: 1"})
        acc = factory.accumulator()
        acc.append("b: 2")
        acc.reset(ResetSource.PROJECT)
        assert [f.name for f in acc.program.files] == ["base.cue"]
        assert acc.module == "example.com/demo"

    def test_reset_project_outside_project(self, factory):
        """PROJECT falls back to empty, keeping the module name."""
        acc = factory.accumulator(Program(module="example.com/gone"))
        acc.append("a: 1")
        acc.reset(ResetSource.PROJECT)
        assert acc.program.is_empty
        assert acc.module == "example.com/gone"

    def test_reset_uses_injected_discovery(self, factory):
        """Discovery is a collaborator."""
        seen = []

        def discover(directory):
            seen.append(directory)
            return Program(module="stub")

        acc = factory.accumulator()
        acc._discover = discover
        acc.reset(ResetSource.PROJECT)
        assert seen == [factory.directory]
        assert acc.module == "stub"


class TestTransaction:
    """Rollback on failure."""

    def test_rolls_back_on_session_error(self, factory):
        """Changes inside a failed block are undone."""
        acc = factory.accumulator()
        acc.append("a: 1")
        before = acc.program.source()
        with pytest.raises(EvalError):
            with acc.transaction():
                acc.append("b: 2")
                raise EvalError("boom")
        assert acc.program.source() == before

    def test_keeps_changes_on_success(self, factory):
        """A block that finishes keeps its changes."""
        acc = factory.accumulator()
        with acc.transaction():
            acc.append("a: 1")
        assert len(acc.program.declarations()) == 1

    def test_other_exceptions_propagate_unchanged(self, factory):
        """Only SessionError triggers rollback."""
        acc = factory.accumulator()
        with pytest.raises(KeyError):
            with acc.transaction():
                acc.append("a: 1")
                raise KeyError("x")
        assert len(acc.program.declarations()) == 1
