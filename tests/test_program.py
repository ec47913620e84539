"""
Tests for Program — Accumulated source files

These tests validate:
- First addition becomes a whole file, later ones merge into it
- merge_fragment appends declarations, imports and unresolved markers in order
- A failed addition changes nothing, even the very first one
- copy() is independent
"""

import pytest

from cuesh.core.program import Program, SourceFile
from cuesh.errors import ParseError
from cuesh.lang.parser import parse_file


class TestMergeFragment:
    """The single splice operation."""

    def test_appends_in_order(self):
        """Fragment lists are appended after existing entries."""
        source = SourceFile.from_ast(parse_file("repl", 'import "strings"\na: 1'))
        source.merge_fragment(parse_file("repl", 'import "math"\nb: c'))
        assert [d.label for d in source.decls] == ["a", "b"]
        assert [spec.path for spec in source.imports] == ["strings", "math"]
        assert [ident.name for ident in source.unresolved] == ["c"]

    def test_existing_entries_do_not_move(self):
        """Earlier declarations are a prefix of the merged list."""
        source = SourceFile.from_ast(parse_file("repl", "a: 1\nb: 2"))
        before = list(source.decls)
        source.merge_fragment(parse_file("repl", "c: 3"))
        assert source.decls[:len(before)] == before


class TestAppend:
    """Program.append."""

    def test_first_addition_creates_file(self):
        """An empty program gains one file named repl."""
        program = Program()
        program.append("a: 1")
        assert len(program.files) == 1
        assert program.primary.name == "repl"

    def test_later_additions_merge_into_first_file(self):
        """Further additions do not create files."""
        program = Program()
        program.append("a: 1")
        program.append("b: 2")
        assert len(program.files) == 1
        assert [d.label for d in program.declarations()] == ["a", "b"]

    def test_failed_first_addition_leaves_program_empty(self):
        """A parse failure on an empty program leaves no file behind."""
        program = Program()
        with pytest.raises(ParseError):
            program.append("a: {")
        assert program.is_empty
        assert program.source() == ""

    def test_failed_later_addition_changes_nothing(self):
        """Serialized state is identical after a failed addition."""
        program = Program()
        program.append("a: 1")
        before = program.source()
        with pytest.raises(ParseError):
            program.append("b: ]")
        assert program.source() == before

    def test_add_file_keeps_files_separate(self):
        """add_file appends a new file."""
        program = Program()
        program.append("a: 1")
        program.add_file("extra.cue", "b: 2")
        assert [f.name for f in program.files] == ["repl", "extra.cue"]


class TestCopyAndSource:
    """Snapshots and canonical text."""

    def test_copy_is_independent(self):
        """Changing a copy leaves the original alone."""
        program = Program(module="example.com/m")
        program.append("a: 1")
        snapshot = program.copy()
        program.append("b: 2")
        assert len(snapshot.declarations()) == 1
        assert snapshot.module == "example.com/m"

    def test_source_has_file_headers(self):
        """Each file renders under a // name header."""
        program = Program()
        program.append("a:   1")
        program.add_file("x.cue", "b: 2")
        assert program.source() == "// repl\na: 1\n\n// x.cue\nb: 2\n"
