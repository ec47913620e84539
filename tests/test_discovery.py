"""
Tests for project discovery — cue.mod detection and file loading
"""

import pytest

from cuesh.core.discovery import discover_project, find_project, read_source
from cuesh.errors import LoadError, ParseError


class TestFindProject:
    """Project detection."""

    def test_not_a_project(self, factory):
        """A directory without cue.mod is freestyle."""
        factory.write("a.cue", "a: 1")
        assert find_project(factory.directory) is None
        assert discover_project(factory.directory) is None

    def test_module_name_from_module_file(self, factory):
        """module.cue names the module."""
        factory.make_project({}, module="example.com/app")
        assert find_project(factory.directory).module == "example.com/app"

    def test_module_name_falls_back_to_directory(self, factory):
        """Without module.cue the directory name is used."""
        factory.make_project({}, module=None)
        assert find_project(factory.directory).module == "work"

    def test_files_sorted_and_filtered(self, factory):
        """Only *.cue files directly in the root, in name order."""
        factory.make_project({"b.cue": "b: 1", "a.cue": "a: 1", "README.md": "x", "sub/c.cue": "c: 1"})
        project = find_project(factory.directory)
        assert [p.name for p in project.files] == ["a.cue", "b.cue"]


class TestDiscoverProject:
    """Initial program assembly."""

    def test_program_holds_every_file(self, factory):
        """Each project file is a program file; the module is kept."""
        factory.make_project({"a.cue": "a: 1", "b.cue": "b: a"})
        program = discover_project(factory.directory)
        assert [f.name for f in program.files] == ["a.cue", "b.cue"]
        assert program.module == "example.com/demo"

    def test_bad_file_fails(self, factory):
        """A project file that does not parse fails discovery."""
        factory.make_project({"a.cue": "a: {"})
        with pytest.raises(ParseError):
            discover_project(factory.directory)


class TestReadSource:
    """File reading."""

    def test_directory_is_not_a_file(self, factory):
        """Reading a directory is a LoadError."""
        with pytest.raises(LoadError):
            read_source(factory.directory)

    def test_invalid_utf8(self, factory):
        """Undecodable bytes are a LoadError."""
        path = factory.directory / "bad.cue"
        path.write_bytes(b"a: \"\xff\"")
        with pytest.raises(LoadError):
            read_source(path)
