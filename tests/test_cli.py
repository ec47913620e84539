"""
Tests for the CLI — Argument handling and the non-interactive session
"""

import io

import pytest

from cuesh import __version__
from cuesh.cli import FAREWELL, WELCOME, main, run_repl


def run(directory, text, **kwargs):
    out = io.StringIO()
    status = run_repl(directory, stdin=io.StringIO(text), out=out,
                      user_dir=directory.parent / "user", **kwargs)
    return status, out.getvalue().splitlines()


class TestMain:
    """Argument parsing."""

    def test_version(self, capsys):
        """--version prints the version and exits."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        """Without a command, usage is shown."""
        assert main([]) == 0
        assert "repl" in capsys.readouterr().out


class TestRunRepl:
    """Sessions fed from a stream."""

    def test_freestyle_session(self, factory):
        """Welcome, mode line, output, farewell."""
        status, lines = run(factory.directory, "a: 1\na + 1\n")
        assert status == 0
        assert lines == [WELCOME, "(running in freestyle mode)", "2", FAREWELL]

    def test_project_session(self, factory):
        """A project is discovered and named."""
        factory.make_project({"a.cue": "a: 1"})
        status, lines = run(factory.directory, ":lookup a\n")
        assert lines[1] == "(running in module example.com/demo)"
        assert lines[2] == "1"

    def test_no_discover(self, factory):
        """discover=False ignores the project."""
        factory.make_project({"a.cue": "a: 1"})
        status, lines = run(factory.directory, ":lookup a\n", discover=False)
        assert lines[1] == "(running in freestyle mode)"
        assert lines[2] == "error: no value"

    def test_exit_command(self, factory):
        """exit ends the session before the rest of the input."""
        status, lines = run(factory.directory, ":exit\na: 1\na\n")
        assert status == 0
        assert lines == [WELCOME, "(running in freestyle mode)", FAREWELL]

    def test_errors_do_not_change_status(self, factory):
        """Line errors are reported, the exit status stays 0."""
        status, lines = run(factory.directory, "nowhere\n")
        assert status == 0
        assert lines[2].startswith("error: ")

    def test_invalid_config_fails(self, factory, capsys):
        """Invalid configuration stops startup with status 1."""
        user = factory.directory.parent / "user"
        user.mkdir()
        (user / "config.yaml").write_text("repl:\n  command_prefix: '='\n")
        status, lines = run(factory.directory, "a: 1\n")
        assert status == 1
        assert lines == []
        assert capsys.readouterr().err.startswith("error: invalid configuration")

    def test_history_file_wrong_type_fails(self, factory, capsys):
        """A numeric history_file is a configuration error, not a crash."""
        user = factory.directory.parent / "user"
        user.mkdir()
        (user / "config.yaml").write_text("repl:\n  history_file: 5\n")
        status, lines = run(factory.directory, "a: 1\n")
        assert status == 1
        assert lines == []
        err = capsys.readouterr().err
        assert err.startswith("error: invalid configuration")
        assert "history_file" in err

    def test_broken_project_fails(self, factory, capsys):
        """A project that does not parse stops startup with status 1."""
        factory.make_project({"a.cue": "a: {"})
        status, lines = run(factory.directory, "")
        assert status == 1
        assert capsys.readouterr().err.startswith("error: ")
