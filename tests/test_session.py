"""
Tests for Session — Line handling from input to output

These tests validate:
- A full interactive exchange
- Statements only ever add; queries never change the program
- A failed line changes nothing
- Save and restore round trips
"""

import pytest

from cuesh.core.accumulator import ResetSource
from cuesh.errors import EvalError, ParseError


class TestInteractiveExchange:
    """The canonical session."""

    def test_walkthrough(self, factory):
        """Statement, print, expression, lookups and history."""
        factory.feed("a: 1", ":print", "a+1", ":lookup a", ":lookup b", ":history")
        assert factory.lines() == [
            "{", "\ta: 1", "}",
            "2",
            "1",
            "error: no value",
            "====", "0", "{}", "----", "1", "{", "\ta: 1", "}", "====",
        ]

    def test_statement_prints_nothing(self, factory):
        """Adding a statement is silent."""
        factory.feed("a: 1", "=b: 2")
        assert factory.output() == ""

    def test_multiline_block(self, factory):
        """A block is one statement and one checkpoint."""
        session = factory.session()
        factory.feed(";;", "x: 1", "y: x + 1", ";;", ":lookup y")
        assert factory.lines() == ["2"]
        assert len(session.history) == 2

    def test_closed_after_exit(self, factory):
        """exit closes; the session does not reopen."""
        session = factory.session()
        factory.feed(":q")
        assert session.closed


class TestClassification:
    """Bare input: expression or statement."""

    def test_expression_does_not_change_program(self, factory):
        """Evaluating leaves program and history alone."""
        session = factory.session_with("a: 1")
        before = session.accumulator.program.source()
        factory.feed("a * 3")
        assert factory.lines() == ["3"]
        assert session.accumulator.program.source() == before
        assert len(session.history) == 2

    def test_declaration_is_statement(self, factory):
        """A declaration list is added."""
        session = factory.session()
        factory.feed("a: 1, b: 2")
        assert session.evaluator.value().labels() == ["a", "b"]

    def test_statement_prefix_forces_statement(self, factory):
        """A prefixed line is never evaluated."""
        factory.feed("=x: 1")
        assert factory.output() == ""

    def test_neither_reports_furthest_error(self, factory):
        """Text that is neither reports one parse error."""
        session = factory.session()
        factory.feed("a: }")
        lines = factory.lines()
        assert len(lines) == 1 and lines[0].startswith("error: ")
        assert session.accumulator.program.is_empty


class TestFailureIsolation:
    """A failing line leaves the session as it was."""

    def test_unresolved_statement_rolled_back(self, factory):
        """A statement that breaks the build is not kept."""
        session = factory.session_with("a: 1")
        before = session.accumulator.program.source()
        factory.feed("b: nowhere")
        assert factory.lines()[0].startswith('error: reference "nowhere" not found')
        assert session.accumulator.program.source() == before
        assert len(session.history) == 2

    def test_bad_expression(self, factory):
        """An expression error is reported and the session continues."""
        factory.session_with("a: 1")
        factory.feed("a / 0", "a")
        assert factory.lines() == ["error: division by zero", "1"]

    def test_conflict_is_kept(self, factory):
        """Conflicting statements are added; the conflict shows in the value."""
        session = factory.session_with("a: 1")
        factory.feed("a: 2", ":print")
        assert len(session.history) == 3
        assert "_|_" in factory.output()

    def test_usage_error(self, factory):
        """A malformed command is reported with its usage."""
        factory.feed(":restore")
        assert factory.lines() == ["error: restore takes 1 argument, got 0 (usage: :restore <index>)"]

    def test_long_statement_is_reported(self, factory):
        """A chain deeper than the recursion limit is an error line, not a crash."""
        session = factory.session()
        factory.feed("=a: " + "1+" * 5000 + "1", "b: 2", ":lookup b")
        assert factory.lines() == ["error: expression nested too deeply", "2"]
        assert not session.closed
        assert len(session.history) == 2

    def test_deep_parentheses_are_reported(self, factory):
        """Deeply nested input is reported and the session carries on."""
        session = factory.session()
        factory.feed("(" * 2000 + "1" + ")" * 2000, "1 + 1")
        lines = factory.lines()
        assert len(lines) == 2
        assert lines[0].startswith("error: ")
        assert lines[1] == "2"
        assert session.accumulator.program.is_empty
        with pytest.raises(ParseError, match="nested too deeply"):
            session.evaluate("(" * 2000 + "1" + ")" * 2000)

    def test_debug_mode_prints_traceback(self, factory, monkeypatch):
        """CUESH_DEBUG adds a traceback after the error line."""
        monkeypatch.setenv("CUESH_DEBUG", "1")
        factory.feed("zzz")
        assert "Traceback" in factory.output()


class TestMonotonicity:
    """Statements only add."""

    def test_earlier_fields_survive(self, factory):
        """Each checkpoint keeps every earlier label."""
        session = factory.session_with("a: 1", "b: 2", "c: {d: 3}")
        labels = [entry.value.labels() for entry in session.history]
        assert labels == [[], ["a"], ["a", "b"], ["a", "b", "c"]]

    def test_empty_statement_is_noop(self, factory):
        """Blank statements add nothing and checkpoint nothing."""
        session = factory.session()
        session.add_statement("   ")
        assert len(session.history) == 1
        assert session.accumulator.program.is_empty


class TestRoundTrip:
    """save and restore"""

    def test_restore_reproduces_value(self, factory):
        """Restoring entry N makes the current value equal entry N's value."""
        session = factory.session_with("a: 1", 'b: "x"', "c: [1, 2]")
        factory.feed(":restore 2")
        assert session.evaluator.value() == session.history.get(2).value

    def test_save_then_restore_original(self, factory):
        """The pre-save value can be restored after saving."""
        session = factory.session_with("a: 1")
        factory.feed(":save wrapped", ":restore 1")
        assert session.evaluator.value() == session.history.get(1).value
        assert len(session.history) == 4


class TestProjectSession:
    """Sessions started in a project."""

    def test_mode_lines(self, factory):
        """Freestyle and module sessions describe themselves."""
        assert factory.session().mode_line == "(running in freestyle mode)"
        factory.make_project({"a.cue": "a: 1"})
        session = factory.session(discover=True)
        assert session.mode_line == "(running in module example.com/demo)"
        assert session.reset_source is ResetSource.PROJECT

    def test_project_value_is_entry_zero(self, factory):
        """The project's value is the first checkpoint."""
        factory.make_project({"a.cue": "a: 1", "b.cue": "b: a + 1"})
        session = factory.session(discover=True)
        assert session.history.get(0).value.labels() == ["a", "b"]

    def test_statements_extend_project(self, factory):
        """Typed statements see project fields."""
        factory.make_project({"a.cue": "a: 1"})
        factory.session(discover=True)
        factory.feed("c: a + 5", ":lookup c")
        assert factory.lines() == ["6"]

    def test_no_discover(self, factory):
        """discover=False starts empty even in a project."""
        factory.make_project({"a.cue": "a: 1"})
        session = factory.session(discover=False)
        assert session.accumulator.program.is_empty
        assert session.reset_source is ResetSource.EMPTY

    def test_broken_project_fails_start(self, factory):
        """A project that does not build cannot start a session."""
        factory.make_project({"a.cue": "a: nowhere"})
        with pytest.raises(EvalError):
            factory.session(discover=True)


class TestPrompt:
    """Prompt markers."""

    def test_prompt_follows_mode(self, factory):
        """The continuation marker shows inside a block."""
        session = factory.session()
        assert session.prompt == "> "
        session.handle_line(";;")
        assert session.prompt == "... "
