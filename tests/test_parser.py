"""
Tests for the lexer and parser — Source text to syntax tree

These tests validate:
- Automatic separators at newlines
- Field, import and expression syntax
- Unresolved identifier markers
- Error positions
"""

import pytest

from cuesh.errors import ParseError
from cuesh.lang import ast
from cuesh.lang.parser import parse_expression, parse_file
from cuesh.lang.tokens import tokenize


class TestLexer:
    """Tokenization rules."""

    def test_newline_after_value_is_a_separator(self):
        """A newline after a literal becomes a COMMA."""
        types = [t.type for t in tokenize("a: 1\nb: 2")]
        assert types == ["IDENT", "OP", "INT", "COMMA", "IDENT", "OP", "INT", "EOF"]

    def test_newline_after_operator_is_not_a_separator(self):
        """An expression may continue on the next line after an operator."""
        types = [t.type for t in tokenize("a: 1 +\n2")]
        assert "COMMA" not in types

    def test_comments_are_skipped(self):
        """Line comments produce no tokens."""
        tokens = tokenize("// nothing here\na: 1 // trailing")
        assert [t.value for t in tokens if t.type == "IDENT"] == ["a"]

    def test_top_and_bottom(self):
        """`_` is top and `_|_` is bottom."""
        types = [t.type for t in tokenize("_ _|_")]
        assert types[:2] == ["TOP", "BOTTOM"]

    def test_string_escapes(self):
        """Escapes and unicode escapes are decoded."""
        tokens = tokenize(r'"a\tb\u00e9\""')
        assert tokens[0].value == 'a\tbé"'

    def test_float_and_int(self):
        """Numbers keep their kind."""
        tokens = tokenize("1 2.5 1e3")
        assert [t.type for t in tokens[:3]] == ["INT", "FLOAT", "FLOAT"]
        assert tokens[2].value == 1000.0

    def test_unterminated_string(self):
        """An open string is an error at its start."""
        with pytest.raises(ParseError) as exc:
            tokenize('a: "abc', "f.cue")
        assert exc.value.line == 1
        assert exc.value.column == 4

    def test_illegal_character(self):
        """Characters outside the grammar are rejected."""
        with pytest.raises(ParseError, match="illegal character"):
            tokenize("a: 1 @")


class TestParseFile:
    """Declarations and imports."""

    def test_fields_in_order(self):
        """Declarations keep source order."""
        parsed = parse_file("f.cue", "b: 1\na: 2")
        assert [d.label for d in parsed.decls] == ["b", "a"]

    def test_comma_separated_fields(self):
        """Commas separate fields on one line."""
        parsed = parse_file("f.cue", "a: 1, b: 2")
        assert len(parsed.decls) == 2

    def test_label_shorthand(self):
        """`a: b: 1` nests a struct."""
        parsed = parse_file("f.cue", "a: b: 1")
        value = parsed.decls[0].value
        assert isinstance(value, ast.StructLit)
        assert value.decls[0] == ast.Field("b", ast.Literal(1))

    def test_quoted_label(self):
        """String labels are allowed."""
        parsed = parse_file("f.cue", '"my-label": 1')
        assert parsed.decls[0].label == "my-label"

    def test_imports(self):
        """Single and grouped imports, with and without alias."""
        parsed = parse_file("f.cue", 'import "strings"\nimport (\n\tm "math"\n)\na: 1')
        assert [spec.name for spec in parsed.imports] == ["strings", "m"]
        assert parsed.imports[1].path == "math"

    def test_import_after_declaration_rejected(self):
        """Imports must come first."""
        with pytest.raises(ParseError, match="imports must appear before"):
            parse_file("f.cue", 'a: 1\nimport "strings"')

    def test_empty_text(self):
        """Empty text is an empty file."""
        parsed = parse_file("f.cue", "")
        assert parsed.decls == ()
        assert parsed.imports == ()

    def test_unresolved_identifiers(self):
        """References to undeclared names are marked."""
        parsed = parse_file("f.cue", "a: b + 1\nc: a")
        assert [ident.name for ident in parsed.unresolved] == ["b"]

    def test_struct_literal_scope_resolves(self):
        """Labels of an enclosing struct literal are in scope."""
        parsed = parse_file("f.cue", "a: {x: 1, y: x}")
        assert parsed.unresolved == ()

    def test_missing_value(self):
        """A label without a value is an error with a position."""
        with pytest.raises(ParseError) as exc:
            parse_file("f.cue", "a:")
        assert str(exc.value).startswith("f.cue:1:3:")

    def test_two_values_on_one_line(self):
        """Declarations need a separator."""
        with pytest.raises(ParseError, match="expected ',' or newline"):
            parse_file("f.cue", "a: 1 b: 2")


class TestParseExpression:
    """Standalone expressions."""

    def test_precedence(self):
        """Multiplication binds tighter than addition."""
        expr = parse_expression("<expr>", "1 + 2 * 3")
        assert expr == ast.Binary("+", ast.Literal(1), ast.Binary("*", ast.Literal(2), ast.Literal(3)))

    def test_unification_binds_loosest(self):
        """`&` has the lowest precedence."""
        expr = parse_expression("<expr>", "int & 1 + 1")
        assert isinstance(expr, ast.Binary)
        assert expr.op == "&"

    def test_selector_index_call(self):
        """Postfix operators chain."""
        expr = parse_expression("<expr>", "len(a.b[0])")
        assert isinstance(expr, ast.Call)
        assert isinstance(expr.args[0], ast.Index)
        assert isinstance(expr.args[0].expr, ast.Selector)

    def test_declaration_is_not_an_expression(self):
        """A field is rejected as an expression."""
        with pytest.raises(ParseError, match="after expression"):
            parse_expression("<expr>", "a: 1")

    def test_empty_expression(self):
        """Empty input is not an expression."""
        with pytest.raises(ParseError, match="end of input"):
            parse_expression("<expr>", "")

    def test_struct_and_list_literals(self):
        """Composite literals parse as expressions."""
        expr = parse_expression("<expr>", "{a: [1, 2]}")
        assert isinstance(expr, ast.StructLit)
        assert isinstance(expr.decls[0].value, ast.ListLit)
