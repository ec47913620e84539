"""
Parser — Source text to syntax tree

Two entry points, matching the two ways the session feeds text in:
- parse_file(): a whole file or a fragment of declarations
- parse_expression(): one standalone expression

Expressions use precedence climbing with CUE's binary precedence
(lowest first): & || && comparisons + - * /.
"""

from typing import Dict, Iterator, List, Optional, Set, Tuple

from ..errors import ParseError
from . import ast
from .builtins import BUILTIN_FUNCTIONS
from .tokens import Token, tokenize


BINARY_PRECEDENCE: Dict[str, int] = {
    "&": 2,
    "||": 3,
    "&&": 4,
    "==": 5, "!=": 5, "<": 5, "<=": 5, ">": 5, ">=": 5,
    "+": 6, "-": 6,
    "*": 7, "/": 7,
}

UNARY_OPERATORS = ("-", "+", "!")

# Nesting past the interpreter's recursion limit is reported, not raised
TOO_DEEP = "expression nested too deeply"

TYPE_NAMES = ("int", "float", "number", "string", "bool")
LITERAL_KEYWORDS = {"true": True, "false": False, "null": None}


class Parser:
    """Recursive descent parser over a token list."""

    def __init__(self, tokens: List[Token], filename: str = ""):
        self.tokens = tokens
        self.filename = filename
        self.pos = 0

    # -------------------------------------------------------------------------
    # Token helpers
    # -------------------------------------------------------------------------

    def _current(self) -> Token:
        return self.tokens[self.pos]

    def _peek(self, n: int = 1) -> Token:
        i = min(self.pos + n, len(self.tokens) - 1)
        return self.tokens[i]

    def _advance(self) -> Token:
        tok = self.tokens[self.pos]
        if tok.type != "EOF":
            self.pos += 1
        return tok

    def _is_op(self, value: str, tok: Optional[Token] = None) -> bool:
        tok = tok or self._current()
        return tok.type == "OP" and tok.value == value

    def _error(self, message: str, tok: Optional[Token] = None) -> ParseError:
        tok = tok or self._current()
        return ParseError(message, self.filename, tok.line, tok.column)

    def _describe(self, tok: Token) -> str:
        if tok.type == "EOF":
            return "end of input"
        if tok.type == "COMMA" and tok.value == "\n":
            return "newline"
        return repr(tok.value)

    def _expect_op(self, value: str) -> Token:
        if not self._is_op(value):
            raise self._error(f"expected {value!r}, found {self._describe(self._current())}")
        return self._advance()

    def _skip_commas(self) -> None:
        while self._current().type == "COMMA":
            self._advance()

    # -------------------------------------------------------------------------
    # Declarations
    # -------------------------------------------------------------------------

    def parse_file(self) -> Tuple[List[ast.Field], List[ast.ImportSpec]]:
        imports: List[ast.ImportSpec] = []
        decls: List[ast.Field] = []
        self._skip_commas()
        while self._current().type == "KEYWORD" and self._current().value == "import":
            imports.extend(self._parse_import())
            self._end_of_declaration()
        while self._current().type != "EOF":
            tok = self._current()
            if tok.type == "KEYWORD" and tok.value == "import":
                raise self._error("imports must appear before other declarations")
            decls.append(self._parse_field())
            self._end_of_declaration()
        return decls, imports

    def _end_of_declaration(self) -> None:
        tok = self._current()
        if tok.type == "COMMA":
            self._skip_commas()
        elif tok.type != "EOF":
            raise self._error(f"expected ',' or newline, found {self._describe(tok)}")

    def _parse_import(self) -> List[ast.ImportSpec]:
        self._advance()
        if self._is_op("("):
            self._advance()
            specs = []
            self._skip_commas()
            while not self._is_op(")"):
                specs.append(self._parse_import_spec())
                self._skip_commas()
            self._advance()
            return specs
        return [self._parse_import_spec()]

    def _parse_import_spec(self) -> ast.ImportSpec:
        alias = ""
        if self._current().type == "IDENT":
            alias = self._advance().value
        tok = self._current()
        if tok.type != "STRING":
            raise self._error(f"expected import path, found {self._describe(tok)}")
        self._advance()
        if not tok.value:
            raise self._error("empty import path", tok)
        return ast.ImportSpec(path=tok.value, alias=alias)

    def _is_label(self, tok: Token) -> bool:
        if tok.type in ("IDENT", "STRING"):
            return True
        return tok.type == "KEYWORD" and tok.value != "import"

    def _parse_field(self) -> ast.Field:
        tok = self._current()
        if not self._is_label(tok):
            raise self._error(f"expected label, found {self._describe(tok)}")
        self._advance()
        self._expect_op(":")
        if self._is_label(self._current()) and self._is_op(":", self._peek()):
            value: ast.Expr = ast.StructLit((self._parse_field(),))
        else:
            value = self.parse_expr()
        return ast.Field(label=tok.value, value=value)

    # -------------------------------------------------------------------------
    # Expressions
    # -------------------------------------------------------------------------

    def parse_expr(self, min_precedence: int = 1) -> ast.Expr:
        left = self._parse_unary()
        while True:
            tok = self._current()
            if tok.type != "OP" or tok.value not in BINARY_PRECEDENCE:
                return left
            precedence = BINARY_PRECEDENCE[tok.value]
            if precedence < min_precedence:
                return left
            self._advance()
            right = self.parse_expr(precedence + 1)
            left = ast.Binary(tok.value, left, right)

    def _parse_unary(self) -> ast.Expr:
        tok = self._current()
        if tok.type == "OP" and tok.value in UNARY_OPERATORS:
            self._advance()
            return ast.Unary(tok.value, self._parse_unary())
        return self._parse_postfix(self._parse_primary())

    def _parse_postfix(self, expr: ast.Expr) -> ast.Expr:
        while True:
            if self._is_op("."):
                self._advance()
                tok = self._current()
                if not self._is_label(tok):
                    raise self._error(f"expected selector label, found {self._describe(tok)}")
                self._advance()
                expr = ast.Selector(expr, tok.value)
            elif self._is_op("["):
                self._advance()
                index = self.parse_expr()
                self._expect_op("]")
                expr = ast.Index(expr, index)
            elif self._is_op("("):
                self._advance()
                args = self._parse_sequence(")")
                expr = ast.Call(expr, tuple(args))
            else:
                return expr

    def _parse_sequence(self, closer: str) -> List[ast.Expr]:
        items = []
        self._skip_commas()
        while not self._is_op(closer):
            items.append(self.parse_expr())
            if self._current().type == "COMMA":
                self._skip_commas()
            elif not self._is_op(closer):
                raise self._error(f"expected ',' or {closer!r}, found {self._describe(self._current())}")
        self._advance()
        return items

    def _parse_primary(self) -> ast.Expr:
        tok = self._current()
        if tok.type in ("INT", "FLOAT", "STRING"):
            self._advance()
            return ast.Literal(tok.value)
        if tok.type == "KEYWORD":
            if tok.value in LITERAL_KEYWORDS:
                self._advance()
                return ast.Literal(LITERAL_KEYWORDS[tok.value])
            if tok.value in TYPE_NAMES:
                self._advance()
                return ast.TypeLit(tok.value)
        if tok.type == "TOP":
            self._advance()
            return ast.TopLit()
        if tok.type == "BOTTOM":
            self._advance()
            return ast.BottomLit()
        if tok.type == "IDENT":
            self._advance()
            return ast.Ident(tok.value, tok.line, tok.column)
        if self._is_op("("):
            self._advance()
            self._skip_commas()
            inner = self.parse_expr()
            self._skip_commas()
            self._expect_op(")")
            return ast.Paren(inner)
        if self._is_op("{"):
            return self._parse_struct()
        if self._is_op("["):
            self._advance()
            return ast.ListLit(tuple(self._parse_sequence("]")))
        raise self._error(f"expected expression, found {self._describe(tok)}")

    def _parse_struct(self) -> ast.StructLit:
        self._expect_op("{")
        decls = []
        self._skip_commas()
        while not self._is_op("}"):
            if self._current().type == "EOF":
                raise self._error("struct literal not terminated")
            decls.append(self._parse_field())
            if self._current().type == "COMMA":
                self._skip_commas()
            elif not self._is_op("}"):
                raise self._error(f"expected ',' or '}}', found {self._describe(self._current())}")
        self._advance()
        return ast.StructLit(tuple(decls))


# =============================================================================
# Unresolved identifiers
# =============================================================================

def _walk_idents(expr: ast.Expr, scopes: List[Set[str]]) -> Iterator[ast.Ident]:
    """Yield identifiers in expr not declared in any of the enclosing scopes."""
    if isinstance(expr, ast.Ident):
        if not any(expr.name in scope for scope in scopes):
            yield expr
    elif isinstance(expr, ast.StructLit):
        inner = scopes + [{decl.label for decl in expr.decls}]
        for decl in expr.decls:
            yield from _walk_idents(decl.value, inner)
    elif isinstance(expr, ast.ListLit):
        for elem in expr.elems:
            yield from _walk_idents(elem, scopes)
    elif isinstance(expr, ast.Call):
        yield from _walk_idents(expr.func, scopes)
        for arg in expr.args:
            yield from _walk_idents(arg, scopes)
    elif isinstance(expr, ast.Binary):
        yield from _walk_idents(expr.left, scopes)
        yield from _walk_idents(expr.right, scopes)
    elif isinstance(expr, (ast.Selector, ast.Unary, ast.Paren)):
        inner = expr.operand if isinstance(expr, ast.Unary) else expr.expr
        yield from _walk_idents(inner, scopes)
    elif isinstance(expr, ast.Index):
        yield from _walk_idents(expr.expr, scopes)
        yield from _walk_idents(expr.index, scopes)


def find_unresolved(decls: List[ast.Field], imports: List[ast.ImportSpec]) -> List[ast.Ident]:
    """Identifiers that no declaration, import or builtin in the file binds."""
    scopes = [
        set(BUILTIN_FUNCTIONS),
        {spec.name for spec in imports},
        {decl.label for decl in decls},
    ]
    unresolved: List[ast.Ident] = []
    for decl in decls:
        unresolved.extend(_walk_idents(decl.value, scopes))
    return unresolved


# =============================================================================
# Entry points
# =============================================================================

def parse_file(name: str, text: str) -> ast.File:
    """
    Parse declarations and imports.

    Args:
        name: File name used in error positions
        text: Source text

    Returns:
        ast.File with declarations, imports and unresolved identifiers

    Raises:
        ParseError: On any lexical or syntax error
    """
    parser = Parser(tokenize(text, name), name)
    try:
        decls, imports = parser.parse_file()
        unresolved = find_unresolved(decls, imports)
    except RecursionError:
        raise ParseError(TOO_DEEP, name) from None
    return ast.File(
        name=name,
        decls=tuple(decls),
        imports=tuple(imports),
        unresolved=tuple(unresolved),
    )


def parse_expression(name: str, text: str) -> ast.Expr:
    """Parse a single expression; trailing input is an error."""
    try:
        return _parse_expression(name, text)
    except RecursionError:
        raise ParseError(TOO_DEEP, name) from None


def _parse_expression(name: str, text: str) -> ast.Expr:
    parser = Parser(tokenize(text, name), name)
    parser._skip_commas()
    if parser._current().type == "EOF":
        raise parser._error("expected expression, found end of input")
    expr = parser.parse_expr()
    parser._skip_commas()
    tok = parser._current()
    if tok.type != "EOF":
        raise parser._error(f"unexpected {parser._describe(tok)} after expression")
    return expr
