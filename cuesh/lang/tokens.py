"""
Lexer — Tokenizer for the configuration language

Produces a flat token list for the parser. Newlines are not tokens;
a COMMA is inserted at a newline whenever the previous token can end a
declaration (identifiers, literals, closing brackets), the same rule Go
and CUE use for automatic separators.
"""

from dataclasses import dataclass
from typing import Any, List

from ..errors import ParseError


KEYWORDS = {
    "import",
    "true", "false", "null",
    "int", "float", "number", "string", "bool",
}

# Longest first so '==' wins over '='
OPERATORS = [
    "==", "!=", "<=", ">=", "&&", "||",
    "{", "}", "[", "]", "(", ")",
    ":", ",", ".",
    "+", "-", "*", "/", "<", ">", "!", "&",
]

ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
}

_ENDS_DECL = {"IDENT", "INT", "FLOAT", "STRING", "KEYWORD", "TOP", "BOTTOM"}
_CLOSERS = {")", "]", "}"}


@dataclass
class Token:
    """A token with its source position (1-based line and column)."""
    type: str
    value: Any
    line: int
    column: int

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value!r}, {self.line}:{self.column})"


class Lexer:
    """Tokenizer over one source text."""

    def __init__(self, text: str, filename: str = ""):
        self.text = text
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []

    def _peek(self, n: int = 0) -> str:
        i = self.pos + n
        return self.text[i] if i < len(self.text) else ""

    def _advance(self, n: int = 1) -> None:
        for _ in range(n):
            if self._peek() == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _error(self, message: str) -> ParseError:
        return ParseError(message, self.filename, self.line, self.column)

    def _emit(self, type_: str, value: Any, line: int, column: int) -> None:
        self.tokens.append(Token(type_, value, line, column))

    def _ends_declaration(self) -> bool:
        if not self.tokens:
            return False
        last = self.tokens[-1]
        return last.type in _ENDS_DECL or (last.type == "OP" and last.value in _CLOSERS)

    def _read_number(self) -> None:
        line, column = self.line, self.column
        start = self.pos
        is_float = False
        while self._peek().isdigit():
            self._advance()
        if self._peek() == "." and self._peek(1).isdigit():
            is_float = True
            self._advance()
            while self._peek().isdigit():
                self._advance()
        if self._peek() in ("e", "E"):
            is_float = True
            self._advance()
            if self._peek() in ("+", "-"):
                self._advance()
            if not self._peek().isdigit():
                raise self._error("invalid number literal")
            while self._peek().isdigit():
                self._advance()
        raw = self.text[start:self.pos]
        if is_float:
            self._emit("FLOAT", float(raw), line, column)
        else:
            self._emit("INT", int(raw), line, column)

    def _read_ident(self) -> None:
        line, column = self.line, self.column
        start = self.pos
        while self._peek() and (self._peek().isalnum() or self._peek() == "_"):
            self._advance()
        raw = self.text[start:self.pos]
        if raw == "_":
            self._emit("TOP", raw, line, column)
        elif raw in KEYWORDS:
            self._emit("KEYWORD", raw, line, column)
        else:
            self._emit("IDENT", raw, line, column)

    def _read_string(self) -> None:
        line, column = self.line, self.column
        if self.text.startswith('"""', self.pos):
            raise self._error("multi-line strings are not supported")
        self._advance()
        chars = []
        while True:
            ch = self._peek()
            if ch == "" or ch == "\n":
                raise ParseError("string literal not terminated", self.filename, line, column)
            if ch == '"':
                self._advance()
                break
            if ch == "\\":
                esc = self._peek(1)
                if esc in ESCAPES:
                    chars.append(ESCAPES[esc])
                    self._advance(2)
                elif esc == "u":
                    digits = self.text[self.pos + 2:self.pos + 6]
                    if len(digits) != 4 or any(c not in "0123456789abcdefABCDEF" for c in digits):
                        raise self._error("invalid unicode escape")
                    chars.append(chr(int(digits, 16)))
                    self._advance(6)
                else:
                    raise self._error(f"unknown escape sequence \\{esc}")
                continue
            chars.append(ch)
            self._advance()
        self._emit("STRING", "".join(chars), line, column)

    def tokenize(self) -> List[Token]:
        while True:
            ch = self._peek()
            if ch == "":
                break
            if ch == "\n":
                if self._ends_declaration():
                    self._emit("COMMA", "\n", self.line, self.column)
                self._advance()
            elif ch.isspace():
                self._advance()
            elif ch == "/" and self._peek(1) == "/":
                while self._peek() and self._peek() != "\n":
                    self._advance()
            elif ch.isdigit():
                self._read_number()
            elif ch == '"':
                self._read_string()
            elif self.text.startswith("_|_", self.pos):
                self._emit("BOTTOM", "_|_", self.line, self.column)
                self._advance(3)
            elif ch.isalpha() or ch == "_":
                self._read_ident()
            else:
                for op in OPERATORS:
                    if self.text.startswith(op, self.pos):
                        if op == ",":
                            self._emit("COMMA", ",", self.line, self.column)
                        else:
                            self._emit("OP", op, self.line, self.column)
                        self._advance(len(op))
                        break
                else:
                    raise self._error(f"illegal character {ch!r}")
        self._emit("EOF", None, self.line, self.column)
        return self.tokens


def tokenize(text: str, filename: str = "") -> List[Token]:
    """Tokenize source text, raising ParseError on illegal input."""
    return Lexer(text, filename).tokenize()
