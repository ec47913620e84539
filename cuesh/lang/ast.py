"""
Syntax tree for the configuration language.

Nodes are frozen dataclasses so a parsed declaration can be shared
between program snapshots without copying. Source positions do not take
part in equality.
"""

from dataclasses import dataclass, field
from typing import Any, Tuple, Union


@dataclass(frozen=True)
class Node:
    """Base syntax node."""


# =============================================================================
# Expressions
# =============================================================================

@dataclass(frozen=True)
class Literal(Node):
    """null, bool, int, float or string literal."""
    value: Any


@dataclass(frozen=True)
class TypeLit(Node):
    """Basic type: int, float, number, string, bool."""
    name: str


@dataclass(frozen=True)
class TopLit(Node):
    """`_`, the value that unifies with anything."""


@dataclass(frozen=True)
class BottomLit(Node):
    """`_|_`, the error value."""


@dataclass(frozen=True)
class Ident(Node):
    name: str
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Selector(Node):
    expr: "Expr"
    label: str


@dataclass(frozen=True)
class Index(Node):
    expr: "Expr"
    index: "Expr"


@dataclass(frozen=True)
class Call(Node):
    func: "Expr"
    args: Tuple["Expr", ...]


@dataclass(frozen=True)
class Unary(Node):
    op: str
    operand: "Expr"


@dataclass(frozen=True)
class Binary(Node):
    op: str
    left: "Expr"
    right: "Expr"


@dataclass(frozen=True)
class Paren(Node):
    expr: "Expr"


@dataclass(frozen=True)
class StructLit(Node):
    decls: Tuple["Field", ...]


@dataclass(frozen=True)
class ListLit(Node):
    elems: Tuple["Expr", ...]


Expr = Union[Literal, TypeLit, TopLit, BottomLit, Ident, Selector, Index,
             Call, Unary, Binary, Paren, StructLit, ListLit]


# =============================================================================
# Declarations
# =============================================================================

@dataclass(frozen=True)
class Field(Node):
    """`label: value`"""
    label: str
    value: Expr


@dataclass(frozen=True)
class ImportSpec(Node):
    """`import "path"` or `import name "path"`."""
    path: str
    alias: str = ""

    @property
    def name(self) -> str:
        """Identifier the import binds in its file."""
        return self.alias or self.path.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class File(Node):
    """
    Result of parsing a whole file or a fragment.

    Attributes:
        name: File name used in error messages
        decls: Declarations in source order
        imports: Import specs in source order
        unresolved: Identifiers not declared anywhere in this file
    """
    name: str
    decls: Tuple[Field, ...] = ()
    imports: Tuple[ImportSpec, ...] = ()
    unresolved: Tuple[Ident, ...] = ()
