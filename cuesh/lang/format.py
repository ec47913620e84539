"""
Formatter — Values and syntax trees back to canonical source

Output uses tab indentation and one field per line. Everything render()
produces for a value without errors parses back to an equal value, which
is what save and restore rely on.
"""

import json
import math
import re
from typing import List, Union

from ..errors import FormatError
from . import ast
from .values import (
    Bottom, Builtin, ListValue, Package, Scalar, Struct, Top, TypeValue, Value,
)


IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
RESERVED_LABELS = {"import", "_"}

Renderable = Union[Value, ast.Node]


def format_label(label: str) -> str:
    """Quote labels that are not plain identifiers."""
    if IDENTIFIER.match(label) and label not in RESERVED_LABELS:
        return label
    return json.dumps(label, ensure_ascii=False)


def format_scalar(value) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise FormatError(f"cannot format non-finite number {value}")
        return repr(value)
    return json.dumps(value, ensure_ascii=False)


# =============================================================================
# Values
# =============================================================================

def _is_inline(value: Value) -> bool:
    return isinstance(value, (Scalar, TypeValue, Top))


def _value(value: Value, depth: int) -> str:
    if isinstance(value, Scalar):
        return format_scalar(value.value)
    if isinstance(value, TypeValue):
        return value.name
    if isinstance(value, Top):
        return "_"
    if isinstance(value, Bottom):
        return f"_|_ // {value.message}"
    if isinstance(value, Struct):
        if not len(value):
            return "{}"
        inner = "\t" * (depth + 1)
        lines = ["{"]
        lines.extend(f"{inner}{format_label(label)}: {_value(v, depth + 1)}" for label, v in value.items())
        lines.append("\t" * depth + "}")
        return "\n".join(lines)
    if isinstance(value, ListValue):
        if not value.items:
            return "[]"
        if all(_is_inline(item) for item in value.items):
            return "[" + ", ".join(_value(item, depth) for item in value.items) + "]"
        inner = "\t" * (depth + 1)
        lines = ["["]
        for item in value.items:
            text = _value(item, depth + 1)
            if isinstance(item, Bottom):
                # comment would swallow the separator
                lines.append(f"{inner}{text}")
            else:
                lines.append(f"{inner}{text},")
        lines.append("\t" * depth + "]")
        return "\n".join(lines)
    if isinstance(value, Builtin):
        raise FormatError(f"cannot format builtin {value.name}")
    if isinstance(value, Package):
        raise FormatError(f'cannot format package "{value.path}"')
    raise FormatError(f"cannot format value of kind {value.kind}")


def render_file(value: Value) -> str:
    """Render a struct as the body of a file (no enclosing braces)."""
    if not isinstance(value, Struct):
        raise FormatError(f"only structs can be rendered as a file, got {value.kind}")
    try:
        return "".join(
            f"{format_label(label)}: {_value(v, 0)}\n" for label, v in value.items()
        )
    except RecursionError:
        raise FormatError("value nested too deeply") from None


# =============================================================================
# Syntax
# =============================================================================

def _expr(node: ast.Expr, depth: int) -> str:
    if isinstance(node, ast.Literal):
        return format_scalar(node.value)
    if isinstance(node, ast.TypeLit):
        return node.name
    if isinstance(node, ast.TopLit):
        return "_"
    if isinstance(node, ast.BottomLit):
        return "_|_"
    if isinstance(node, ast.Ident):
        return node.name
    if isinstance(node, ast.Selector):
        return f"{_expr(node.expr, depth)}.{format_label(node.label)}"
    if isinstance(node, ast.Index):
        return f"{_expr(node.expr, depth)}[{_expr(node.index, depth)}]"
    if isinstance(node, ast.Call):
        args = ", ".join(_expr(arg, depth) for arg in node.args)
        return f"{_expr(node.func, depth)}({args})"
    if isinstance(node, ast.Unary):
        return f"{node.op}{_expr(node.operand, depth)}"
    if isinstance(node, ast.Binary):
        return f"{_expr(node.left, depth)} {node.op} {_expr(node.right, depth)}"
    if isinstance(node, ast.Paren):
        return f"({_expr(node.expr, depth)})"
    if isinstance(node, ast.ListLit):
        return "[" + ", ".join(_expr(elem, depth) for elem in node.elems) + "]"
    if isinstance(node, ast.StructLit):
        if not node.decls:
            return "{}"
        lines = ["{"]
        lines.extend("\t" * (depth + 1) + _field(decl, depth + 1) for decl in node.decls)
        lines.append("\t" * depth + "}")
        return "\n".join(lines)
    raise FormatError(f"cannot format node {type(node).__name__}")


def _field(decl: ast.Field, depth: int) -> str:
    return f"{format_label(decl.label)}: {_expr(decl.value, depth)}"


def _import(spec: ast.ImportSpec) -> str:
    path = json.dumps(spec.path, ensure_ascii=False)
    if spec.alias:
        return f"import {spec.alias} {path}"
    return f"import {path}"


def render_source(decls, imports=()) -> str:
    """Render imports and declarations as file text."""
    lines: List[str] = [_import(spec) for spec in imports]
    if lines and decls:
        lines.append("")
    lines.extend(_field(decl, 0) for decl in decls)
    return "\n".join(lines) + ("\n" if lines else "")


def render(node: Renderable) -> str:
    """
    Render a value or a syntax node as source text.

    Raises:
        FormatError: builtins, packages and non-finite floats have no source
            form; nesting past the recursion limit
    """
    try:
        return _render(node)
    except RecursionError:
        raise FormatError("value nested too deeply") from None


def _render(node: Renderable) -> str:
    if isinstance(node, Value):
        return _value(node, 0)
    if isinstance(node, ast.File):
        return render_source(node.decls, node.imports)
    if isinstance(node, ast.Field):
        return _field(node, 0)
    if isinstance(node, ast.ImportSpec):
        return _import(node)
    if isinstance(node, ast.Node):
        return _expr(node, 0)
    raise FormatError(f"cannot format {type(node).__name__}")
