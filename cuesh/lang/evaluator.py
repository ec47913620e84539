"""
Evaluator — Build a set of files into one value

All files of a program contribute declarations to a single root struct.
Fields are evaluated lazily and memoised per build, so declarations may
refer to fields declared later, in other files, or in later fragments.

Scoping:
- A reference resolves to the nearest enclosing struct declaring the label
- File scopes additionally see that file's imports
- `len` and the other predeclared builtins are visible everywhere

A reference that resolves nowhere is a build error (EvalError), not an
error value: it means the program is incomplete, not inconsistent.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Set, Tuple, Union

from ..errors import EvalError
from . import ast
from .builtins import BUILTIN_FUNCTIONS, load_package
from .parser import TOO_DEEP, parse_file
from .values import (
    Bottom, Builtin, ListValue, Package, Scalar, Struct, Top, TypeValue, Value,
    describe, unify,
)


class SourceUnit(Protocol):
    """Anything with a name, declarations and imports (ast.File, SourceFile)."""
    name: str
    decls: Sequence[ast.Field]
    imports: Sequence[ast.ImportSpec]


class Scope:
    """Lexical scope: one struct vertex plus the scope it is nested in."""

    def __init__(self, vertex: "Vertex", parent: Optional["Scope"] = None,
                 imports: Optional[Dict[str, Package]] = None):
        self.vertex = vertex
        self.parent = parent
        self.imports = imports or {}


@dataclass(frozen=True)
class FieldRef:
    """A not-yet-evaluated field: vertex plus label."""
    vertex: "Vertex"
    label: str


class Vertex:
    """
    Evaluation node for one struct.

    Struct literals declared for the same label are merged into one child
    vertex, so `a: {x: 1}` and `a: {y: x}` see each other's fields.
    Every other expression for a label is kept as a conjunct and unified
    into the field value when it is first requested.
    """

    def __init__(self, evaluator: "Evaluator", path: Tuple[str, ...] = ()):
        self.evaluator = evaluator
        self.path = path
        self.labels: List[str] = []
        self.conjuncts: Dict[str, List[Tuple[ast.Expr, Scope]]] = {}
        self.children: Dict[str, "Vertex"] = {}
        self._values: Dict[str, Value] = {}
        self._active: Set[str] = set()

    def has(self, label: str) -> bool:
        return label in self.conjuncts

    def add_field(self, decl: ast.Field, scope: Scope) -> None:
        label = decl.label
        if label not in self.conjuncts:
            self.labels.append(label)
            self.conjuncts[label] = []
        if isinstance(decl.value, ast.StructLit):
            child = self.children.get(label)
            if child is None:
                child = Vertex(self.evaluator, self.path + (label,))
                self.children[label] = child
            child_scope = Scope(child, parent=scope)
            for inner in decl.value.decls:
                child.add_field(inner, child_scope)
        else:
            self.conjuncts[label].append((decl.value, scope))

    def is_plain_struct(self, label: str) -> bool:
        """True when the field is made only of struct literals."""
        return label in self.children and not self.conjuncts.get(label)

    def value(self, label: str) -> Value:
        if label in self._values:
            return self._values[label]
        if label in self._active:
            return Bottom(f"cycle in reference to {'.'.join(self.path + (label,))}")
        self._active.add(label)
        try:
            result: Value = Top()
            child = self.children.get(label)
            if child is not None:
                result = child.to_value()
            for expr, scope in self.conjuncts.get(label, []):
                result = unify(result, self.evaluator.evaluate(expr, scope))
        finally:
            self._active.discard(label)
        self._values[label] = result
        return result

    def to_value(self) -> Struct:
        return Struct.from_pairs((label, self.value(label)) for label in self.labels)


@dataclass
class Instance:
    """A built program: its value plus the scope expressions evaluate in."""
    value: Struct
    scope: Scope
    evaluator: "Evaluator"


ARITHMETIC = {"+", "-", "*", "/"}
COMPARISONS = {"==", "!=", "<", "<=", ">", ">="}


def _incomplete(op: str, operand: Value) -> Bottom:
    return Bottom(f"incomplete value for {op}: {describe(operand)} is not concrete")


def _is_number(value: Value) -> bool:
    return isinstance(value, Scalar) and value.kind in ("int", "float")


class Evaluator:
    """Evaluates expressions against vertices of one build."""

    def new_root(self) -> Vertex:
        return Vertex(self)

    # -------------------------------------------------------------------------
    # References
    # -------------------------------------------------------------------------

    def _resolve(self, ident: ast.Ident, scope: Scope) -> Union[FieldRef, Value]:
        current: Optional[Scope] = scope
        while current is not None:
            if current.vertex.has(ident.name):
                return FieldRef(current.vertex, ident.name)
            if ident.name in current.imports:
                return current.imports[ident.name]
            current = current.parent
        if ident.name in BUILTIN_FUNCTIONS:
            return BUILTIN_FUNCTIONS[ident.name]
        position = f" ({ident.line}:{ident.column})" if ident.line else ""
        raise EvalError(f'reference "{ident.name}" not found{position}')

    def _lazy(self, expr: ast.Expr, scope: Scope) -> Union[FieldRef, Value]:
        """Evaluate reference chains without forcing structs still being built."""
        if isinstance(expr, ast.Ident):
            return self._resolve(expr, scope)
        if isinstance(expr, ast.Selector):
            base = self._lazy(expr.expr, scope)
            if isinstance(base, FieldRef) and base.vertex.is_plain_struct(base.label):
                child = base.vertex.children[base.label]
                if child.has(expr.label):
                    return FieldRef(child, expr.label)
            return self._select(self._force(base), expr.label)
        return self.evaluate(expr, scope)

    def _force(self, ref: Union[FieldRef, Value]) -> Value:
        if isinstance(ref, FieldRef):
            return ref.vertex.value(ref.label)
        return ref

    def _select(self, base: Value, label: str) -> Value:
        if isinstance(base, Bottom):
            return base
        if isinstance(base, Struct):
            found = base.get(label)
            if found is None:
                return Bottom(f'undefined field "{label}"')
            return found
        if isinstance(base, Package):
            member = base.members.get(label)
            if member is None:
                return Bottom(f'undefined field "{label}" in package "{base.path}"')
            return member
        if not base.is_concrete:
            return Bottom(f'incomplete value for selector "{label}": {describe(base)}')
        return Bottom(f'invalid selector "{label}" on {base.kind}')

    # -------------------------------------------------------------------------
    # Expressions
    # -------------------------------------------------------------------------

    def evaluate(self, expr: ast.Expr, scope: Scope) -> Value:
        if isinstance(expr, ast.Literal):
            return Scalar(expr.value)
        if isinstance(expr, ast.TypeLit):
            return TypeValue(expr.name)
        if isinstance(expr, ast.TopLit):
            return Top()
        if isinstance(expr, ast.BottomLit):
            return Bottom()
        if isinstance(expr, ast.Paren):
            return self.evaluate(expr.expr, scope)
        if isinstance(expr, (ast.Ident, ast.Selector)):
            return self._force(self._lazy(expr, scope))
        if isinstance(expr, ast.StructLit):
            vertex = Vertex(self, ("<struct>",))
            inner = Scope(vertex, parent=scope)
            for decl in expr.decls:
                vertex.add_field(decl, inner)
            return vertex.to_value()
        if isinstance(expr, ast.ListLit):
            return ListValue(tuple(self.evaluate(elem, scope) for elem in expr.elems))
        if isinstance(expr, ast.Index):
            return self._index(self.evaluate(expr.expr, scope), self.evaluate(expr.index, scope))
        if isinstance(expr, ast.Call):
            return self._call(expr, scope)
        if isinstance(expr, ast.Unary):
            return self._unary(expr.op, self.evaluate(expr.operand, scope))
        if isinstance(expr, ast.Binary):
            left = self.evaluate(expr.left, scope)
            right = self.evaluate(expr.right, scope)
            if expr.op == "&":
                return unify(left, right)
            return self._binary(expr.op, left, right)
        raise EvalError(f"cannot evaluate {type(expr).__name__}")

    def _index(self, base: Value, index: Value) -> Value:
        for operand in (base, index):
            if isinstance(operand, Bottom):
                return operand
            if not operand.is_concrete:
                return _incomplete("index", operand)
        if isinstance(base, ListValue):
            if not (isinstance(index, Scalar) and index.kind == "int"):
                return Bottom(f"invalid list index {describe(index)}")
            if not 0 <= index.value < len(base.items):
                return Bottom(f"index {index.value} out of range (list has {len(base.items)} elements)")
            return base.items[index.value]
        if isinstance(base, Struct):
            if not (isinstance(index, Scalar) and index.kind == "string"):
                return Bottom(f"invalid struct index {describe(index)}")
            return self._select(base, index.value)
        return Bottom(f"cannot index {base.kind}")

    def _call(self, expr: ast.Call, scope: Scope) -> Value:
        func = self.evaluate(expr.func, scope)
        if isinstance(func, Bottom):
            return func
        if not isinstance(func, Builtin):
            return Bottom(f"cannot call non-function {describe(func)}")
        if len(expr.args) != func.arity:
            return Bottom(f"{func.name}: expected {func.arity} argument(s), got {len(expr.args)}")
        args = [self.evaluate(arg, scope) for arg in expr.args]
        return func.func(*args)

    def _unary(self, op: str, operand: Value) -> Value:
        if isinstance(operand, Bottom):
            return operand
        if not operand.is_concrete:
            return _incomplete(op, operand)
        if op == "!":
            if isinstance(operand, Scalar) and operand.kind == "bool":
                return Scalar(not operand.value)
        elif _is_number(operand):
            return Scalar(-operand.value if op == "-" else operand.value)
        return Bottom(f"invalid operation {op}{describe(operand)}")

    def _binary(self, op: str, left: Value, right: Value) -> Value:
        for operand in (left, right):
            if isinstance(operand, Bottom):
                return operand
            if not operand.is_concrete:
                return _incomplete(op, operand)
        invalid = Bottom(
            f"invalid operation {describe(left)} {op} {describe(right)} "
            f"(mismatched types {left.kind} and {right.kind})"
        )
        if op in ("&&", "||"):
            if not (isinstance(left, Scalar) and left.kind == "bool"
                    and isinstance(right, Scalar) and right.kind == "bool"):
                return invalid
            if op == "&&":
                return Scalar(left.value and right.value)
            return Scalar(left.value or right.value)
        if op in COMPARISONS:
            return self._compare(op, left, right, invalid)
        if op in ARITHMETIC:
            return self._arithmetic(op, left, right, invalid)
        return Bottom(f"unknown operator {op}")

    def _compare(self, op: str, left: Value, right: Value, invalid: Bottom) -> Value:
        comparable = (
            (_is_number(left) and _is_number(right))
            or (isinstance(left, Scalar) and isinstance(right, Scalar) and left.kind == right.kind)
        )
        if op in ("==", "!="):
            if isinstance(left, Scalar) and isinstance(right, Scalar):
                if left.kind == "null" or right.kind == "null" or comparable:
                    equal = comparable and left.value == right.value
                    return Scalar(equal if op == "==" else not equal)
            elif left.kind == right.kind:
                equal = left == right
                return Scalar(equal if op == "==" else not equal)
            return invalid
        if not comparable or left.kind in ("bool", "null"):
            return invalid
        a, b = left.value, right.value
        if op == "<":
            return Scalar(a < b)
        if op == "<=":
            return Scalar(a <= b)
        if op == ">":
            return Scalar(a > b)
        return Scalar(a >= b)

    def _arithmetic(self, op: str, left: Value, right: Value, invalid: Bottom) -> Value:
        if _is_number(left) and _is_number(right):
            a, b = left.value, right.value
            if op == "+":
                return Scalar(a + b)
            if op == "-":
                return Scalar(a - b)
            if op == "*":
                return Scalar(a * b)
            if b == 0:
                return Bottom("division by zero")
            return Scalar(float(a) / b)
        if op == "+":
            if isinstance(left, Scalar) and isinstance(right, Scalar) \
                    and left.kind == right.kind == "string":
                return Scalar(left.value + right.value)
            if isinstance(left, ListValue) and isinstance(right, ListValue):
                return ListValue(left.items + right.items)
        if op == "*":
            for text, count in ((left, right), (right, left)):
                if isinstance(text, Scalar) and text.kind == "string" \
                        and isinstance(count, Scalar) and count.kind == "int":
                    return Scalar(text.value * max(count.value, 0))
        return invalid


# =============================================================================
# Collaborator entry points
# =============================================================================

def _file_scope(evaluator: Evaluator, root: Vertex, unit: SourceUnit) -> Scope:
    imports: Dict[str, Package] = {}
    for spec in unit.imports:
        package = load_package(spec.path)
        if package is None:
            raise EvalError(f'{unit.name or "-"}: package "{spec.path}" not found')
        imports[spec.name] = package
    return Scope(root, imports=imports)


def build(files: Iterable[SourceUnit]) -> Instance:
    """
    Build all files into one struct value.

    The primary (first) file's scope is kept for evaluating expressions
    against the result.

    Raises:
        EvalError: unknown import or unresolved reference
    """
    evaluator = Evaluator()
    root = evaluator.new_root()
    primary: Optional[Scope] = None
    for unit in files:
        scope = _file_scope(evaluator, root, unit)
        if primary is None:
            primary = scope
        for decl in unit.decls:
            root.add_field(decl, scope)
    try:
        value = root.to_value()
    except RecursionError:
        raise EvalError(TOO_DEEP) from None
    return Instance(value=value, scope=primary or Scope(root), evaluator=evaluator)


def evaluate_in_context(instance: Instance, expr: ast.Expr) -> Value:
    """Evaluate a standalone expression with the built program in scope."""
    try:
        return instance.evaluator.evaluate(expr, instance.scope)
    except RecursionError:
        raise EvalError(TOO_DEEP) from None


def compile_unit(text: str = "", name: str = "repl") -> Instance:
    """Build a standalone unit from source text (empty text gives `{}`)."""
    return build([parse_file(name, text)])
