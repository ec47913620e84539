"""
Values — Evaluated configuration values

An evaluated program is a tree of immutable values:
- Struct: ordered, labelled fields
- ListValue: ordered elements
- Scalar: null, bool, int, float or string
- TypeValue: a basic type constraint (int, float, number, string, bool)
- Top: `_`, unifies with anything
- Bottom: `_|_`, an error value carrying a message

Builtin and Package exist only during evaluation (functions and
imported packages); they have no source form.

Unification (`&`) is the only way two values combine. It is commutative
apart from which conflict message is reported.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple


NUMBER_KINDS = ("int", "float")


class Value:
    """Base class for evaluated values."""

    kind = "value"

    @property
    def is_concrete(self) -> bool:
        """True for values that can be exported as data."""
        return True

    def lookup(self, path: Sequence[str]) -> Optional["Value"]:
        """Follow a label path through nested structs; None if it does not exist."""
        current: Value = self
        for label in path:
            if not isinstance(current, Struct):
                return None
            child = current.get(label)
            if child is None:
                return None
            current = child
        return current

    def exists(self, path: Sequence[str]) -> bool:
        return self.lookup(path) is not None

    def first_error(self) -> Optional["Bottom"]:
        """First error value in this tree, depth first in field order."""
        return None

    def fill(self, value: "Value", path: Sequence[str] = ()) -> "Value":
        """Unify value into self at the given label path."""
        return unify(self, nest(path, value))


@dataclass(frozen=True)
class Top(Value):
    kind = "_"

    @property
    def is_concrete(self) -> bool:
        return False


@dataclass(frozen=True)
class Bottom(Value):
    message: str = "explicit error (_|_ literal)"

    kind = "_|_"

    @property
    def is_concrete(self) -> bool:
        return False

    def first_error(self) -> Optional["Bottom"]:
        return self


@dataclass(frozen=True, eq=False)
class Scalar(Value):
    value: Any

    @property
    def kind(self) -> str:
        v = self.value
        if v is None:
            return "null"
        if isinstance(v, bool):
            return "bool"
        if isinstance(v, int):
            return "int"
        if isinstance(v, float):
            return "float"
        return "string"

    def __eq__(self, other: object) -> bool:
        # 1 == 1.0 == True in Python; values of different kinds never match here
        if not isinstance(other, Scalar):
            return NotImplemented
        return self.kind == other.kind and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.kind, self.value))


@dataclass(frozen=True)
class TypeValue(Value):
    name: str

    @property
    def kind(self) -> str:
        return self.name

    @property
    def is_concrete(self) -> bool:
        return False

    def accepts(self, kind: str) -> bool:
        """True when a concrete value of the given kind satisfies this type."""
        if self.name == "number":
            return kind in NUMBER_KINDS
        return self.name == kind


@dataclass(frozen=True, eq=False)
class Struct(Value):
    fields: Tuple[Tuple[str, Value], ...] = ()

    kind = "struct"

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, Value]]) -> "Struct":
        return cls(tuple(pairs))

    def get(self, label: str) -> Optional[Value]:
        for name, value in self.fields:
            if name == label:
                return value
        return None

    def labels(self) -> List[str]:
        return [name for name, _ in self.fields]

    def items(self) -> Iterator[Tuple[str, Value]]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def first_error(self) -> Optional[Bottom]:
        for _, value in self.fields:
            error = value.first_error()
            if error is not None:
                return error
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Struct):
            return NotImplemented
        return dict(self.fields) == dict(other.fields)

    def __hash__(self) -> int:
        return hash(frozenset(self.labels()))


@dataclass(frozen=True)
class ListValue(Value):
    items: Tuple[Value, ...] = ()

    kind = "list"

    def first_error(self) -> Optional[Bottom]:
        for item in self.items:
            error = item.first_error()
            if error is not None:
                return error
        return None


@dataclass(frozen=True, eq=False)
class Builtin(Value):
    """A callable builtin such as len or strings.ToUpper."""
    name: str
    func: Callable[..., Value]
    arity: int

    kind = "builtin"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Builtin) and other.name == self.name

    def __hash__(self) -> int:
        return hash(self.name)


@dataclass(frozen=True, eq=False)
class Package(Value):
    """An imported builtin package."""
    path: str
    members: Dict[str, Value]

    kind = "package"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Package) and other.path == self.path

    def __hash__(self) -> int:
        return hash(self.path)


# =============================================================================
# Helpers
# =============================================================================

def from_python(obj: Any) -> Value:
    """Convert plain Python data (dict, list, scalars) into a value tree."""
    if isinstance(obj, Value):
        return obj
    if isinstance(obj, dict):
        return Struct.from_pairs((str(k), from_python(v)) for k, v in obj.items())
    if isinstance(obj, (list, tuple)):
        return ListValue(tuple(from_python(v) for v in obj))
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return Scalar(obj)
    raise TypeError(f"cannot convert {type(obj).__name__} to a value")


def to_python(value: Value) -> Any:
    """Convert a concrete value tree back into plain Python data."""
    if isinstance(value, Struct):
        return {label: to_python(v) for label, v in value.items()}
    if isinstance(value, ListValue):
        return [to_python(v) for v in value.items]
    if isinstance(value, Scalar):
        return value.value
    raise ValueError(f"value of kind {value.kind} is not concrete")


def describe(value: Value) -> str:
    """Short description used in conflict messages."""
    if isinstance(value, Scalar):
        if value.kind == "string":
            return f'"{value.value}"'
        if value.kind == "bool":
            return "true" if value.value else "false"
        if value.kind == "null":
            return "null"
        return repr(value.value)
    if isinstance(value, TypeValue):
        return value.name
    return value.kind


def nest(path: Sequence[str], value: Value) -> Value:
    """Wrap value in structs so it sits at path."""
    for label in reversed(list(path)):
        value = Struct(((label, value),))
    return value


def _conflict(a: Value, b: Value) -> Bottom:
    if a.kind == b.kind or (isinstance(a, TypeValue) and isinstance(b, TypeValue)):
        return Bottom(f"conflicting values {describe(a)} and {describe(b)}")
    return Bottom(
        f"conflicting values {describe(a)} and {describe(b)} "
        f"(mismatched types {_kind_name(a)} and {_kind_name(b)})"
    )


def _kind_name(value: Value) -> str:
    if isinstance(value, TypeValue):
        return value.name
    return value.kind


def unify(a: Value, b: Value) -> Value:
    """Combine two values; incompatible values produce a Bottom."""
    if isinstance(a, Bottom):
        return a
    if isinstance(b, Bottom):
        return b
    if isinstance(a, Top):
        return b
    if isinstance(b, Top):
        return a

    if isinstance(a, TypeValue) and isinstance(b, TypeValue):
        if a.name == b.name:
            return a
        if a.name == "number" and b.name in NUMBER_KINDS:
            return b
        if b.name == "number" and a.name in NUMBER_KINDS:
            return a
        return _conflict(a, b)

    if isinstance(a, TypeValue) and isinstance(b, Scalar):
        return b if a.accepts(b.kind) else _conflict(a, b)
    if isinstance(b, TypeValue) and isinstance(a, Scalar):
        return a if b.accepts(a.kind) else _conflict(a, b)

    if isinstance(a, Scalar) and isinstance(b, Scalar):
        return a if a == b else _conflict(a, b)

    if isinstance(a, Struct) and isinstance(b, Struct):
        merged: Dict[str, Value] = dict(a.fields)
        for label, value in b.fields:
            merged[label] = unify(merged[label], value) if label in merged else value
        return Struct(tuple(merged.items()))

    if isinstance(a, ListValue) and isinstance(b, ListValue):
        if len(a.items) != len(b.items):
            return Bottom(
                f"incompatible list lengths ({len(a.items)} and {len(b.items)})"
            )
        return ListValue(tuple(unify(x, y) for x, y in zip(a.items, b.items)))

    if isinstance(a, (Builtin, Package)) or isinstance(b, (Builtin, Package)):
        if a == b:
            return a
    return _conflict(a, b)
